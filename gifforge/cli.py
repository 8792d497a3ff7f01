"""Thin CLI entry point — builds a Manifest and calls the engine."""

import argparse
import math
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

from gifforge import ffutil
from gifforge.config import load_settings
from gifforge.engine import Stage, process
from gifforge.ffutil import ConversionError
from gifforge.log import setup_logging
from gifforge.manifest import Manifest, default_output_path

VERSION = "0.1.0"


def build_parser(default_fps: float) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gifforge",
        description="Convert a video into an animated GIF using ffmpeg and gifski.",
    )
    parser.add_argument("video", nargs="?", type=Path, help="Input video file")
    parser.add_argument(
        "--original-size",
        action="store_true",
        help="Don't downscale; keep the original size of the video",
    )
    parser.add_argument(
        "--fps", type=float, default=default_fps, help=f"Frames per second (default: {default_fps:g})"
    )
    parser.add_argument(
        "--output-path", "-o", type=Path,
        help="Output GIF path (default: <video name>.gif in the current directory)",
    )
    parser.add_argument("--no-progress", action="store_true", help="Don't show a progress bar")
    parser.add_argument("--verbose", "-v", action="count", default=0, help="More logging (-vv for commands)")
    parser.add_argument("--check-tools", action="store_true", help="Verify external tools and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def _log_level(verbose: int, default: str) -> str:
    if verbose >= 2:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return default


def main(argv: list[str] | None = None) -> None:
    try:
        settings = load_settings()
    except ValidationError as e:
        print(f"invalid GIFFORGE_* setting: {e}", file=sys.stderr)
        sys.exit(1)
    parser = build_parser(settings.default_fps)
    args = parser.parse_args(argv)

    setup_logging(_log_level(args.verbose, settings.log_level))

    if args.check_tools:
        missing = ffutil.check_tools(settings.ffmpeg, settings.ffprobe, settings.gifski)
        for cmd in missing:
            print(f"missing: {cmd}", file=sys.stderr)
        if missing:
            sys.exit(1)
        print("All tools found.")
        return

    if args.video is None:
        parser.error("the following arguments are required: video")
    if not math.isfinite(args.fps) or args.fps <= 0:
        parser.error("--fps must be a positive number")

    m = Manifest(
        input=args.video,
        output=args.output_path or default_output_path(args.video),
        fps=args.fps,
        keep_original_size=args.original_size,
    )

    try:
        if args.no_progress:
            result = process(m, settings=settings)
        else:
            with Progress(
                TextColumn("{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=Console(stderr=True),
                transient=True,
            ) as bar:
                task = bar.add_task(Stage.IDLE.value, total=1.0)

                def on_progress(stage: Stage, frac: float) -> None:
                    bar.update(task, completed=frac, description=stage.value)

                result = process(m, on_progress=on_progress, settings=settings)
    except ConversionError as e:
        print(str(e).rstrip(), file=sys.stderr)
        sys.exit(1)

    print(result.output_path)
