"""Orchestrator — runs the video-to-GIF pipeline for a Manifest."""

import asyncio
import logging
import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from gifforge.analyzers.video_info import resolve_video_info
from gifforge.config import Settings, load_settings
from gifforge.encoders.gifski import encode_gif
from gifforge.extractors.frames import extract_frames
from gifforge.ffutil import ConversionError, WorkDirError
from gifforge.manifest import Manifest
from gifforge.models import ExtractionPlan, VideoStreamInfo

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    IDLE = "Idle"
    RESOLVING_INFO = "Resolving video info"
    EXTRACTING_FRAMES = "Extracting frames"
    ENCODING = "Encoding GIF"
    DONE = "Done"
    FAILED = "Failed"


ProgressCallback = Callable[[Stage, float], None]


@dataclass
class EngineResult:
    output_path: Path
    video_info: VideoStreamInfo
    plan: ExtractionPlan
    frame_count: int = 0


def _clean_up_work_dir(work_dir: Path) -> None:
    logger.info("removing tmp_dir: %s", work_dir)
    try:
        shutil.rmtree(work_dir)
    except OSError as e:
        logger.warning("unable to clean up tmp_dir: %s. error: %s", work_dir, e)


async def convert(
    manifest: Manifest,
    on_progress: ProgressCallback | None = None,
    settings: Settings | None = None,
) -> EngineResult:
    """Execute the full conversion pipeline.

    Args:
        manifest: Conversion request.
        on_progress: Optional callback(stage, fraction_complete).
        settings: Tool locations and defaults; read from the environment if omitted.

    Raises:
        ConversionError: from whichever phase failed. The working directory
            is removed before the error propagates.
    """
    settings = settings or load_settings()
    stage = Stage.IDLE

    def _progress(frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    def _enter(next_stage: Stage) -> None:
        nonlocal stage
        logger.info("%s -> %s", stage.value, next_stage.value)
        stage = next_stage

    work_dir: Path | None = None
    try:
        _enter(Stage.RESOLVING_INFO)
        _progress(0.0)
        info = await resolve_video_info(manifest.input, ffprobe=settings.ffprobe)

        try:
            work_dir = Path(tempfile.mkdtemp(prefix="gifforge_", dir=settings.temp_dir))
        except OSError as e:
            raise WorkDirError(f"unable to create tmp_dir: {e}") from e
        logger.info("writing frames to tmp_dir: %s", work_dir)

        _enter(Stage.EXTRACTING_FRAMES)
        plan = await extract_frames(
            manifest.input,
            manifest.fps,
            info,
            manifest.keep_original_size,
            work_dir,
            on_progress=_progress,
            ffmpeg=settings.ffmpeg,
            max_width=settings.max_width,
        )

        _enter(Stage.ENCODING)
        frame_count = await encode_gif(
            work_dir,
            manifest.output,
            fps=manifest.fps,
            quality=settings.quality,
            on_progress=_progress,
            gifski=settings.gifski,
        )
    except ConversionError:
        logger.info("pipeline failed while in stage: %s", stage.value)
        _enter(Stage.FAILED)
        raise
    finally:
        if work_dir is not None:
            _clean_up_work_dir(work_dir)

    _enter(Stage.DONE)
    _progress(1.0)
    return EngineResult(
        output_path=manifest.output,
        video_info=info,
        plan=plan,
        frame_count=frame_count,
    )


def process(
    manifest: Manifest,
    on_progress: ProgressCallback | None = None,
    settings: Settings | None = None,
) -> EngineResult:
    """Blocking wrapper around :func:`convert`."""
    return asyncio.run(convert(manifest, on_progress=on_progress, settings=settings))
