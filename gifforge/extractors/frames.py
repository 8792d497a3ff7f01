"""Frame extraction: plans the ffmpeg filter chain and runs ffmpeg."""

import logging
import math
from pathlib import Path
from typing import Callable

from gifforge import ffutil
from gifforge.models import ExtractionPlan, VideoStreamInfo

logger = logging.getLogger(__name__)

RESOLUTION_MAX_WIDTH = 1024

FRAME_EXT = ".png"
FRAME_PATTERN = f"frame-%08d{FRAME_EXT}"
FRAME_GLOB = f"frame-*{FRAME_EXT}"

FFMPEG_ARGS = ["-loglevel", "error", "-progress", "-", "-nostats"]

# Fraction of overall progress at which extraction hands over to encoding.
PHASE_BOUNDARY = 0.5


def expected_frame_count(info: VideoStreamInfo, target_fps: float) -> int | None:
    """Estimate how many frames ffmpeg will write at *target_fps*.

    The source frame rate is inferred from packet count over the last
    packet's timestamp. Returns None when that is not computable.
    """
    if info.total_packets is None or info.last_packet_timestamp is None:
        return None
    try:
        duration = float(info.last_packet_timestamp)
    except ValueError:
        return None
    if not math.isfinite(duration) or duration <= 0:
        return None
    if info.total_packets <= 0 or target_fps <= 0:
        return None

    original_fps = info.total_packets / duration
    return math.floor(info.total_packets / (original_fps / target_fps))


def plan_extraction(
    info: VideoStreamInfo,
    target_fps: float,
    keep_original_size: bool,
    *,
    max_width: int = RESOLUTION_MAX_WIDTH,
) -> ExtractionPlan:
    """Build the scale/fps filters for *info*.

    Only the width is checked against *max_width*; height is derived by
    ffmpeg to keep the aspect ratio.
    """
    scale_filter = None
    if not keep_original_size and info.width > max_width:
        scale_filter = f"scale={max_width}:-1"

    return ExtractionPlan(
        scale_filter=scale_filter,
        fps_filter=f"fps={target_fps:g}",
        expected_frame_count=expected_frame_count(info, target_fps),
    )


def extraction_progress(text: str, expected_total: int | None) -> float | None:
    """Map an ffmpeg ``-progress`` chunk to overall progress in [0, 0.5]."""
    frame = ffutil.parse_frame_number(text)
    if frame is None or not expected_total:
        return None
    return min(frame / expected_total / 2, PHASE_BOUNDARY)


async def extract_frames(
    video_path: Path,
    target_fps: float,
    info: VideoStreamInfo,
    keep_original_size: bool,
    work_dir: Path,
    *,
    on_progress: Callable[[float], None] | None = None,
    ffmpeg: str = "ffmpeg",
    max_width: int = RESOLUTION_MAX_WIDTH,
) -> ExtractionPlan:
    """Write numbered PNG frames of *video_path* into *work_dir*."""
    plan = plan_extraction(info, target_fps, keep_original_size, max_width=max_width)
    if plan.scale_filter:
        logger.info("downscaling to width: %d", max_width)
    if plan.expected_frame_count is None:
        logger.info("expected frame count unknown; extraction progress disabled")

    args = [
        *FFMPEG_ARGS,
        "-i", str(video_path),
        "-vf", plan.video_filter,
        str(work_dir / FRAME_PATTERN),
    ]

    def on_stdout(chunk: bytes) -> None:
        frac = extraction_progress(
            chunk.decode("utf-8", errors="replace"), plan.expected_frame_count
        )
        if frac is not None and on_progress:
            on_progress(frac)

    try:
        result = await ffutil.execute(ffmpeg, args, on_stdout=on_stdout)
    finally:
        if on_progress:
            on_progress(PHASE_BOUNDARY)

    ffutil.raise_for_result(
        result,
        ffmpeg,
        hint=f"make sure '{ffmpeg}' is installed and available from PATH.",
    )
    logger.info("finished generating frames")
    return plan
