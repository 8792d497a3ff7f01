"""GIF encoder — turns the extracted frames into a GIF with gifski."""

import logging
from pathlib import Path
from typing import Callable

from gifforge import ffutil
from gifforge.extractors.frames import FRAME_GLOB, PHASE_BOUNDARY

logger = logging.getLogger(__name__)

DEFAULT_QUALITY = 80


def encoding_progress(text: str, expected_total: int) -> float | None:
    """Map a gifski output chunk to overall progress in [0.5, 1.0]."""
    frame = ffutil.parse_gifski_frame(text)
    if frame is None or not expected_total:
        return None
    return PHASE_BOUNDARY + min(frame / expected_total / 2, 0.5)


async def encode_gif(
    work_dir: Path,
    output_path: Path,
    *,
    fps: float | None = None,
    quality: int = DEFAULT_QUALITY,
    on_progress: Callable[[float], None] | None = None,
    gifski: str = "gifski",
) -> int:
    """Encode the frames in *work_dir* into *output_path*.

    Returns the number of frames handed to gifski.
    """
    # Counted before encoding starts: these are the frames actually produced.
    try:
        expected_total = sum(1 for _ in work_dir.iterdir())
        frames = sorted(work_dir.glob(FRAME_GLOB))
    except OSError as e:
        raise ffutil.WorkDirError(f"unable to read frames from {work_dir}: {e}") from e
    if not frames:
        raise ffutil.ToolError(f"no frames were extracted to {work_dir}")

    logger.info("creating gif from %d frames, output path: %s", len(frames), output_path)

    args = ["-o", str(output_path), "--quality", str(quality)]
    if fps is not None:
        args += ["--fps", f"{fps:g}"]
    args += [str(f) for f in frames]

    def on_stdout(chunk: bytes) -> None:
        frac = encoding_progress(chunk.decode("utf-8", errors="replace"), expected_total)
        if frac is not None and on_progress:
            on_progress(frac)

    result = await ffutil.execute(gifski, args, on_stdout=on_stdout)
    ffutil.raise_for_result(
        result,
        gifski,
        hint=f"make sure '{gifski}' is installed and available in PATH.",
    )

    if on_progress:
        on_progress(1.0)
    return len(frames)
