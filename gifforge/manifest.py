"""Conversion request — the contract between the CLI and the engine."""

import math
from dataclasses import dataclass
from pathlib import Path

DEFAULT_FPS = 12.0


@dataclass
class Manifest:
    """A single video-to-GIF conversion."""

    input: Path
    output: Path
    fps: float = DEFAULT_FPS
    keep_original_size: bool = False

    def __post_init__(self) -> None:
        if not math.isfinite(self.fps) or self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")


def default_output_path(video: str | Path) -> Path:
    """``<input name without extension>.gif`` in the current directory."""
    return Path(f"{Path(video).stem}.gif")
