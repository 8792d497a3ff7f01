"""
Runtime settings for gifforge.

Every field can be overridden through an environment variable with the
``GIFFORGE_`` prefix, e.g. ``GIFFORGE_GIFSKI=/opt/bin/gifski`` or
``GIFFORGE_MAX_WIDTH=640``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """External tool locations and conversion defaults."""

    model_config = SettingsConfigDict(env_prefix="GIFFORGE_", case_sensitive=False)

    ffmpeg: str = "ffmpeg"
    ffprobe: str = "ffprobe"
    gifski: str = "gifski"

    max_width: Annotated[int, Field(
        gt=0,
        description="Frames wider than this are downscaled unless --original-size is given",
    )] = 1024

    quality: Annotated[int, Field(
        ge=1,
        le=100,
        description="gifski --quality value",
    )] = 80

    default_fps: Annotated[float, Field(
        gt=0.0,
        allow_inf_nan=False,
        description="Frame rate used when --fps is not given",
    )] = 12.0

    temp_dir: Annotated[Path | None, Field(
        description="Parent directory for the per-run frame directory (system default if unset)",
    )] = None

    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level


def load_settings() -> Settings:
    """Create a Settings instance from the current environment."""
    return Settings()
