"""Tests for the manifest and settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from gifforge.config import Settings
from gifforge.manifest import Manifest


class TestManifest:
    def test_minimal(self):
        m = Manifest(input=Path("in.mp4"), output=Path("in.gif"))
        assert m.fps == 12.0
        assert m.keep_original_size is False

    def test_custom_values(self):
        m = Manifest(input=Path("in.mp4"), output=Path("x.gif"), fps=24, keep_original_size=True)
        assert m.fps == 24
        assert m.keep_original_size is True

    @pytest.mark.parametrize("fps", [0, -1.5, float("nan"), float("inf")])
    def test_rejects_non_positive_fps(self, fps):
        with pytest.raises(ValueError, match="fps must be positive"):
            Manifest(input=Path("in.mp4"), output=Path("in.gif"), fps=fps)


class TestSettings:
    def test_defaults(self, monkeypatch):
        for var in ("GIFFORGE_FFMPEG", "GIFFORGE_MAX_WIDTH", "GIFFORGE_QUALITY", "GIFFORGE_LOG_LEVEL"):
            monkeypatch.delenv(var, raising=False)
        s = Settings()
        assert s.ffmpeg == "ffmpeg"
        assert s.ffprobe == "ffprobe"
        assert s.gifski == "gifski"
        assert s.max_width == 1024
        assert s.quality == 80
        assert s.default_fps == 12.0
        assert s.temp_dir is None
        assert s.log_level == "WARNING"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("GIFFORGE_GIFSKI", "/opt/bin/gifski")
        monkeypatch.setenv("GIFFORGE_MAX_WIDTH", "640")
        monkeypatch.setenv("GIFFORGE_LOG_LEVEL", "debug")
        s = Settings()
        assert s.gifski == "/opt/bin/gifski"
        assert s.max_width == 640
        assert s.log_level == "DEBUG"

    def test_quality_range(self):
        with pytest.raises(ValidationError):
            Settings(quality=101)

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError, match="unknown log level"):
            Settings(log_level="LOUD")
