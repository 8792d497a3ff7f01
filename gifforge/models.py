"""Shared data types used across gifforge."""

from dataclasses import dataclass

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class VideoStreamInfo:
    """Metadata of the first video stream, resolved via ffprobe."""

    width: int
    height: int
    total_packets: int | None = None
    last_packet_timestamp: str | None = None


@dataclass(frozen=True)
class ExtractionPlan:
    """ffmpeg filter chain and expected output size for frame extraction."""

    fps_filter: str
    scale_filter: str | None = None
    expected_frame_count: int | None = None

    @property
    def video_filter(self) -> str:
        return ",".join(f for f in (self.scale_filter, self.fps_filter) if f)


@dataclass
class CommandResult:
    """Outcome of one external command invocation."""

    success: bool
    error: str = ""
    returncode: int | None = None
    launch_failed: bool = False


# ---------------------------------------------------------------------------
# ffprobe JSON payload
# ---------------------------------------------------------------------------

class ProbeStream(BaseModel):
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    nb_read_packets: str | None = None


class ProbePacket(BaseModel):
    pts_time: str | None = None


class ProbeOutput(BaseModel):
    """Subset of ``ffprobe -print_format json`` output gifforge relies on."""

    streams: list[ProbeStream] = Field(default_factory=list)
    packets: list[ProbePacket] = Field(default_factory=list)
