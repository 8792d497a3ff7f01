"""Video metadata resolver."""

import logging
from pathlib import Path

from pydantic import ValidationError

from gifforge import ffutil
from gifforge.models import ProbeOutput, VideoStreamInfo

logger = logging.getLogger(__name__)

FFPROBE_ARGS = [
    "-v", "error",
    "-select_streams", "v:0",
    "-count_packets",
    "-show_entries", "stream=width,height,nb_read_packets:packet=pts_time",
    "-print_format", "json",
]


def parse_probe_output(payload: str | bytes, ffprobe: str = "ffprobe") -> VideoStreamInfo:
    """Validate ffprobe JSON and pick the first stream and the last packet."""
    try:
        data = ProbeOutput.model_validate_json(payload)
    except ValidationError as e:
        raise ffutil.ProbeSchemaError(str(e)) from e

    if not data.streams:
        raise ffutil.MissingStreamDataError(
            f"unable to retrieve resolution from stream with {ffprobe}"
        )
    if not data.packets:
        raise ffutil.MissingStreamDataError(
            f"unable to retrieve packets from stream with {ffprobe}"
        )

    stream = data.streams[0]
    packet = data.packets[-1]

    total_packets = None
    if stream.nb_read_packets is not None and stream.nb_read_packets.isdigit():
        total_packets = int(stream.nb_read_packets)

    return VideoStreamInfo(
        width=stream.width,
        height=stream.height,
        total_packets=total_packets,
        last_packet_timestamp=packet.pts_time,
    )


async def resolve_video_info(video_path: Path, *, ffprobe: str = "ffprobe") -> VideoStreamInfo:
    """Run ffprobe on *video_path* and return its first video stream's info."""
    chunks: list[bytes] = []
    result = await ffutil.execute(
        ffprobe, [*FFPROBE_ARGS, str(video_path)], on_stdout=chunks.append
    )
    ffutil.raise_for_result(
        result,
        ffprobe,
        hint=(
            "make sure 'ffmpeg' is installed and available in PATH "
            f"({ffprobe} is part of ffmpeg)."
        ),
    )

    info = parse_probe_output(b"".join(chunks), ffprobe=ffprobe)
    logger.info("video resolution. width: %d, height: %d", info.width, info.height)
    return info
