"""Shared test fixtures."""

import asyncio
import inspect
import json
import shutil
import subprocess
from pathlib import Path

import pytest

from gifforge.models import CommandResult

PROBE_JSON = {
    "packets": [
        {"pts_time": "0.000000"},
        {"pts_time": "0.033333"},
        {"pts_time": "10.0"},
    ],
    "streams": [
        {"width": 1920, "height": 1080, "nb_read_packets": "300"},
    ],
}


@pytest.fixture
def probe_payload() -> bytes:
    return json.dumps(PROBE_JSON).encode()


def fake_execute(stdout_chunks=(), result=None, calls=None):
    """Build an ``ffutil.execute`` stand-in that replays stdout chunks."""

    async def _execute(command, args, on_stdout=None):
        if calls is not None:
            calls.append((command, list(args)))
        for chunk in stdout_chunks:
            if on_stdout is not None:
                ret = on_stdout(chunk)
                if inspect.isawaitable(ret):
                    await ret
        return result if result is not None else CommandResult(success=True, returncode=0)

    return _execute


def run(coro):
    return asyncio.run(coro)


def generate_test_video(output: Path, seconds: int = 2) -> None:
    """Render a small 30 fps test pattern with ffmpeg."""
    cmd = [
        "ffmpeg", "-y", "-loglevel", "error",
        "-f", "lavfi",
        "-i", f"testsrc=size=320x240:rate=30:duration={seconds}",
        "-c:v", "mpeg4",
        str(output),
    ]
    subprocess.run(cmd, check=True)


@pytest.fixture
def synthetic_video(tmp_path: Path) -> Path:
    if shutil.which("ffmpeg") is None:
        pytest.skip("ffmpeg not installed")
    out = tmp_path / "synthetic.mp4"
    generate_test_video(out)
    return out
