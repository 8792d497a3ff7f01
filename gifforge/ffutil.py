"""External command helpers for ffmpeg, ffprobe and gifski."""

import asyncio
import contextlib
import inspect
import logging
import re
import shlex
import shutil
from collections.abc import Awaitable, Callable, Sequence

from gifforge.models import CommandResult

logger = logging.getLogger(__name__)

CHUNK_SIZE = 4096

StdoutConsumer = Callable[[bytes], Awaitable[None] | None]


class ConversionError(RuntimeError):
    """Base class for every failure that aborts a conversion."""


class CommandNotFoundError(ConversionError):
    """Raised when an external executable could not be launched."""


class ToolError(ConversionError):
    """Raised when an external tool exits non-zero or writes to stderr."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class ProbeSchemaError(ConversionError):
    """Raised when ffprobe output does not match the expected structure."""


class MissingStreamDataError(ProbeSchemaError):
    """Raised when ffprobe output lacks a stream or packet entry."""


class WorkDirError(ConversionError):
    """Raised when the frame directory cannot be created or read."""


def check_tools(*commands: str) -> list[str]:
    """Return the commands that are not found on PATH."""
    return [cmd for cmd in commands if shutil.which(cmd) is None]


async def execute(
    command: str,
    args: Sequence[str],
    on_stdout: StdoutConsumer | None = None,
) -> CommandResult:
    """Run *command* and stream its stdout chunks to *on_stdout*.

    stderr is collected in full. The run counts as failed when the exit
    status is non-zero or anything at all was written to stderr, so tools
    that print warnings there are reported as failures.
    """
    logger.debug("running cmd: %s", shlex.join([command, *args]))
    try:
        proc = await asyncio.create_subprocess_exec(
            command,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError:
        return CommandResult(
            success=False,
            error=f"command not found: '{command}'.",
            launch_failed=True,
        )

    async def pump_stdout() -> None:
        while True:
            chunk = await proc.stdout.read(CHUNK_SIZE)
            if not chunk:
                break
            if on_stdout is not None:
                ret = on_stdout(chunk)
                if inspect.isawaitable(ret):
                    await ret

    async def drain_stderr() -> bytes:
        return await proc.stderr.read()

    try:
        _, stderr = await asyncio.gather(pump_stdout(), drain_stderr())
    except BaseException:
        # Consumer error or cancellation; the child never outlives execute().
        if proc.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
        await proc.wait()
        raise
    returncode = await proc.wait()
    error = stderr.decode("utf-8", errors="replace")

    return CommandResult(
        success=returncode == 0 and not error,
        error=error,
        returncode=returncode,
    )


def raise_for_result(
    result: CommandResult, command: str, hint: str | None = None
) -> None:
    """Raise the matching ConversionError for a failed CommandResult."""
    if result.success:
        return
    if result.launch_failed:
        message = result.error if not hint else f"{result.error} {hint}"
        raise CommandNotFoundError(message)
    if result.error:
        raise ToolError(result.error, returncode=result.returncode)
    raise ToolError(
        f"'{command}' exited with status {result.returncode}",
        returncode=result.returncode,
    )


def parse_frame_number(text: str) -> int | None:
    """Return the last ``frame=<N>`` value in ffmpeg ``-progress`` output."""
    matches = re.findall(r"frame=(\d+)", text)
    return int(matches[-1]) if matches else None


def parse_gifski_frame(text: str) -> int | None:
    """Return the last ``Frame <N> / <total>`` value in gifski output."""
    matches = re.findall(r"Frame (\d+) / \d+", text)
    return int(matches[-1]) if matches else None
