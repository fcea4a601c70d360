"""Exception hierarchy for deadair."""

from __future__ import annotations

FFMPEG_INSTALL_HINT = (
    "FFmpeg not found. Please install FFmpeg:\n"
    "  macOS: brew install ffmpeg\n"
    "  Ubuntu: sudo apt install ffmpeg\n"
    "  Windows: choco install ffmpeg"
)

STDERR_TAIL_CHARS = 500


class DeadAirError(Exception):
    """Base class for all deadair errors."""


class MediaToolError(DeadAirError):
    """Raised when the external media toolchain cannot do its job."""


class ToolNotFoundError(MediaToolError):
    """Raised when ffmpeg/ffprobe is not installed or not on PATH."""

    def __init__(self, tool: str):
        self.tool = tool
        hint = FFMPEG_INSTALL_HINT if tool in ("ffmpeg", "ffprobe") else f"{tool} not found"
        super().__init__(f"{tool}: {hint}")


class ToolExecutionError(MediaToolError):
    """Raised when a media tool runs but exits non-zero."""

    def __init__(self, cmd: list[str], returncode: int | None, stderr: str):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr or ""
        self.tail = self.stderr[-STDERR_TAIL_CHARS:]
        super().__init__(
            f"{cmd[0] if cmd else 'tool'} failed (rc={returncode}): "
            f"{' '.join(cmd)}\n{self.tail}"
        )


class ToolTimeoutError(ToolExecutionError):
    """Raised when a media tool exceeds its timeout."""

    def __init__(self, cmd: list[str], timeout: float, stderr: str = ""):
        self.timeout = timeout
        super().__init__(cmd, None, stderr or f"timed out after {timeout:.0f}s")


class AnalysisCancelled(DeadAirError):
    """Raised inside a detector that was told to stop because another one failed."""


class PreconditionError(DeadAirError):
    """Raised when a prior step has not been run or its output is unusable."""
