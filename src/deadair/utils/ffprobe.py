"""FFprobe wrapper for video file metadata extraction."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from deadair.errors import ToolExecutionError
from deadair.utils.ffmpeg import run_tool


@dataclass
class VideoInfo:
    """Video file metadata extracted via FFprobe."""

    path: str
    duration_seconds: float
    width: int
    height: int
    codec: str
    has_audio: bool
    format_name: str


def probe_video(path: Path | str, *, timeout: float | None = 60) -> VideoInfo:
    """Probe a video file with FFprobe and return metadata."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Video file not found: {path}")

    result = run_tool(
        [
            "ffprobe",
            "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(path),
        ],
        timeout=timeout,
    )

    data = json.loads(result.stdout or "{}")
    streams = data.get("streams", [])

    video_stream = next(
        (s for s in streams if s.get("codec_type") == "video"), {}
    )
    has_audio = any(s.get("codec_type") == "audio" for s in streams)
    fmt = data.get("format", {})

    return VideoInfo(
        path=str(path),
        duration_seconds=float(fmt.get("duration", video_stream.get("duration", 0)) or 0),
        width=int(video_stream.get("width", 0)),
        height=int(video_stream.get("height", 0)),
        codec=video_stream.get("codec_name", ""),
        has_audio=has_audio,
        format_name=fmt.get("format_name", ""),
    )


def probe_duration(path: Path | str, *, timeout: float | None = 60) -> float:
    """Return the container duration in seconds, or 0.0 if it can't be determined.

    Callers must treat 0.0 as "unknown". A missing ffprobe still raises
    ToolNotFoundError.
    """
    try:
        result = run_tool(
            [
                "ffprobe",
                "-v", "error",
                "-show_entries", "format=duration",
                "-of", "default=noprint_wrappers=1:nokey=1",
                str(path),
            ],
            timeout=timeout,
        )
    except ToolExecutionError:
        return 0.0

    try:
        return float(result.stdout.strip())
    except ValueError:
        return 0.0
