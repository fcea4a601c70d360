"""FFmpeg command builder and runner."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path

from deadair.errors import ToolExecutionError, ToolNotFoundError, ToolTimeoutError

DEFAULT_TIMEOUT = 3600.0  # seconds


def run_tool(
    cmd: list[str],
    *,
    check: bool = True,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> subprocess.CompletedProcess:
    """Run an external media tool, mapping failures onto deadair errors."""
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError as e:
        raise ToolNotFoundError(cmd[0]) from e
    except subprocess.TimeoutExpired as e:
        stderr = e.stderr.decode(errors="replace") if isinstance(e.stderr, bytes) else e.stderr
        raise ToolTimeoutError(cmd, timeout or 0.0, stderr or "") from e
    if check and result.returncode != 0:
        raise ToolExecutionError(cmd, result.returncode, result.stderr)
    return result


def run_ffmpeg(
    args: list[str],
    *,
    check: bool = True,
    loglevel: str = "error",
    timeout: float | None = DEFAULT_TIMEOUT,
) -> subprocess.CompletedProcess:
    """Run an FFmpeg command with standard options.

    Filters that report through the log (silencedetect, showinfo) need
    ``loglevel="info"`` so their markers reach stderr.
    """
    cmd = ["ffmpeg", "-y", "-hide_banner", "-loglevel", loglevel] + args
    return run_tool(cmd, check=check, timeout=timeout)


def check_ffmpeg_installed() -> bool:
    """Return True if ``ffmpeg -version`` runs successfully."""
    return get_ffmpeg_version() is not None


def get_ffmpeg_version() -> str | None:
    """Return the installed FFmpeg version string, or None if unavailable."""
    try:
        result = run_tool(["ffmpeg", "-version"], timeout=30)
    except (ToolNotFoundError, ToolExecutionError):
        return None
    match = re.search(r"ffmpeg version (\S+)", result.stdout)
    return match.group(1) if match else "unknown"


def extract_frame(
    input_path: Path | str,
    output_path: Path | str,
    at_seconds: float,
    *,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> None:
    """Extract the single frame nearest ``at_seconds``."""
    run_ffmpeg([
        "-ss", f"{at_seconds:.3f}",
        "-i", str(input_path),
        "-vframes", "1",
        str(output_path),
    ], timeout=timeout)


def extract_subclip(
    input_path: Path | str,
    output_path: Path | str,
    start: float,
    end: float,
    *,
    has_audio: bool = True,
    crf: int = 23,
    preset: str = "medium",
    timeout: float | None = DEFAULT_TIMEOUT,
) -> None:
    """Re-encode one time range of a video.

    Input seeking plus re-encoding keeps audio and video aligned on the cut.
    """
    args = [
        "-ss", f"{start:.3f}",
        "-i", str(input_path),
        "-t", f"{end - start:.3f}",
        "-c:v", "libx264",
        "-crf", str(crf),
        "-preset", preset,
    ]
    if has_audio:
        args.extend(["-c:a", "aac"])
    else:
        args.append("-an")
    args.append(str(output_path))
    run_ffmpeg(args, timeout=timeout)


def build_concat_filter(
    segments: list[tuple[float, float]],
    *,
    has_audio: bool = True,
) -> str:
    """Build a filter graph that trims each range and concatenates them."""
    parts: list[str] = []
    inputs: list[str] = []

    for i, (start, end) in enumerate(segments):
        parts.append(f"[0:v]trim=start={start}:end={end},setpts=PTS-STARTPTS[v{i}]")
        if has_audio:
            parts.append(f"[0:a]atrim=start={start}:end={end},asetpts=PTS-STARTPTS[a{i}]")
            inputs.append(f"[v{i}][a{i}]")
        else:
            inputs.append(f"[v{i}]")

    audio_streams = 1 if has_audio else 0
    outputs = "[outv][outa]" if has_audio else "[outv]"
    parts.append(
        f"{''.join(inputs)}concat=n={len(segments)}:v=1:a={audio_streams}{outputs}"
    )
    return ";".join(parts)


def concat_segments(
    input_path: Path | str,
    output_path: Path | str,
    segments: list[tuple[float, float]],
    *,
    has_audio: bool = True,
    crf: int = 23,
    preset: str = "medium",
    timeout: float | None = DEFAULT_TIMEOUT,
) -> None:
    """Cut ``segments`` out of a video and join them into one output file."""
    args = [
        "-i", str(input_path),
        "-filter_complex", build_concat_filter(segments, has_audio=has_audio),
        "-map", "[outv]",
    ]
    if has_audio:
        args.extend(["-map", "[outa]"])
    args.extend([
        "-c:v", "libx264",
        "-crf", str(crf),
        "-preset", preset,
    ])
    if has_audio:
        args.extend(["-c:a", "aac"])
    args.append(str(output_path))
    run_ffmpeg(args, timeout=timeout)


def silencedetect(
    input_path: Path | str,
    threshold_db: float,
    min_duration: float,
    *,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> str:
    """Run the silencedetect filter over the whole file and return its log."""
    result = run_ffmpeg([
        "-i", str(input_path),
        "-af", f"silencedetect=n={threshold_db}dB:d={min_duration}",
        "-f", "null", "-",
    ], loglevel="info", timeout=timeout)
    return result.stderr


def scenedetect(
    input_path: Path | str,
    output_dir: Path | str,
    threshold: float,
    *,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> str:
    """Save frames whose scene-change score exceeds ``threshold``.

    Frames land in ``output_dir`` as ``keyframe-NNN.png``; the returned log
    carries their timestamps and scores.
    """
    pattern = Path(output_dir) / "keyframe-%03d.png"
    result = run_ffmpeg([
        "-i", str(input_path),
        "-vf", f"select='gt(scene,{threshold})',metadata=print,showinfo",
        "-vsync", "vfr",
        str(pattern),
    ], loglevel="info", timeout=timeout)
    return result.stderr
