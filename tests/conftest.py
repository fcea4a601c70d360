"""Shared fixtures: an in-memory stand-in for the ffmpeg toolchain."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable

import pytest

from deadair.errors import ToolExecutionError


class FakeAdapter:
    """MediaToolAdapter that writes placeholder files instead of running ffmpeg.

    ``frame_size`` maps a timestamp to the byte size of the frame written for
    it, which is what the activity scorer compares.
    """

    name = "fake"

    def __init__(
        self,
        *,
        duration: float = 10.0,
        output_duration: float | None = None,
        silence_log: str = "",
        scene_log: str = "",
        scene_files: int = 0,
        frame_size: Callable[[float], int] | None = None,
        failing_frames: tuple[float, ...] = (),
        frame_error: Exception | None = None,
        silence_error: Exception | None = None,
        scene_error: Exception | None = None,
        frame_delay: float = 0.0,
    ) -> None:
        self.duration = duration
        self.output_duration = output_duration
        self.silence_log = silence_log
        self.scene_log = scene_log
        self.scene_files = scene_files
        self.frame_size = frame_size or (lambda t: 1000)
        self.failing_frames = failing_frames
        self.frame_error = frame_error
        self.silence_error = silence_error
        self.scene_error = scene_error
        self.frame_delay = frame_delay
        self.calls: list[tuple] = []
        self.frame_paths: list[Path] = []

    def probe_duration(self, path: Path) -> float:
        self.calls.append(("probe_duration", Path(path)))
        if self.output_duration is not None and "trimmed" in Path(path).name:
            return self.output_duration
        return self.duration

    def extract_frame(self, path: Path, at_sec: float, out_path: Path) -> None:
        self.calls.append(("extract_frame", at_sec))
        self.frame_paths.append(Path(out_path))
        if self.frame_delay:
            time.sleep(self.frame_delay)
        if self.frame_error is not None:
            raise self.frame_error
        if any(abs(at_sec - t) < 1e-9 for t in self.failing_frames):
            raise ToolExecutionError(["ffmpeg", "-ss", str(at_sec)], 1, "decode error")
        Path(out_path).write_bytes(b"x" * self.frame_size(at_sec))

    def extract_subclip(self, path: Path, start_sec: float, end_sec: float, out_path: Path) -> None:
        self.calls.append(("extract_subclip", start_sec, end_sec))
        Path(out_path).write_bytes(b"subclip")

    def detect_silence(self, path: Path, threshold_db: float, min_duration_sec: float) -> str:
        self.calls.append(("detect_silence", threshold_db, min_duration_sec))
        if self.silence_error is not None:
            raise self.silence_error
        return self.silence_log

    def detect_scenes(self, path: Path, out_dir: Path, threshold: float) -> str:
        self.calls.append(("detect_scenes", threshold))
        if self.scene_error is not None:
            raise self.scene_error
        for i in range(1, self.scene_files + 1):
            (Path(out_dir) / f"keyframe-{i:03d}.png").write_bytes(b"png")
        return self.scene_log

    def concat_segments(self, path: Path, segments: list[tuple[float, float]], out_path: Path) -> None:
        self.calls.append(("concat_segments", list(segments)))
        Path(out_path).write_bytes(b"concat")

    def called(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]


def silence_log(*ranges: tuple[float, float]) -> str:
    """Render silencedetect output for the given ``(start, end)`` pairs."""
    lines = ["Input #0, matroska,webm, from 'demo.webm':"]
    for start, end in ranges:
        lines.append(f"[silencedetect @ 0x7f9] silence_start: {start}")
        lines.append(
            f"[silencedetect @ 0x7f9] silence_end: {end} | silence_duration: {end - start}"
        )
    lines.append("size=N/A time=00:01:40.00 bitrate=N/A speed= 512x")
    return "\n".join(lines)


def scene_log(*frames: tuple[float, float]) -> str:
    """Render metadata=print + showinfo output for ``(pts_time, score)`` pairs."""
    lines = []
    for n, (pts, score) in enumerate(frames):
        lines.append(f"[Parsed_metadata_1 @ 0x55d] frame:{n}    pts:{int(pts * 1000)}  pts_time:{pts}")
        lines.append(f"[Parsed_metadata_1 @ 0x55d] lavfi.scene_score={score}")
        lines.append(
            f"[Parsed_showinfo_2 @ 0x55e] n:{n:4d} pts:{int(pts * 1000):7d} "
            f"pts_time:{pts:<8} duration:33 fmt:yuv420p"
        )
    return "\n".join(lines)


def alternating_frames(t: float) -> int:
    """Window starts and ends differ a lot: every window scores high activity."""
    return 500 if t == int(t) else 1500


@pytest.fixture
def video(tmp_path: Path) -> Path:
    path = tmp_path / "demo.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42 fake video payload")
    return path
