"""Protocol for media toolchain backends."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class MediaToolAdapter(Protocol):
    """Operations the pipeline needs from an encode/decode toolchain.

    Filter-running methods return the tool's raw log; parsing lives in
    ``deadair.analysis.parsers``.
    """

    name: str

    def probe_duration(self, path: Path) -> float: ...
    def extract_frame(self, path: Path, at_sec: float, out_path: Path) -> None: ...
    def extract_subclip(self, path: Path, start_sec: float, end_sec: float, out_path: Path) -> None: ...
    def detect_silence(self, path: Path, threshold_db: float, min_duration_sec: float) -> str: ...
    def detect_scenes(self, path: Path, out_dir: Path, threshold: float) -> str: ...
    def concat_segments(self, path: Path, segments: list[tuple[float, float]], out_path: Path) -> None: ...
