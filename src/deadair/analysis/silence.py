"""Silence detection via the silencedetect audio filter."""

from __future__ import annotations

from pathlib import Path

from deadair.analysis.parsers import parse_silencedetect
from deadair.media.adapter import MediaToolAdapter
from deadair.models.segments import SilenceSegment
from deadair.utils.progress import log_step


def detect_silences(
    adapter: MediaToolAdapter,
    video_path: Path,
    *,
    threshold_db: float = -30.0,
    min_duration_sec: float = 0.5,
) -> list[SilenceSegment]:
    """Find stretches quieter than ``threshold_db`` lasting ``min_duration_sec`` or more.

    Segments come back ascending and non-overlapping with ``keep_pause``
    unset; the correlator decides which ones stay. Tool errors propagate.
    """
    log_step("Silence", f"Detecting silence (n={threshold_db}dB, d={min_duration_sec}s)...")
    stderr = adapter.detect_silence(video_path, threshold_db, min_duration_sec)
    silences = parse_silencedetect(stderr)

    total = sum(s.duration_sec for s in silences)
    log_step("Silence", f"Found {len(silences)} silence segments ({total:.1f}s total)")
    return silences
