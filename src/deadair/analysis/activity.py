"""Frame-activity scoring: how much the picture changes per time window.

The visual-change proxy compares the encoded sizes of a window's first and
last frames. Frames that barely change compress to nearly the same size.
The scale factor and thresholds are calibration constants; the classifier
bands were tuned against them.
"""

from __future__ import annotations

import hashlib
import tempfile
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from deadair.errors import AnalysisCancelled, ToolExecutionError
from deadair.media.adapter import MediaToolAdapter
from deadair.models.segments import ActivityClass, FrameDiffSegment, Recommendation
from deadair.utils.progress import log_debug, log_step

SCORE_SCALE = 500.0
MAX_SCORE = 100.0
DEFAULT_DIFF_SCORE = 50.0
END_FRAME_OFFSET = 0.1  # seconds before the window end

# (exclusive upper bound, class, recommendation); anything above is high activity
_BANDS = [
    (5.0, ActivityClass.STATIC, Recommendation.CUT),
    (15.0, ActivityClass.LOW, Recommendation.SPEEDUP_4X),
    (35.0, ActivityClass.MEDIUM, Recommendation.SPEEDUP_2X),
]


def size_ratio_score(size1: int, size2: int) -> float:
    """Map two frame file sizes onto a 0-100 difference score."""
    avg_size = (size1 + size2) / 2
    if avg_size <= 0:
        raise ValueError("both frames are empty")
    return min(MAX_SCORE, abs(size1 - size2) / avg_size * SCORE_SCALE)


def score_window(frame1: Path, frame2: Path) -> float:
    """Difference score for two extracted frames."""
    return size_ratio_score(frame1.stat().st_size, frame2.stat().st_size)


def classify_score(score: float) -> tuple[ActivityClass, Recommendation]:
    for upper, classification, recommendation in _BANDS:
        if score < upper:
            return classification, recommendation
    return ActivityClass.HIGH, Recommendation.KEEP


def window_bounds(duration: float, segment_duration: float) -> list[tuple[float, float]]:
    """Consecutive fixed-width windows over ``[0, duration)``; the last may be shorter.

    A window only opens while its start lies before ``duration``, so every
    window has ``end > start`` even when the width does not divide evenly.
    """
    windows: list[tuple[float, float]] = []
    i = 0
    start = 0.0
    while start < duration:
        end = min((i + 1) * segment_duration, duration)
        windows.append((start, end))
        i += 1
        start = i * segment_duration
    return windows


def merge_segments(segments: list[FrameDiffSegment]) -> list[FrameDiffSegment]:
    """Coalesce adjacent segments that share a recommendation.

    The average is a running pairwise mean, not a duration-weighted one.
    """
    merged: list[FrameDiffSegment] = []
    for segment in segments:
        last = merged[-1] if merged else None
        if last is not None and last.recommendation == segment.recommendation:
            merged[-1] = last.model_copy(update={
                "end_sec": segment.end_sec,
                "avg_diff_score": (last.avg_diff_score + segment.avg_diff_score) / 2,
                "min_diff_score": min(last.min_diff_score, segment.min_diff_score),
                "max_diff_score": max(last.max_diff_score, segment.max_diff_score),
            })
        else:
            merged.append(segment)
    return merged


def scratch_prefix(video_path: Path) -> str:
    """Per-video prefix so concurrent runs on different videos never collide."""
    digest = hashlib.sha1(str(Path(video_path).resolve()).encode()).hexdigest()[:10]
    return f"deadair-frames-{digest}-"


def _score_one(
    adapter: MediaToolAdapter,
    video_path: Path,
    scratch_dir: Path,
    index: int,
    start: float,
    end: float,
) -> FrameDiffSegment:
    frame1 = scratch_dir / f"segment-{index}-start.png"
    frame2 = scratch_dir / f"segment-{index}-end.png"

    try:
        adapter.extract_frame(video_path, start, frame1)
        adapter.extract_frame(video_path, max(start, end - END_FRAME_OFFSET), frame2)
        score = score_window(frame1, frame2)
    except (ToolExecutionError, OSError, ValueError) as e:
        log_debug(f"Window {start:.1f}s: frame comparison failed ({e}), using default score")
        score = DEFAULT_DIFF_SCORE
    finally:
        frame1.unlink(missing_ok=True)
        frame2.unlink(missing_ok=True)

    classification, recommendation = classify_score(score)
    return FrameDiffSegment(
        start_sec=start,
        end_sec=end,
        avg_diff_score=score,
        min_diff_score=score,
        max_diff_score=score,
        classification=classification,
        recommendation=recommendation,
    )


def analyze_frame_activity(
    adapter: MediaToolAdapter,
    video_path: Path,
    duration: float,
    *,
    segment_duration: float = 1.0,
    workers: int = 1,
    stop: threading.Event | None = None,
) -> list[FrameDiffSegment]:
    """Score every window of the video and merge runs with equal recommendations.

    Once ``stop`` is set no further window is started and
    ``AnalysisCancelled`` is raised.
    """
    if duration <= 0:
        return []

    windows = window_bounds(duration, segment_duration)
    log_step("Activity", f"Scoring {len(windows)} windows of {segment_duration}s...")

    with tempfile.TemporaryDirectory(prefix=scratch_prefix(video_path)) as tmp:
        scratch_dir = Path(tmp)

        def score(index: int, start: float, end: float) -> FrameDiffSegment:
            if stop is not None and stop.is_set():
                raise AnalysisCancelled(f"Frame activity scoring stopped at {start:.1f}s")
            return _score_one(adapter, video_path, scratch_dir, index, start, end)

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = [
                    pool.submit(score, i, start, end)
                    for i, (start, end) in enumerate(windows)
                ]
                segments = [f.result() for f in futures]
        else:
            segments = [score(i, start, end) for i, (start, end) in enumerate(windows)]

    merged = merge_segments(segments)
    log_step("Activity", f"Frame analysis complete: {len(merged)} segments identified")
    return merged
