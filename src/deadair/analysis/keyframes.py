"""Keyframe extraction at scene changes, with evenly spaced fallback."""

from __future__ import annotations

import math
from pathlib import Path

from deadair.analysis.parsers import parse_showinfo
from deadair.errors import ToolExecutionError
from deadair.media.adapter import MediaToolAdapter
from deadair.models.actions import ActionTiming
from deadair.models.segments import KeyframeInfo
from deadair.utils.progress import log_step, log_warning

MAX_FALLBACK_FRAMES = 5
FALLBACK_SPACING_SEC = 10.0


def keyframe_filename(index: int) -> str:
    """1-based, 3-digit zero padded: ``keyframe-001.png``."""
    return f"keyframe-{index:03d}.png"


def extract_keyframes(
    adapter: MediaToolAdapter,
    video_path: Path,
    output_dir: Path,
    duration: float,
    *,
    scene_threshold: float = 0.3,
) -> list[KeyframeInfo]:
    """Save representative frames to ``output_dir``.

    Uses scene-change detection first. If that finds nothing (or the scene
    pass fails), samples up to five evenly spaced frames instead.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    for stale in output_dir.glob("keyframe-*.png"):
        stale.unlink()
    log_step("Keyframes", f"Detecting scene changes (threshold {scene_threshold})...")

    keyframes: list[KeyframeInfo] = []
    try:
        stderr = adapter.detect_scenes(video_path, output_dir, scene_threshold)
    except ToolExecutionError as e:
        log_warning(f"Scene detection failed, falling back to sampling: {e.tail[-200:]}")
        stderr = ""

    for i, (timestamp, score) in enumerate(parse_showinfo(stderr), start=1):
        thumbnail = output_dir / keyframe_filename(i)
        if not thumbnail.exists():
            continue
        keyframes.append(KeyframeInfo(
            timestamp_sec=timestamp,
            thumbnail_path=str(thumbnail),
            scene_change_score=score,
        ))

    if not keyframes:
        log_step("Keyframes", "No scene changes detected, extracting evenly spaced keyframes...")
        keyframes = _sample_evenly(adapter, video_path, output_dir, duration)

    log_step("Keyframes", f"Extracted {len(keyframes)} keyframes")
    return keyframes


def fallback_timestamps(duration: float) -> list[float]:
    """One frame per ~10s, at most five, never at the very start or end."""
    count = min(MAX_FALLBACK_FRAMES, math.ceil(duration / FALLBACK_SPACING_SEC))
    return [duration / (count + 1) * (i + 1) for i in range(count)]


def _sample_evenly(
    adapter: MediaToolAdapter,
    video_path: Path,
    output_dir: Path,
    duration: float,
) -> list[KeyframeInfo]:
    keyframes: list[KeyframeInfo] = []
    for i, timestamp in enumerate(fallback_timestamps(duration), start=1):
        thumbnail = output_dir / keyframe_filename(i)
        try:
            adapter.extract_frame(video_path, timestamp, thumbnail)
        except ToolExecutionError as e:
            log_warning(f"Failed to extract keyframe at {timestamp:.2f}s: {e.tail[-200:]}")
            continue
        keyframes.append(KeyframeInfo(timestamp_sec=timestamp, thumbnail_path=str(thumbnail)))
    return keyframes


def associate_actions(
    keyframes: list[KeyframeInfo],
    actions: list[ActionTiming],
) -> list[KeyframeInfo]:
    """Attach the first action running at each keyframe's timestamp."""
    associated: list[KeyframeInfo] = []
    for keyframe in keyframes:
        action = next((a for a in actions if a.contains(keyframe.timestamp_sec)), None)
        if action is not None:
            keyframe = keyframe.model_copy(update={"associated_action": action})
        associated.append(keyframe)
    return associated
