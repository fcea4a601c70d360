"""Trim a video down to the ranges its analysis says to keep."""

from __future__ import annotations

import shutil
from pathlib import Path

from deadair.analysis.module import ANALYSIS_FILENAME
from deadair.analysis.suggestions import synthesize_suggestions
from deadair.errors import PreconditionError
from deadair.media.adapter import MediaToolAdapter
from deadair.media.ffmpeg_adapter import FFmpegAdapter
from deadair.models.analysis import KeptSegment, RemovedSegment, TrimResult, VideoAnalysis
from deadair.models.config import TrimConfig
from deadair.models.segments import SuggestionType, TrimSuggestion
from deadair.utils.io import read_json
from deadair.utils.progress import log, log_step, log_success


def compute_kept_segments(
    duration: float,
    remove_segments: list[TrimSuggestion] | list[RemovedSegment],
) -> list[KeptSegment]:
    """Return the complement of ``remove_segments`` within ``[0, duration)``.

    ``remove_segments`` must be sorted by start time. The cursor never moves
    backwards, so a removal nested inside an earlier one is harmless.
    """
    kept: list[KeptSegment] = []
    cursor = 0.0

    for remove in remove_segments:
        if remove.start_sec > cursor:
            kept.append(KeptSegment(start_sec=cursor, end_sec=remove.start_sec))
        cursor = max(cursor, remove.end_sec)

    if cursor < duration:
        kept.append(KeptSegment(start_sec=cursor, end_sec=duration))

    return kept


def default_output_path(video_path: Path) -> Path:
    """``demo.mp4`` -> ``demo-trimmed.mp4``."""
    return video_path.with_name(f"{video_path.stem}-trimmed{video_path.suffix}")


def load_analysis(analysis_path: Path) -> VideoAnalysis:
    """Read an ``analysis.json`` sidecar."""
    if not analysis_path.exists():
        raise PreconditionError(
            f"Analysis file not found: {analysis_path}\n"
            "Run 'deadair analyze' on the video first."
        )
    try:
        return VideoAnalysis(**read_json(analysis_path))
    except (ValueError, TypeError) as e:
        raise PreconditionError(
            f"Analysis file is unreadable: {analysis_path} ({e}). "
            "Re-run 'deadair analyze'."
        ) from e


def select_removals(analysis: VideoAnalysis, config: TrimConfig) -> list[TrimSuggestion]:
    """The ``remove_pause`` suggestions this trim will apply, ascending."""
    suggestions = analysis.suggestions
    if (
        config.min_pause_to_keep is not None
        and config.min_pause_to_keep != analysis.min_pause_to_keep
    ):
        log_step(
            "Trim",
            f"Re-synthesizing suggestions with min pause {config.min_pause_to_keep}s",
        )
        suggestions = synthesize_suggestions(
            analysis.frame_diffs,
            analysis.silences,
            min_pause_to_keep=config.min_pause_to_keep,
        )

    return sorted(
        (
            s for s in suggestions
            if s.type == SuggestionType.REMOVE_PAUSE and s.confidence >= config.min_confidence
        ),
        key=lambda s: s.start_sec,
    )


def trim_video(
    video_path: Path | str,
    *,
    analysis: VideoAnalysis | None = None,
    analysis_path: Path | str | None = None,
    output_path: Path | str | None = None,
    config: TrimConfig | None = None,
    adapter: MediaToolAdapter | None = None,
) -> TrimResult:
    """Remove the analysis' ``remove_pause`` ranges from a video.

    The analysis comes from ``analysis`` if given, else from
    ``analysis_path`` (default: ``analysis.json`` beside the video).
    """
    config = config or TrimConfig()
    video_path = Path(video_path)
    if not video_path.exists():
        raise PreconditionError(f"Video file not found: {video_path}")

    output_path = Path(output_path) if output_path else default_output_path(video_path)
    if output_path.resolve() == video_path.resolve():
        raise PreconditionError(
            f"Output path is the input video: {output_path}. Choose a different --output."
        )

    if analysis is None:
        path = Path(analysis_path) if analysis_path else video_path.parent / ANALYSIS_FILENAME
        analysis = load_analysis(path)

    adapter = adapter or FFmpegAdapter(
        timeout=config.tool_timeout_seconds, crf=config.crf, preset=config.preset
    )
    duration = analysis.duration

    removals = select_removals(analysis, config)

    if not removals:
        log("No segments to remove, video is already optimal")
        shutil.copyfile(video_path, output_path)
        return TrimResult(
            original_path=str(video_path),
            trimmed_path=str(output_path),
            original_duration=duration,
            trimmed_duration=duration,
            removed_segments=[],
            kept_segments=[KeptSegment(start_sec=0.0, end_sec=duration)],
        )

    kept = compute_kept_segments(duration, removals)
    if not kept:
        raise PreconditionError(
            "Every part of the video is marked for removal; refusing to write an empty file. "
            "Raise --min-confidence or re-run analysis with different thresholds."
        )

    log_step("Trim", f"Keeping {len(kept)} segments, removing {len(removals)}")

    if len(kept) == 1:
        adapter.extract_subclip(video_path, kept[0].start_sec, kept[0].end_sec, output_path)
    else:
        adapter.concat_segments(
            video_path, [(k.start_sec, k.end_sec) for k in kept], output_path
        )

    trimmed_duration = adapter.probe_duration(output_path)
    if trimmed_duration <= 0:
        trimmed_duration = sum(k.duration for k in kept)

    log_success(f"Trimming complete: {output_path}")
    log(
        f"Original: {duration:.1f}s → Trimmed: {trimmed_duration:.1f}s "
        f"(saved {duration - trimmed_duration:.1f}s)",
        style="",
    )

    if not config.keep_original:
        video_path.unlink()
        log(f"Deleted original: {video_path}", style="")

    return TrimResult(
        original_path=str(video_path),
        trimmed_path=str(output_path),
        original_duration=duration,
        trimmed_duration=trimmed_duration,
        removed_segments=[
            RemovedSegment(start_sec=s.start_sec, end_sec=s.end_sec, reason=s.reason)
            for s in removals
        ],
        kept_segments=kept,
    )
