"""Turn activity and silence signals into a ranked list of trim suggestions."""

from __future__ import annotations

from deadair.models.segments import (
    FrameDiffSegment,
    Recommendation,
    SilenceSegment,
    SuggestionType,
    TrimSuggestion,
)
from deadair.utils.progress import log_step

MIN_STATIC_DURATION = 1.0  # seconds
MAX_SILENCE_CONFIDENCE = 0.9


def frame_suggestions(frame_diffs: list[FrameDiffSegment]) -> list[TrimSuggestion]:
    """Static stretches of at least a second become ``remove_pause`` suggestions."""
    return [
        TrimSuggestion(
            type=SuggestionType.REMOVE_PAUSE,
            start_sec=seg.start_sec,
            end_sec=seg.end_sec,
            confidence=0.9 if seg.avg_diff_score < 2 else 0.7,
            reason=f"Static/no visual change (activity score: {seg.avg_diff_score:.1f})",
        )
        for seg in frame_diffs
        if seg.recommendation == Recommendation.CUT and seg.duration >= MIN_STATIC_DURATION
    ]


def silence_suggestions(
    silences: list[SilenceSegment],
    *,
    min_pause_to_keep: float = 1.0,
) -> list[TrimSuggestion]:
    """Shrink each removable silence so ``min_pause_to_keep`` survives at the cut."""
    suggestions: list[TrimSuggestion] = []
    margin = min_pause_to_keep / 2

    for silence in silences:
        if silence.keep_pause or silence.duration_sec <= min_pause_to_keep:
            continue

        trim_start = silence.start_sec + margin
        trim_end = silence.end_sec - margin
        if trim_end <= trim_start:
            continue

        suggestions.append(TrimSuggestion(
            type=SuggestionType.REMOVE_PAUSE,
            start_sec=trim_start,
            end_sec=trim_end,
            confidence=min(
                MAX_SILENCE_CONFIDENCE,
                0.5 + (silence.duration_sec - min_pause_to_keep) / 10,
            ),
            reason=silence.reason or f"Remove {trim_end - trim_start:.1f}s pause",
        ))

    return suggestions


def synthesize_suggestions(
    frame_diffs: list[FrameDiffSegment],
    silences: list[SilenceSegment],
    *,
    min_pause_to_keep: float = 1.0,
) -> list[TrimSuggestion]:
    """Merge both signals; frame-based suggestions win any overlap.

    A silence candidate touching any frame suggestion (either endpoint inside
    it, or wrapping it entirely) is dropped, so the ``remove_pause`` ranges
    in the result never overlap.
    """
    from_frames = frame_suggestions(frame_diffs)
    from_silence = silence_suggestions(silences, min_pause_to_keep=min_pause_to_keep)

    merged = list(from_frames)
    dropped = 0
    for candidate in from_silence:
        if any(candidate.overlaps(fs) for fs in from_frames):
            dropped += 1
            continue
        merged.append(candidate)

    merged.sort(key=lambda s: s.start_sec)
    log_step(
        "Suggest",
        f"Generated {len(merged)} trim suggestions "
        f"({len(from_frames)} visual, {len(merged) - len(from_frames)} silence, "
        f"{dropped} overlapping dropped)",
    )
    return merged
