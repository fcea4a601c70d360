"""Analysis sidecar and trim result models."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import Field

from deadair.models.actions import ActionTiming
from deadair.models.base import CamelModel, TimeSegment
from deadair.models.segments import (
    FrameDiffSegment,
    KeyframeInfo,
    SilenceSegment,
    SuggestionType,
    TrimSuggestion,
)


class VideoAnalysis(CamelModel):
    """Everything ``analyze_video`` learned about one video.

    Persisted as ``analysis.json`` next to the video; re-running analysis
    overwrites it.
    """

    video_path: str
    duration: float = Field(gt=0)
    silences: list[SilenceSegment] = Field(default_factory=list)
    keyframes: list[KeyframeInfo] = Field(default_factory=list)
    actions: list[ActionTiming] | None = None
    suggestions: list[TrimSuggestion] = Field(default_factory=list)
    frame_diffs: list[FrameDiffSegment] = Field(default_factory=list)
    min_pause_to_keep: float = 1.0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def remove_suggestions(self) -> list[TrimSuggestion]:
        return sorted(
            (s for s in self.suggestions if s.type == SuggestionType.REMOVE_PAUSE),
            key=lambda s: s.start_sec,
        )


class KeptSegment(TimeSegment):
    """A range that survives trimming."""


class RemovedSegment(TimeSegment):
    """A range cut out of the trimmed video."""

    reason: str = ""


class TrimResult(CamelModel):
    """Outcome of ``trim_video``."""

    original_path: str
    trimmed_path: str
    original_duration: float
    trimmed_duration: float
    removed_segments: list[RemovedSegment] = Field(default_factory=list)
    kept_segments: list[KeptSegment] = Field(default_factory=list)

    @property
    def time_saved(self) -> float:
        return self.original_duration - self.trimmed_duration
