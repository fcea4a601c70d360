"""Segment types produced by the analysis stages."""

from __future__ import annotations

from enum import Enum

from pydantic import Field, computed_field

from deadair.models.actions import ActionTiming
from deadair.models.base import CamelModel, TimeSegment


class ActivityClass(str, Enum):
    STATIC = "static"
    LOW = "low_activity"
    MEDIUM = "medium_activity"
    HIGH = "high_activity"


class Recommendation(str, Enum):
    CUT = "cut"
    SPEEDUP_4X = "speedup_4x"
    SPEEDUP_2X = "speedup_2x"
    KEEP = "keep"


class SuggestionType(str, Enum):
    REMOVE_PAUSE = "remove_pause"
    KEEP_SEGMENT = "keep_segment"
    SPEED_UP = "speed_up"


class SilenceSegment(TimeSegment):
    """A stretch of audio below the silence threshold."""

    keep_pause: bool = False
    reason: str | None = None

    @computed_field(alias="durationSec")
    @property
    def duration_sec(self) -> float:
        return self.end_sec - self.start_sec


class KeyframeInfo(CamelModel):
    """A representative still, at a scene change or evenly sampled."""

    timestamp_sec: float = Field(ge=0)
    thumbnail_path: str
    associated_action: ActionTiming | None = None
    scene_change_score: float | None = None


class FrameDiffSegment(TimeSegment):
    """A run of activity windows sharing one recommendation."""

    avg_diff_score: float = Field(ge=0, le=100)
    min_diff_score: float = Field(ge=0, le=100)
    max_diff_score: float = Field(ge=0, le=100)
    classification: ActivityClass
    recommendation: Recommendation


class TrimSuggestion(TimeSegment):
    """A proposed edit with a confidence score."""

    type: SuggestionType
    confidence: float = Field(ge=0, le=1)
    reason: str
