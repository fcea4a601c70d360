"""Pydantic data models for deadair."""

from deadair.models.actions import ActionTiming, RecordingMetadata
from deadair.models.analysis import (
    KeptSegment,
    RemovedSegment,
    TrimResult,
    VideoAnalysis,
)
from deadair.models.base import TimeSegment
from deadair.models.config import AnalyzeConfig, Settings, TrimConfig
from deadair.models.segments import (
    ActivityClass,
    FrameDiffSegment,
    KeyframeInfo,
    Recommendation,
    SilenceSegment,
    SuggestionType,
    TrimSuggestion,
)

__all__ = [
    "ActionTiming",
    "ActivityClass",
    "AnalyzeConfig",
    "FrameDiffSegment",
    "KeptSegment",
    "KeyframeInfo",
    "Recommendation",
    "RecordingMetadata",
    "RemovedSegment",
    "Settings",
    "SilenceSegment",
    "SuggestionType",
    "TimeSegment",
    "TrimConfig",
    "TrimResult",
    "TrimSuggestion",
    "VideoAnalysis",
]
