"""Configuration models for analysis and trimming."""

from __future__ import annotations

from pydantic import BaseModel, Field


class AnalyzeConfig(BaseModel):
    """Configuration for ``analyze_video``."""

    silence_threshold_db: float = Field(default=-30.0, ge=-90.0, le=0.0)
    min_silence_duration: float = Field(default=0.5, gt=0.0, le=30.0)
    max_acceptable_pause: float = Field(default=3.0, ge=0.0, le=60.0)
    scene_threshold: float = Field(default=0.3, gt=0.0, lt=1.0)
    segment_duration: float = Field(default=1.0, gt=0.0, le=30.0)
    min_pause_to_keep: float = Field(default=1.0, ge=0.0, le=10.0)
    frame_workers: int = Field(default=1, ge=1, le=16)
    concurrent: bool = True
    tool_timeout_seconds: float | None = Field(default=None, gt=0)


class TrimConfig(BaseModel):
    """Configuration for ``trim_video``."""

    min_pause_to_keep: float | None = Field(default=None, ge=0.0, le=10.0)
    min_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    keep_original: bool = True
    crf: int = Field(default=23, ge=0, le=51)
    preset: str = "medium"
    tool_timeout_seconds: float | None = Field(default=None, gt=0)


class Settings(BaseModel):
    """Contents of a ``deadair.yaml`` file."""

    analyze: AnalyzeConfig = Field(default_factory=AnalyzeConfig)
    trim: TrimConfig = Field(default_factory=TrimConfig)
