"""Shared model base and the time segment primitive."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes with camelCase keys; accepts camelCase or snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TimeSegment(CamelModel):
    """A half-open time range ``[start_sec, end_sec)`` in seconds."""

    start_sec: float
    end_sec: float

    @model_validator(mode="after")
    def _check_order(self) -> "TimeSegment":
        if self.end_sec <= self.start_sec:
            raise ValueError(
                f"end_sec ({self.end_sec}) must be > start_sec ({self.start_sec})"
            )
        return self

    @property
    def duration(self) -> float:
        return self.end_sec - self.start_sec

    def overlaps(self, other: "TimeSegment") -> bool:
        """True if the two ranges intersect (touching endpoints count)."""
        return self.start_sec <= other.end_sec and self.end_sec >= other.start_sec
