"""Action timing log written by the demo recorder."""

from __future__ import annotations

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from deadair.models.base import CamelModel

LONG_RUNNING_ACTIONS = frozenset({
    "waitForHydration",
    "waitForText",
    "waitForEnabled",
    "waitForTextChange",
})


class ActionTiming(CamelModel):
    """One scripted UI action and when it ran, in milliseconds from start."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    action: str
    selector: str | None = None
    args: str | None = None
    start_ms: int
    end_ms: int
    success: bool = True
    error: str | None = None

    def overlaps(self, start_sec: float, end_sec: float) -> bool:
        return self.start_ms <= end_sec * 1000 and self.end_ms >= start_sec * 1000

    def contains(self, timestamp_sec: float) -> bool:
        return self.start_ms <= timestamp_sec * 1000 <= self.end_ms


class RecordingMetadata(CamelModel):
    """The ``*.metadata.json`` sidecar; only ``actions`` is read here."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    actions: list[ActionTiming] = Field(default_factory=list)
