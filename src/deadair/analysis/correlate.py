"""Decide which silences are intentional by cross-referencing the action log."""

from __future__ import annotations

from deadair.models.actions import LONG_RUNNING_ACTIONS, ActionTiming
from deadair.models.segments import SilenceSegment


def correlate_silences(
    silences: list[SilenceSegment],
    actions: list[ActionTiming] | None = None,
    *,
    max_acceptable_pause: float = 3.0,
) -> list[SilenceSegment]:
    """Set ``keep_pause`` and ``reason`` on each silence.

    Rules, first match wins:
    1. overlaps a ``wait`` action: keep
    2. overlaps a long-running wait (hydration, text, enabled...): keep
    3. shorter than ``max_acceptable_pause``: keep
    4. otherwise: recommend removal

    Without an action log only rules 3 and 4 apply.
    """
    actions = actions or []
    return [
        silence.model_copy(update=_decide(silence, actions, max_acceptable_pause))
        for silence in silences
    ]


def _decide(
    silence: SilenceSegment,
    actions: list[ActionTiming],
    max_acceptable_pause: float,
) -> dict:
    start, end = silence.start_sec, silence.end_sec

    wait = next(
        (a for a in actions if a.action == "wait" and a.overlaps(start, end)), None
    )
    if wait is not None:
        return {"keep_pause": True, "reason": f"Intentional wait ({wait.args or 'pause'})"}

    long_op = next(
        (a for a in actions if a.action in LONG_RUNNING_ACTIONS and a.overlaps(start, end)),
        None,
    )
    if long_op is not None:
        return {"keep_pause": True, "reason": f"During {long_op.action}"}

    if silence.duration_sec < max_acceptable_pause:
        return {"keep_pause": True, "reason": "Short pause within acceptable range"}

    return {
        "keep_pause": False,
        "reason": f"Long pause ({silence.duration_sec:.1f}s) - recommend removal",
    }
