"""Parsers for ffmpeg filter log output.

Each parser takes the raw stderr text of one filter run and returns typed
values; nothing here touches the filesystem or spawns processes.
"""

from __future__ import annotations

import re

from pydantic import ValidationError

from deadair.models.segments import SilenceSegment
from deadair.utils.progress import log_warning

# ffmpeg prints small timestamps in exponent form, e.g. 2.5e-05
_NUMBER = r"([-+]?\d*\.?\d+(?:[eE][-+]?\d+)?)"
_SILENCE_START = re.compile(r"silence_start:\s*" + _NUMBER)
_SILENCE_END = re.compile(r"silence_end:\s*" + _NUMBER)
_SHOWINFO_PTS = re.compile(r"Parsed_showinfo.*?pts_time:\s*" + _NUMBER)
_SCENE_SCORE = re.compile(r"lavfi\.scene_score=" + _NUMBER)


def parse_silencedetect(stderr: str) -> list[SilenceSegment]:
    """Parse ``silence_start``/``silence_end`` marker pairs.

    A start with no matching end (stream ended mid-silence without a closing
    marker) is dropped.
    """
    silences: list[SilenceSegment] = []
    current_start: float | None = None

    for line in stderr.splitlines():
        m = _SILENCE_START.search(line)
        if m:
            # silencedetect can report slightly negative starts at t=0
            current_start = max(0.0, float(m.group(1)))
            continue

        m = _SILENCE_END.search(line)
        if m and current_start is not None:
            end = float(m.group(1))
            try:
                silences.append(SilenceSegment(start_sec=current_start, end_sec=end))
            except ValidationError:
                log_warning(f"Ignoring malformed silence marker {current_start}..{end}")
            current_start = None

    return silences


def parse_showinfo(stderr: str) -> list[tuple[float, float | None]]:
    """Parse ``(pts_time, scene_score)`` for each frame the select filter passed.

    ``metadata=print`` logs the score just before ``showinfo`` logs the frame,
    so the most recent score belongs to the next showinfo line.
    """
    frames: list[tuple[float, float | None]] = []
    pending_score: float | None = None

    for line in stderr.splitlines():
        m = _SCENE_SCORE.search(line)
        if m:
            pending_score = float(m.group(1))
            continue

        m = _SHOWINFO_PTS.search(line)
        if m:
            frames.append((max(0.0, float(m.group(1))), pending_score))
            pending_score = None

    return frames
