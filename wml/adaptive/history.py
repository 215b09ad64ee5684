"""
History Window Manager.

Keeps the bounded recent-score window (used for trend detection) separate
from the all-time average (used for tier classification).
"""

from __future__ import annotations

from typing import Sequence

from wml.adaptive.models import clamp_score

DEFAULT_WINDOW_SIZE = 5


def append_to_window(
    window: Sequence[float],
    score: float,
    size: int = DEFAULT_WINDOW_SIZE,
) -> tuple[float, ...]:
    """Append ``score`` most-recent-last, evicting the oldest beyond ``size``."""
    size = max(1, size)
    return (*window, score)[-size:]


def cumulative_average(previous_average: float, previous_count: int, score: float) -> float:
    """All-time mean after one more quiz."""
    previous_count = max(0, previous_count)
    total = previous_average * previous_count + score
    return clamp_score(total / (previous_count + 1))
