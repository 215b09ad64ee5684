"""
Trend Classifier.

Compares the older half of the recent-score window with the newer half.
For odd-length windows the middle score counts toward the older half, so
the newer half is always the strictly most recent quizzes.
"""

from __future__ import annotations

from typing import Sequence

from wml.adaptive.models import Trend, TrendReading

DEFAULT_TREND_THRESHOLD = 8.0
MIN_TREND_SCORES = 2


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def classify_trend(
    window: Sequence[float],
    threshold: float = DEFAULT_TREND_THRESHOLD,
) -> TrendReading:
    """
    Classify the window as improving, stable or declining.

    Fewer than two scores never yield a directional trend; the reading is
    flagged low-confidence instead. A difference exactly equal to the
    threshold is stable.
    """
    scores = list(window)
    if len(scores) < MIN_TREND_SCORES:
        only = scores[0] if scores else 0.0
        return TrendReading(Trend.STABLE, older_mean=only, newer_mean=only, low_confidence=True)

    split = (len(scores) + 1) // 2
    older = _mean(scores[:split])
    newer = _mean(scores[split:])
    delta = newer - older

    if delta > threshold:
        trend = Trend.IMPROVING
    elif delta < -threshold:
        trend = Trend.DECLINING
    else:
        trend = Trend.STABLE

    return TrendReading(trend, older_mean=round(older, 2), newer_mean=round(newer, 2))
