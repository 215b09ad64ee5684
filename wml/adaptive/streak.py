"""Streak Health Evaluator: pure lookup from the engagement day-streak."""

from __future__ import annotations

from typing import Any

from wml.adaptive.models import StreakHealth

HEALTHY_STREAK = 3
WARNING_STREAK = 1


def evaluate_streak_health(
    streak: Any,
    healthy_at: int = HEALTHY_STREAK,
    warning_at: int = WARNING_STREAK,
) -> StreakHealth:
    """
    Classify engagement consistency.

    Unparseable or negative streaks are treated as 0 (at-risk).
    """
    try:
        days = int(streak)
    except (TypeError, ValueError, OverflowError):
        days = 0
    if days >= healthy_at:
        return StreakHealth.HEALTHY
    if days >= warning_at:
        return StreakHealth.WARNING
    return StreakHealth.AT_RISK
