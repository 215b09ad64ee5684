"""
Unit tests for the difficulty decision table.
"""

import pytest

from wml.adaptive.difficulty import (
    GUARD_INSUFFICIENT_EVIDENCE,
    GUARD_OSCILLATION,
    INSUFFICIENT_EVIDENCE_REASON,
    decide_difficulty,
)
from wml.adaptive.models import ChangeDirection, Difficulty, LearnerTier, StreakHealth, Trend


def decide(
    current=Difficulty.INTERMEDIATE,
    trend=Trend.STABLE,
    tier=LearnerTier.INTERMEDIATE,
    streak_health=StreakHealth.HEALTHY,
    total=10,
    last=ChangeDirection.STABLE,
):
    return decide_difficulty(current, trend, tier, streak_health, total, last)


class TestInsufficientEvidence:
    @pytest.mark.parametrize("trend", list(Trend))
    def test_never_changes_below_three_lessons(self, trend):
        decision = decide(current=Difficulty.BEGINNER, trend=trend, total=2)

        assert decision.difficulty == Difficulty.BEGINNER
        assert decision.direction == ChangeDirection.STABLE
        assert decision.reason == INSUFFICIENT_EVIDENCE_REASON
        assert decision.guard == GUARD_INSUFFICIENT_EVIDENCE

    def test_adapts_at_three_lessons(self):
        decision = decide(current=Difficulty.BEGINNER, trend=Trend.IMPROVING, total=3)
        assert decision.direction == ChangeDirection.UP


class TestEscalation:
    def test_improving_and_engaged_moves_up_one_level(self):
        decision = decide(current=Difficulty.BEGINNER, trend=Trend.IMPROVING, tier=LearnerTier.BEGINNER)

        assert decision.difficulty == Difficulty.INTERMEDIATE
        assert decision.direction == ChangeDirection.UP
        assert "improving" in decision.reason
        assert "Beginner tier" in decision.reason

    def test_warning_streak_still_escalates(self):
        decision = decide(trend=Trend.IMPROVING, streak_health=StreakHealth.WARNING)
        assert decision.difficulty == Difficulty.ADVANCED

    def test_same_direction_escalation_is_allowed(self):
        decision = decide(trend=Trend.IMPROVING, last=ChangeDirection.UP)
        assert decision.direction == ChangeDirection.UP
        assert decision.guard is None

    def test_already_advanced_holds(self):
        decision = decide(current=Difficulty.ADVANCED, trend=Trend.IMPROVING)

        assert decision.difficulty == Difficulty.ADVANCED
        assert decision.direction == ChangeDirection.STABLE
        assert "already at Advanced" in decision.reason


class TestDeEscalation:
    def test_declining_scores_move_down(self):
        decision = decide(current=Difficulty.ADVANCED, trend=Trend.DECLINING)

        assert decision.difficulty == Difficulty.INTERMEDIATE
        assert decision.direction == ChangeDirection.DOWN
        assert "declining" in decision.reason

    def test_broken_streak_moves_down_even_when_stable(self):
        decision = decide(trend=Trend.STABLE, streak_health=StreakHealth.AT_RISK)

        assert decision.difficulty == Difficulty.BEGINNER
        assert decision.direction == ChangeDirection.DOWN
        assert "streak" in decision.reason

    def test_broken_streak_beats_improving_trend(self):
        decision = decide(trend=Trend.IMPROVING, streak_health=StreakHealth.AT_RISK)
        assert decision.direction == ChangeDirection.DOWN

    def test_decline_and_streak_reasons_differ(self):
        by_scores = decide(trend=Trend.DECLINING)
        by_streak = decide(trend=Trend.STABLE, streak_health=StreakHealth.AT_RISK)
        assert by_scores.reason != by_streak.reason

    def test_beginner_floor_holds(self):
        decision = decide(current=Difficulty.BEGINNER, trend=Trend.DECLINING)

        assert decision.difficulty == Difficulty.BEGINNER
        assert decision.direction == ChangeDirection.STABLE
        assert "Beginner" in decision.reason


class TestOscillationGuard:
    def test_reversal_after_up_is_held(self):
        decision = decide(trend=Trend.DECLINING, last=ChangeDirection.UP)

        assert decision.difficulty == Difficulty.INTERMEDIATE
        assert decision.direction == ChangeDirection.STABLE
        assert decision.guard == GUARD_OSCILLATION

    def test_reversal_after_down_is_held(self):
        decision = decide(trend=Trend.IMPROVING, last=ChangeDirection.DOWN)
        assert decision.guard == GUARD_OSCILLATION
        assert decision.difficulty == Difficulty.INTERMEDIATE

    def test_reversal_allowed_after_a_stable_call(self):
        decision = decide(trend=Trend.DECLINING, last=ChangeDirection.STABLE)
        assert decision.direction == ChangeDirection.DOWN

    def test_hold_is_not_blocked(self):
        decision = decide(trend=Trend.STABLE, last=ChangeDirection.UP)
        assert decision.guard is None
        assert decision.reason == "Difficulty remains balanced for your current pace."


class TestExplainability:
    @pytest.mark.parametrize("current", list(Difficulty))
    @pytest.mark.parametrize("trend", list(Trend))
    @pytest.mark.parametrize("health", list(StreakHealth))
    @pytest.mark.parametrize("last", list(ChangeDirection))
    def test_reason_never_empty_and_one_step(self, current, trend, health, last):
        decision = decide(current=current, trend=trend, streak_health=health, last=last)

        assert decision.reason.strip()
        assert abs(decision.difficulty.rank - current.rank) <= 1
        if decision.direction == ChangeDirection.STABLE:
            assert decision.difficulty == current
