"""
Difficulty Controller.

Ordered decision table (first match wins):

1. Insufficient evidence  - fewer than N lessons: never change
2. Oscillation guard      - never reverse the previous call's change;
                            the held call records "stable", so the reversal
                            is allowed on the following call
3. Escalate               - improving trend, engagement not at risk
4. De-escalate            - declining trend or broken streak
5. Hold                   - everything else

Difficulty moves at most one level per call. Every branch produces a
direction and a non-empty learner-facing reason.
"""

from __future__ import annotations

from loguru import logger

from wml.adaptive.models import (
    ChangeDirection,
    Difficulty,
    DifficultyDecision,
    LearnerTier,
    StreakHealth,
    Trend,
)

DEFAULT_MIN_LESSONS = 3

INSUFFICIENT_EVIDENCE_REASON = "Need more lessons before difficulty adapts."

GUARD_INSUFFICIENT_EVIDENCE = "insufficient_evidence"
GUARD_OSCILLATION = "oscillation"


def _escalate(current: Difficulty, trend: Trend, tier: LearnerTier) -> DifficultyDecision:
    target = current.step_up()
    return DifficultyDecision(
        difficulty=target,
        direction=ChangeDirection.UP,
        reason=(
            f"Your quiz scores are {trend.value} and you are at the {tier.display_name} tier. "
            f"Difficulty increased to {target.display_name}."
        ),
    )


def _de_escalate(current: Difficulty, trend: Trend) -> DifficultyDecision:
    target = current.step_down()
    if trend == Trend.DECLINING:
        reason = (
            f"Your recent quiz scores are declining. Difficulty lowered to "
            f"{target.display_name} so you can rebuild confidence."
        )
    else:
        reason = (
            f"Your learning streak was broken. Difficulty lowered to "
            f"{target.display_name} to help you ease back in."
        )
    return DifficultyDecision(difficulty=target, direction=ChangeDirection.DOWN, reason=reason)


def _hold(current: Difficulty, trend: Trend, streak_health: StreakHealth) -> DifficultyDecision:
    if trend == Trend.IMPROVING and current == Difficulty.ADVANCED and streak_health != StreakHealth.AT_RISK:
        reason = "Your scores keep improving and you are already at Advanced. Keep it up!"
    elif current == Difficulty.BEGINNER and (trend == Trend.DECLINING or streak_health == StreakHealth.AT_RISK):
        reason = "Staying at Beginner to build stronger foundations."
    else:
        reason = "Difficulty remains balanced for your current pace."
    return DifficultyDecision(difficulty=current, direction=ChangeDirection.STABLE, reason=reason)


def decide_difficulty(
    current: Difficulty,
    trend: Trend,
    tier: LearnerTier,
    streak_health: StreakHealth,
    total_lessons_completed: int,
    last_direction: ChangeDirection,
    min_lessons: int = DEFAULT_MIN_LESSONS,
) -> DifficultyDecision:
    """
    Decide whether lesson difficulty should rise, fall or hold.

    Args:
        current: Difficulty before this quiz
        trend: Trend classified from the recent-score window
        tier: Learner tier after this quiz
        streak_health: Engagement health after this quiz
        total_lessons_completed: Lessons completed including this quiz
        last_direction: Direction recorded by the previous call
        min_lessons: Lessons required before difficulty may adapt

    Returns:
        DifficultyDecision with difficulty, direction and reason
    """
    if total_lessons_completed < min_lessons:
        return DifficultyDecision(
            difficulty=current,
            direction=ChangeDirection.STABLE,
            reason=INSUFFICIENT_EVIDENCE_REASON,
            guard=GUARD_INSUFFICIENT_EVIDENCE,
        )

    if trend == Trend.IMPROVING and streak_health != StreakHealth.AT_RISK and current != Difficulty.ADVANCED:
        candidate = _escalate(current, trend, tier)
    elif (trend == Trend.DECLINING or streak_health == StreakHealth.AT_RISK) and current != Difficulty.BEGINNER:
        candidate = _de_escalate(current, trend)
    else:
        return _hold(current, trend, streak_health)

    if last_direction != ChangeDirection.STABLE and candidate.direction == last_direction.opposite:
        logger.debug(
            f"Oscillation guard: holding {current.value} instead of moving {candidate.direction.value} "
            f"right after moving {last_direction.value}"
        )
        return DifficultyDecision(
            difficulty=current,
            direction=ChangeDirection.STABLE,
            reason=(
                f"Difficulty just moved {last_direction.value}, so it stays at "
                f"{current.display_name} until the next quiz confirms the change."
            ),
            guard=GUARD_OSCILLATION,
        )

    return candidate
