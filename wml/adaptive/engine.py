"""
Adaptive Performance & Difficulty Engine.

Runs the per-quiz stages in a fixed order and returns a new
PerformanceHistory:

1. Modality score update
2. History window + all-time average
3. Trend classification
4. Tier classification
5. Streak health
6. Difficulty decision
7. Topic strength tracking

The engine is pure and synchronous: no I/O, no clock, no randomness. It
never raises on bad input; scores are clamped and missing context falls
back to conservative defaults. Callers own persistence and the
``lastUpdated`` timestamp.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from loguru import logger

from wml.adaptive.difficulty import DEFAULT_MIN_LESSONS, decide_difficulty
from wml.adaptive.history import DEFAULT_WINDOW_SIZE, append_to_window, cumulative_average
from wml.adaptive.modality import DEFAULT_ALPHA, update_modality_scores
from wml.adaptive.models import Modality, PerformanceHistory, QuizContext, clamp_score
from wml.adaptive.streak import HEALTHY_STREAK, WARNING_STREAK, evaluate_streak_health
from wml.adaptive.tier import (
    AVERAGE_WEIGHT,
    COMPLETION_WEIGHT,
    DEFAULT_TIER_BANDS,
    STREAK_BONUS_CAP,
    STREAK_WEIGHT,
    blend_tier_evidence,
    classify_tier,
    update_tier_score,
)
from wml.adaptive.topics import DEFAULT_TOPIC_CAP, STRONG_THRESHOLD, WEAK_THRESHOLD, track_topic
from wml.adaptive.trend import DEFAULT_TREND_THRESHOLD, classify_trend


@dataclass(frozen=True)
class EngineConfig:
    """Tunable constants for every stage."""

    modality_alpha: float = DEFAULT_ALPHA
    window_size: int = DEFAULT_WINDOW_SIZE
    trend_threshold: float = DEFAULT_TREND_THRESHOLD
    tier_alpha: float = DEFAULT_ALPHA
    tier_bands: tuple[float, float] = DEFAULT_TIER_BANDS
    tier_weights: tuple[float, float, float] = (AVERAGE_WEIGHT, COMPLETION_WEIGHT, STREAK_WEIGHT)
    streak_bonus_cap: int = STREAK_BONUS_CAP
    healthy_streak: int = HEALTHY_STREAK
    warning_streak: int = WARNING_STREAK
    min_lessons: int = DEFAULT_MIN_LESSONS
    strong_threshold: float = STRONG_THRESHOLD
    weak_threshold: float = WEAK_THRESHOLD
    topic_cap: int = DEFAULT_TOPIC_CAP


class AdaptiveEngine:
    """Applies one quiz result to a learner's performance record."""

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()

    def update(
        self,
        history: PerformanceHistory | Mapping[str, Any] | None,
        score: Any,
        modality: Modality | str | None,
        topic: str | None,
        context: QuizContext | Mapping[str, Any] | None = None,
    ) -> PerformanceHistory:
        """
        Compute the record that follows ``history`` after one quiz.

        Args:
            history: Current record (a document or None yields the default)
            score: Quiz percentage; clamped to [0, 100], unparseable = 0
            modality: Lesson modality; unknown values skip the modality stage
            topic: Topic label of the lesson
            context: Current streak and course completion ratio

        Returns:
            New PerformanceHistory. ``last_updated`` is carried over untouched.
        """
        cfg = self.config
        if not isinstance(history, PerformanceHistory):
            history = PerformanceHistory.from_document(history)
        ctx = QuizContext.from_any(context)
        quiz_score = clamp_score(score)
        lesson_modality = Modality.parse(modality)

        modality_scores = update_modality_scores(
            history.modality_scores, lesson_modality, quiz_score, cfg.modality_alpha
        )

        window = append_to_window(history.recent_quiz_scores, quiz_score, cfg.window_size)
        average = cumulative_average(
            history.average_quiz_score, history.total_lessons_completed, quiz_score
        )
        total_lessons = history.total_lessons_completed + 1

        reading = classify_trend(window, cfg.trend_threshold)

        evidence = blend_tier_evidence(
            average,
            ctx.completion_ratio,
            ctx.current_streak,
            weights=cfg.tier_weights,
            streak_cap=cfg.streak_bonus_cap,
        )
        tier_score = update_tier_score(history.tier_score, evidence, cfg.tier_alpha)
        tier = classify_tier(tier_score, history.learner_tier, cfg.tier_bands)

        streak_health = evaluate_streak_health(
            ctx.current_streak, cfg.healthy_streak, cfg.warning_streak
        )

        decision = decide_difficulty(
            current=history.current_difficulty,
            trend=reading.trend,
            tier=tier,
            streak_health=streak_health,
            total_lessons_completed=total_lessons,
            last_direction=history.last_difficulty_change_direction,
            min_lessons=cfg.min_lessons,
        )

        strong, weak = track_topic(
            history.strong_topics,
            history.weak_topics,
            topic,
            quiz_score,
            cap=cfg.topic_cap,
            strong_at=cfg.strong_threshold,
            weak_at=cfg.weak_threshold,
        )

        logger.debug(
            f"Quiz {quiz_score:.0f}% -> trend={reading.trend.value} "
            f"(delta {reading.delta:+.1f}{', low confidence' if reading.low_confidence else ''}), "
            f"tier={tier.value} ({tier_score:.1f}), streak={streak_health.value}, "
            f"difficulty {history.current_difficulty.value}->{decision.difficulty.value} "
            f"[{decision.direction.value}{', guard=' + decision.guard if decision.guard else ''}]"
        )

        return history.evolve(
            modality_scores=modality_scores,
            average_quiz_score=average,
            total_lessons_completed=total_lessons,
            recent_quiz_scores=window,
            trend=reading.trend,
            tier_score=tier_score,
            learner_tier=tier,
            streak_health=streak_health,
            current_difficulty=decision.difficulty,
            difficulty_change_reason=decision.reason,
            last_difficulty_change_direction=decision.direction,
            strong_topics=strong,
            weak_topics=weak,
        )


_default_engine = AdaptiveEngine()


def update_performance_after_quiz(
    history: PerformanceHistory | Mapping[str, Any] | None,
    score: Any,
    modality: Modality | str | None,
    topic: str | None,
    context: QuizContext | Mapping[str, Any] | None = None,
) -> PerformanceHistory:
    """Module-level shortcut using the default EngineConfig."""
    return _default_engine.update(history, score, modality, topic, context)
