"""
Quiz-completion workflow.

Wraps the pure engine in the per-learner read-modify-write critical
section: load (or default), compute, stamp ``lastUpdated``, save.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Mapping

from loguru import logger

from wml.adaptive.engine import AdaptiveEngine
from wml.adaptive.models import Modality, PerformanceHistory, QuizContext

if TYPE_CHECKING:
    from wml.store.base import PerformanceStore


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class QuizOutcome:
    """Result of recording one quiz."""

    learner_id: str
    previous: PerformanceHistory
    updated: PerformanceHistory

    @property
    def difficulty_changed(self) -> bool:
        return self.previous.current_difficulty != self.updated.current_difficulty

    @property
    def tier_changed(self) -> bool:
        return self.previous.learner_tier != self.updated.learner_tier


class QuizCompletionService:
    """Records quiz results against a PerformanceStore."""

    def __init__(
        self,
        store: PerformanceStore,
        engine: AdaptiveEngine | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.engine = engine or AdaptiveEngine()
        self.clock = clock

    def get_history(self, learner_id: str) -> PerformanceHistory:
        """Stored record, or the neutral default for a new learner."""
        return self.store.load(learner_id) or PerformanceHistory.default()

    def record_quiz(
        self,
        learner_id: str,
        score: Any,
        modality: Modality | str | None,
        topic: str | None,
        context: QuizContext | Mapping[str, Any] | None = None,
    ) -> QuizOutcome:
        """
        Apply a completed quiz to the learner's stored record.

        Raises:
            StoreError: If the learner id is invalid or the write fails
        """
        with self.store.transaction(learner_id):
            previous = self.get_history(learner_id)
            updated = self.engine.update(previous, score, modality, topic, context)
            updated = updated.evolve(last_updated=self.clock())
            self.store.save(learner_id, updated)

        outcome = QuizOutcome(learner_id=learner_id, previous=previous, updated=updated)
        if outcome.difficulty_changed:
            logger.info(
                f"{learner_id}: difficulty {previous.current_difficulty.value} -> "
                f"{updated.current_difficulty.value}"
            )
        if outcome.tier_changed:
            logger.info(f"{learner_id}: tier {previous.learner_tier.value} -> {updated.learner_tier.value}")
        return outcome

    def reset(self, learner_id: str) -> bool:
        with self.store.transaction(learner_id):
            return self.store.delete(learner_id)
