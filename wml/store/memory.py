"""In-memory performance store (tests and single-process use)."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from wml.adaptive.models import PerformanceHistory
from wml.store.base import LearnerLocks, validate_learner_id


class InMemoryPerformanceStore:
    """Dict-backed store. Records are immutable, so no copying is needed."""

    def __init__(self):
        self._records: dict[str, PerformanceHistory] = {}
        self._mutex = threading.Lock()
        self._locks = LearnerLocks()

    def load(self, learner_id: str) -> PerformanceHistory | None:
        validate_learner_id(learner_id)
        with self._mutex:
            return self._records.get(learner_id)

    def save(self, learner_id: str, history: PerformanceHistory) -> None:
        validate_learner_id(learner_id)
        with self._mutex:
            self._records[learner_id] = history

    def delete(self, learner_id: str) -> bool:
        validate_learner_id(learner_id)
        with self._mutex:
            return self._records.pop(learner_id, None) is not None

    def list_learners(self) -> list[str]:
        with self._mutex:
            return sorted(self._records)

    @contextmanager
    def transaction(self, learner_id: str) -> Iterator[None]:
        with self._locks.hold(learner_id):
            yield
