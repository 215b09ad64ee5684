"""
Performance Store interface.

Stores hold one PerformanceHistory per learner. ``transaction()`` gives a
caller exclusive read-modify-write access to a single learner's record;
different learners never block each other.
"""

from __future__ import annotations

import re
import threading
from contextlib import contextmanager
from typing import Iterator, Protocol

from wml.adaptive.models import PerformanceHistory
from wml.errors import StoreError

LEARNER_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.@-]{0,127}$")


def validate_learner_id(learner_id: str) -> str:
    """Reject ids that are empty or could escape a storage directory."""
    if not isinstance(learner_id, str) or not LEARNER_ID_PATTERN.match(learner_id) or ".." in learner_id:
        raise StoreError(f"Invalid learner id: {learner_id!r}")
    return learner_id


class PerformanceStore(Protocol):
    """Persistence collaborator keyed by learner id."""

    def load(self, learner_id: str) -> PerformanceHistory | None:
        ...

    def save(self, learner_id: str, history: PerformanceHistory) -> None:
        ...

    def delete(self, learner_id: str) -> bool:
        ...

    def list_learners(self) -> list[str]:
        ...

    def transaction(self, learner_id: str):
        ...


class LearnerLocks:
    """Lazily created per-learner locks."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def get(self, learner_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(learner_id)
            if lock is None:
                lock = self._locks[learner_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, learner_id: str) -> Iterator[None]:
        lock = self.get(validate_learner_id(learner_id))
        with lock:
            yield
