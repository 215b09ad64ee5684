"""
Performance record persistence.

- PerformanceStore: Protocol every store implements
- InMemoryPerformanceStore: Dict-backed store
- JsonPerformanceStore: One JSON document per learner on disk
"""

from wml.store.base import PerformanceStore, validate_learner_id
from wml.store.json_store import DEFAULT_STORE_DIR, JsonPerformanceStore
from wml.store.memory import InMemoryPerformanceStore

__all__ = [
    "PerformanceStore",
    "InMemoryPerformanceStore",
    "JsonPerformanceStore",
    "DEFAULT_STORE_DIR",
    "validate_learner_id",
]
