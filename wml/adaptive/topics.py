"""
Topic Strength Tracker.

Maintains bounded, insertion-ordered strong/weak topic sets. Reinforcing a
topic moves it to the most recent position; overflow evicts the oldest.
"""

from __future__ import annotations

from typing import Sequence

STRONG_THRESHOLD = 85.0
WEAK_THRESHOLD = 40.0
DEFAULT_TOPIC_CAP = 5


def normalize_topic(topic: object) -> str:
    """Trim, case-fold and collapse whitespace so labels deduplicate."""
    if not isinstance(topic, str):
        return ""
    return " ".join(topic.split()).casefold()


def _reinforce(topics: Sequence[str], topic: str, cap: int) -> tuple[str, ...]:
    kept = [t for t in topics if t != topic]
    kept.append(topic)
    return tuple(kept[-max(1, cap):])


def _remove(topics: Sequence[str], topic: str) -> tuple[str, ...]:
    return tuple(t for t in topics if t != topic)


def track_topic(
    strong: Sequence[str],
    weak: Sequence[str],
    topic: object,
    score: float,
    cap: int = DEFAULT_TOPIC_CAP,
    strong_at: float = STRONG_THRESHOLD,
    weak_at: float = WEAK_THRESHOLD,
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """
    Update topic sets for a quiz on ``topic``.

    Returns:
        (strong_topics, weak_topics)
    """
    label = normalize_topic(topic)
    strong, weak = tuple(strong), tuple(weak)
    if not label:
        return strong, weak
    if score >= strong_at:
        return _reinforce(strong, label, cap), _remove(weak, label)
    if score <= weak_at:
        return _remove(strong, label), _reinforce(weak, label, cap)
    return strong, weak
