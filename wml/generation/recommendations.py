"""
Topic Recommendations.

Deterministic suggestions drawn from a fixed topic catalog, in priority
order:

1. Reinforcement for the most recent weak topics
2. Follow-ups for the most recent strong topics
3. Interest matches (up to 6 "recommended" in total)
4. Challenges built on strong topics (up to 2)
5. Exploration outside the learner's interests (up to 3)

A catalog topic is suggested at most once.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from wml.adaptive.models import PerformanceHistory
from wml.generation.profile import LearningProfile

MAX_RECOMMENDED = 6
MAX_CHALLENGE = 2
MAX_EXPLORE = 3
RECENT_SIGNALS = 2


class RecommendationCategory(str, Enum):
    RECOMMENDED = "recommended"
    CHALLENGE = "challenge"
    EXPLORE = "explore"


@dataclass(frozen=True)
class TopicRecommendation:
    topic: str
    reason: str
    icon: str
    category: RecommendationCategory

    def to_dict(self) -> dict:
        return {
            "topic": self.topic,
            "reason": self.reason,
            "icon": self.icon,
            "category": self.category.value,
        }


@dataclass(frozen=True)
class CatalogCategory:
    topics: tuple[str, ...]
    icon: str


TOPIC_CATALOG: dict[str, CatalogCategory] = {
    "science": CatalogCategory(("Volcanoes", "Human Body", "Chemistry Basics", "Electricity", "Ecosystems", "Weather & Climate"), "🔬"),
    "math": CatalogCategory(("Fractions", "Geometry", "Algebra Basics", "Statistics", "Problem Solving"), "🧮"),
    "history": CatalogCategory(("Ancient Egypt", "World War II", "The Renaissance", "Space Race", "Industrial Revolution"), "🏛️"),
    "art": CatalogCategory(("Color Theory", "Digital Art Basics", "Famous Artists", "Photography", "Graphic Design"), "🎨"),
    "technology": CatalogCategory(("How the Internet Works", "Coding Basics", "Artificial Intelligence", "Cybersecurity", "Robotics"), "💻"),
    "languages": CatalogCategory(("Spanish Basics", "French Phrases", "Japanese Culture & Language", "Sign Language"), "🌏"),
    "music": CatalogCategory(("Music Theory", "Famous Composers", "How Instruments Work", "Song Writing"), "🎵"),
    "sports": CatalogCategory(("Olympic History", "Sports Science", "Nutrition for Athletes", "Soccer Tactics"), "⚽"),
    "nature": CatalogCategory(("Rainforests", "Ocean Life", "Endangered Species", "Climate Change", "Plant Biology"), "🌿"),
    "space": CatalogCategory(("The Solar System", "Black Holes", "Mars Exploration", "Stars & Galaxies", "Astronaut Training"), "🚀"),
    "cooking": CatalogCategory(("Kitchen Science", "World Cuisines", "Baking Basics", "Nutrition & Diet"), "🍳"),
    "animals": CatalogCategory(("Dinosaurs", "Marine Biology", "Animal Behavior", "Pets & Care", "Migration Patterns"), "🐾"),
    "gaming": CatalogCategory(("Game Design Basics", "Pixel Art", "Level Design", "Game History"), "🎮"),
    "writing": CatalogCategory(("Story Structure", "Poetry", "Journalism", "Creative Writing Prompts"), "✍️"),
    "business": CatalogCategory(("Entrepreneurship", "Financial Literacy", "Marketing Basics", "Economics 101"), "💼"),
    "health": CatalogCategory(("First Aid Basics", "Mental Health", "Anatomy", "Healthy Habits"), "🏥"),
}

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def normalize_signal(value: str) -> str:
    """Lowercase, strip punctuation, collapse whitespace."""
    return " ".join(_NON_ALNUM.sub(" ", value.lower()).split())


def resolve_category(signal: str) -> str | None:
    """
    Fuzzy-map a free-text topic onto a catalog category key.

    Tries an exact key, then key substring matches, then matches against
    the catalog's topic titles.
    """
    normalized = normalize_signal(signal)
    if not normalized:
        return None
    if normalized in TOPIC_CATALOG:
        return normalized
    for key in TOPIC_CATALOG:
        if key in normalized or normalized in key:
            return key
    for key, category in TOPIC_CATALOG.items():
        for topic in category.topics:
            title = normalize_signal(topic)
            if title in normalized or normalized in title:
                return key
    return None


class _Picker:
    """Tracks what has been suggested so each catalog topic appears once."""

    def __init__(self, completed_topics: Iterable[str]):
        self.completed = [t.lower() for t in completed_topics]
        self.selected: set[str] = set()
        self.results: list[TopicRecommendation] = []

    def available(self, topic: str) -> bool:
        lowered = topic.lower()
        if any(lowered in done for done in self.completed):
            return False
        return normalize_signal(topic) not in self.selected

    def first_available(self, category: CatalogCategory) -> str | None:
        return next((t for t in category.topics if self.available(t)), None)

    def add(self, catalog_topic: str, recommendation: TopicRecommendation) -> None:
        self.selected.add(normalize_signal(catalog_topic))
        self.results.append(recommendation)

    def count(self, category: RecommendationCategory) -> int:
        return sum(1 for r in self.results if r.category == category)


def recommend_topics(
    profile: LearningProfile,
    history: PerformanceHistory,
    completed_topics: Iterable[str] = (),
) -> list[TopicRecommendation]:
    """
    Suggest next courses for a learner.

    Args:
        profile: Learner profile (interests drive the main suggestions)
        history: Performance record (strong/weak topics drive focus + challenge)
        completed_topics: Titles of courses already taken

    Returns:
        Ordered list of TopicRecommendation
    """
    picker = _Picker(completed_topics)
    recommended = RecommendationCategory.RECOMMENDED

    # Reinforcement first, then mastery extension, most recent signal first
    for signals, template in (
        (history.weak_topics, "Focus boost: strengthen {signal} with guided practice."),
        (history.strong_topics, "You performed well in {signal}. Try this next."),
    ):
        for signal in reversed(signals[-RECENT_SIGNALS:]):
            key = resolve_category(signal)
            if key is None:
                continue
            category = TOPIC_CATALOG[key]
            topic = picker.first_available(category)
            if topic is None:
                continue
            picker.add(topic, TopicRecommendation(topic, template.format(signal=signal), category.icon, recommended))

    for interest in profile.interests:
        category = TOPIC_CATALOG.get(interest)
        if category is None:
            continue
        for topic in category.topics:
            if picker.count(recommended) >= MAX_RECOMMENDED:
                break
            if picker.available(topic):
                picker.add(
                    topic,
                    TopicRecommendation(topic, f"Based on your interest in {interest}", category.icon, recommended),
                )
        if picker.count(recommended) >= MAX_RECOMMENDED:
            break

    for signal in history.strong_topics:
        if picker.count(RecommendationCategory.CHALLENGE) >= MAX_CHALLENGE:
            break
        key = resolve_category(signal)
        if key is None:
            continue
        topic = picker.first_available(TOPIC_CATALOG[key])
        if topic is None:
            continue
        picker.add(
            topic,
            TopicRecommendation(
                f"Advanced: {topic}",
                f"You're excelling in {signal} - ready for more?",
                "🏆",
                RecommendationCategory.CHALLENGE,
            ),
        )

    unexplored = [key for key in TOPIC_CATALOG if key not in profile.interests]
    for key in unexplored[:MAX_EXPLORE]:
        category = TOPIC_CATALOG[key]
        topic = category.topics[0]
        if normalize_signal(topic) in picker.selected:
            continue
        picker.add(
            topic,
            TopicRecommendation(topic, f"Discover something new in {key}", category.icon, RecommendationCategory.EXPLORE),
        )

    return picker.results
