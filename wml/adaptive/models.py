"""
Adaptive Engine Data Models.

Canonical representation of a learner's performance record and the
closed enumerations the engine reasons about.

Components:
- Modality, Difficulty, LearnerTier, Trend, StreakHealth, ChangeDirection
- ModalityScores: Per-modality proficiency (0-100)
- PerformanceHistory: Immutable per-learner record (persisted as camelCase)
- QuizContext: Caller-supplied engagement context
- TrendReading / DifficultyDecision: Stage outputs
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)


SCORE_MIN = 0.0
SCORE_MAX = 100.0


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def clamp_score(value: Any) -> float:
    """Coerce anything score-like into [0, 100]; unparseable values become 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return SCORE_MIN
    if math.isnan(number):
        return SCORE_MIN
    return round(clamp(number, SCORE_MIN, SCORE_MAX), 2)


# ============================================================================
# Enumerations
# ============================================================================


class Modality(str, Enum):
    """Primary sensory/activity mode of a lesson."""

    VISUAL = "visual"
    READING = "reading"
    HANDSON = "handson"
    LISTENING = "listening"

    @classmethod
    def parse(cls, value: Any) -> Modality | None:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        for member in cls:
            if member.value == key:
                return member
        return None


class Difficulty(str, Enum):
    """Content-generation difficulty, ordered from easiest to hardest."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def rank(self) -> int:
        return _DIFFICULTY_ORDER.index(self)

    @property
    def display_name(self) -> str:
        return self.value.title()

    def step_up(self) -> Difficulty:
        return _DIFFICULTY_ORDER[min(self.rank + 1, len(_DIFFICULTY_ORDER) - 1)]

    def step_down(self) -> Difficulty:
        return _DIFFICULTY_ORDER[max(self.rank - 1, 0)]


_DIFFICULTY_ORDER = [Difficulty.BEGINNER, Difficulty.INTERMEDIATE, Difficulty.ADVANCED]


class LearnerTier(str, Enum):
    """Slow-moving holistic classification of learner skill."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def display_name(self) -> str:
        return self.value.title()

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            LearnerTier.BEGINNER: "yellow",
            LearnerTier.INTERMEDIATE: "cyan",
            LearnerTier.ADVANCED: "green",
        }[self]


class Trend(str, Enum):
    """Short-horizon direction of recent quiz performance."""

    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class StreakHealth(str, Enum):
    """Engagement consistency derived from the day-streak counter."""

    HEALTHY = "healthy"
    WARNING = "warning"
    AT_RISK = "at-risk"

    @property
    def color(self) -> str:
        return {
            StreakHealth.HEALTHY: "green",
            StreakHealth.WARNING: "yellow",
            StreakHealth.AT_RISK: "red",
        }[self]


class ChangeDirection(str, Enum):
    """Direction of the last difficulty decision."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"

    @property
    def opposite(self) -> ChangeDirection:
        return {
            ChangeDirection.UP: ChangeDirection.DOWN,
            ChangeDirection.DOWN: ChangeDirection.UP,
            ChangeDirection.STABLE: ChangeDirection.STABLE,
        }[self]


# Older documents used a four-level tier scale and different trend/health words
LEGACY_ALIASES: dict[type[Enum], dict[str, str]] = {
    LearnerTier: {"pro": "advanced", "legend": "advanced"},
    Trend: {"up": "improving", "down": "declining"},
    StreakHealth: {"strong": "healthy", "critical": "at-risk", "at_risk": "at-risk"},
    ChangeDirection: {"improving": "up", "declining": "down"},
}


def coerce_enum(enum_cls: type[Enum], value: Any, default: Enum) -> Enum:
    """Map a raw value onto ``enum_cls``, falling back to ``default``."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        key = LEGACY_ALIASES.get(enum_cls, {}).get(key, key)
        try:
            return enum_cls(key)
        except ValueError:
            pass
    if value is not None:
        logger.warning(f"Unrecognized {enum_cls.__name__} value {value!r}; using {default.value}")
    return default


# ============================================================================
# Records
# ============================================================================


class ModalityScores(BaseModel):
    """Per-modality proficiency estimates, each in [0, 100]."""

    model_config = ConfigDict(frozen=True)

    visual: float = 50.0
    reading: float = 50.0
    handson: float = 50.0
    listening: float = 50.0

    @field_validator("visual", "reading", "handson", "listening", mode="before")
    @classmethod
    def _clamp(cls, value: Any) -> float:
        return clamp_score(value)

    def get(self, modality: Modality) -> float:
        return getattr(self, modality.value)

    def with_score(self, modality: Modality, value: float) -> ModalityScores:
        return self.model_copy(update={modality.value: clamp_score(value)})

    def as_dict(self) -> dict[Modality, float]:
        return {m: self.get(m) for m in Modality}


NEUTRAL_REASON = "No quizzes completed yet."

_DATETIME = TypeAdapter(datetime)


class PerformanceHistory(BaseModel):
    """
    One learner's adaptive performance record.

    Immutable: every engine call returns a new instance. Field names are
    snake_case in Python and camelCase in the persisted document.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    modality_scores: ModalityScores = Field(default_factory=ModalityScores, alias="modalityScores")
    average_quiz_score: float = Field(default=0.0, alias="averageQuizScore")
    total_lessons_completed: int = Field(default=0, ge=0, alias="totalLessonsCompleted")
    recent_quiz_scores: tuple[float, ...] = Field(default=(), alias="recentQuizScores")
    current_difficulty: Difficulty = Field(default=Difficulty.BEGINNER, alias="currentDifficulty")
    learner_tier: LearnerTier = Field(default=LearnerTier.BEGINNER, alias="learnerTier")
    tier_score: float = Field(default=0.0, alias="tierScore")
    trend: Trend = Trend.STABLE
    streak_health: StreakHealth = Field(default=StreakHealth.AT_RISK, alias="streakHealth")
    strong_topics: tuple[str, ...] = Field(default=(), alias="strongTopics")
    weak_topics: tuple[str, ...] = Field(default=(), alias="weakTopics")
    difficulty_change_reason: str = Field(default=NEUTRAL_REASON, alias="difficultyChangeReason")
    last_difficulty_change_direction: ChangeDirection = Field(
        default=ChangeDirection.STABLE, alias="lastDifficultyChangeDirection"
    )
    last_updated: datetime | None = Field(default=None, alias="lastUpdated")

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @model_validator(mode="before")
    @classmethod
    def _lift_flat_modality_fields(cls, data: Any) -> Any:
        """Accept the older flat ``visualScore``/``readingScore``/... layout."""
        if not isinstance(data, Mapping):
            return data
        if "modalityScores" in data or "modality_scores" in data:
            return data
        flat = {m.value: data[f"{m.value}Score"] for m in Modality if f"{m.value}Score" in data}
        if not flat:
            return data
        data = dict(data)
        data["modalityScores"] = flat
        return data

    @field_validator("modality_scores", mode="before")
    @classmethod
    def _modality_scores(cls, value: Any) -> Any:
        if isinstance(value, (ModalityScores, Mapping)):
            return value
        if value is not None:
            logger.warning(f"Ignoring malformed modalityScores ({type(value).__name__})")
        return ModalityScores()

    @field_validator("last_updated", mode="before")
    @classmethod
    def _timestamp(cls, value: Any) -> datetime | None:
        """Accept ISO strings, epoch numbers and exported Firestore timestamps."""
        if value is None or isinstance(value, datetime):
            return value
        if isinstance(value, Mapping):
            seconds = value.get("seconds", value.get("_seconds"))
            nanos = value.get("nanoseconds", value.get("_nanoseconds", 0))
            try:
                return datetime.fromtimestamp(float(seconds) + float(nanos or 0) / 1e9, tz=timezone.utc)
            except (TypeError, ValueError, OverflowError, OSError):
                pass
        else:
            try:
                return _DATETIME.validate_python(value)
            except ValidationError:
                pass
        logger.warning(f"Ignoring unparseable lastUpdated: {value!r}")
        return None

    @field_validator("average_quiz_score", "tier_score", mode="before")
    @classmethod
    def _clamp_scores(cls, value: Any) -> float:
        return clamp_score(value)

    @field_validator("total_lessons_completed", mode="before")
    @classmethod
    def _non_negative_count(cls, value: Any) -> int:
        try:
            return max(0, int(value))
        except (TypeError, ValueError, OverflowError):
            return 0

    @field_validator("recent_quiz_scores", mode="before")
    @classmethod
    def _clamp_window(cls, value: Any) -> tuple[float, ...]:
        if not isinstance(value, (list, tuple)):
            return ()
        return tuple(clamp_score(v) for v in value)

    @field_validator("strong_topics", "weak_topics", mode="before")
    @classmethod
    def _topic_strings(cls, value: Any) -> tuple[str, ...]:
        if not isinstance(value, (list, tuple)):
            return ()
        return tuple(str(v) for v in value if str(v).strip())

    @field_validator("current_difficulty", mode="before")
    @classmethod
    def _difficulty(cls, value: Any) -> Difficulty:
        return coerce_enum(Difficulty, value, Difficulty.BEGINNER)

    @field_validator("learner_tier", mode="before")
    @classmethod
    def _tier(cls, value: Any) -> LearnerTier:
        return coerce_enum(LearnerTier, value, LearnerTier.BEGINNER)

    @field_validator("trend", mode="before")
    @classmethod
    def _trend(cls, value: Any) -> Trend:
        return coerce_enum(Trend, value, Trend.STABLE)

    @field_validator("streak_health", mode="before")
    @classmethod
    def _streak_health(cls, value: Any) -> StreakHealth:
        return coerce_enum(StreakHealth, value, StreakHealth.AT_RISK)

    @field_validator("last_difficulty_change_direction", mode="before")
    @classmethod
    def _direction(cls, value: Any) -> ChangeDirection:
        return coerce_enum(ChangeDirection, value, ChangeDirection.STABLE)

    @field_validator("difficulty_change_reason", mode="before")
    @classmethod
    def _reason(cls, value: Any) -> str:
        return str(value) if value else NEUTRAL_REASON

    # ------------------------------------------------------------------
    # Construction / serialization
    # ------------------------------------------------------------------

    @classmethod
    def default(cls) -> PerformanceHistory:
        """Neutral record for a learner with no quiz history."""
        return cls()

    @classmethod
    def from_document(cls, document: Mapping[str, Any] | None) -> PerformanceHistory:
        """
        Load a persisted document, substituting the neutral default when it
        is missing or corrupt.
        """
        if not isinstance(document, Mapping):
            if document is not None:
                logger.warning(f"Performance document is not a mapping ({type(document).__name__})")
            return cls.default()
        try:
            return cls.model_validate(dict(document))
        except ValidationError as e:
            logger.warning(f"Corrupt performance document, using defaults: {e.error_count()} errors")
            return cls.default()

    def to_document(self) -> dict[str, Any]:
        """Dump to the camelCase JSON-compatible document shape."""
        return self.model_dump(mode="json", by_alias=True)

    def evolve(self, **changes: Any) -> PerformanceHistory:
        """Return a copy with ``changes`` applied (snake_case field names)."""
        return self.model_copy(update=changes)


class QuizContext(BaseModel):
    """
    Engagement context supplied alongside a quiz result.

    Every field degrades to its most conservative value rather than failing.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    current_streak: int = Field(default=0, alias="currentStreak")
    completion_ratio: float = Field(default=0.0, alias="completionRatio")

    @field_validator("current_streak", mode="before")
    @classmethod
    def _streak(cls, value: Any) -> int:
        if isinstance(value, bool):
            return 0
        try:
            streak = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return 0
        return max(0, streak)

    @field_validator("completion_ratio", mode="before")
    @classmethod
    def _ratio(cls, value: Any) -> float:
        if isinstance(value, bool):
            return 0.0
        try:
            ratio = float(value)
        except (TypeError, ValueError):
            return 0.0
        if math.isnan(ratio):
            return 0.0
        return clamp(ratio, 0.0, 1.0)

    @classmethod
    def from_any(cls, value: Any) -> QuizContext:
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        if value is not None:
            logger.warning(f"Ignoring unparseable quiz context of type {type(value).__name__}")
        return cls()


# ============================================================================
# Stage outputs
# ============================================================================


@dataclass(frozen=True)
class TrendReading:
    """Trend classification over the recent-score window."""

    trend: Trend
    older_mean: float = 0.0
    newer_mean: float = 0.0
    low_confidence: bool = False

    @property
    def delta(self) -> float:
        return self.newer_mean - self.older_mean


@dataclass(frozen=True)
class DifficultyDecision:
    """
    Output of the difficulty controller.

    Attributes:
        difficulty: Difficulty for upcoming content
        direction: Which way difficulty moved this call
        reason: Learner-facing explanation (never empty)
        guard: Name of the guard that held difficulty, if any
    """

    difficulty: Difficulty
    direction: ChangeDirection
    reason: str
    guard: str | None = None

    @property
    def changed(self) -> bool:
        return self.direction != ChangeDirection.STABLE
