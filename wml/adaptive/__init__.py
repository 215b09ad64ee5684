"""
Adaptive Performance & Difficulty Engine.

Components:
- AdaptiveEngine: Runs the per-quiz stages and returns a new record
- QuizCompletionService: Read-modify-write workflow around the engine
- PerformanceHistory: Immutable per-learner record
- decide_difficulty: The difficulty decision table
"""
from wml.adaptive.difficulty import decide_difficulty
from wml.adaptive.engine import AdaptiveEngine, EngineConfig, update_performance_after_quiz
from wml.adaptive.models import (
    ChangeDirection,
    Difficulty,
    DifficultyDecision,
    LearnerTier,
    Modality,
    ModalityScores,
    PerformanceHistory,
    QuizContext,
    StreakHealth,
    Trend,
    TrendReading,
)
from wml.adaptive.workflow import QuizCompletionService, QuizOutcome

__all__ = [
    # Engine
    "AdaptiveEngine",
    "EngineConfig",
    "update_performance_after_quiz",
    "decide_difficulty",
    # Workflow
    "QuizCompletionService",
    "QuizOutcome",
    # Data models
    "PerformanceHistory",
    "ModalityScores",
    "QuizContext",
    "DifficultyDecision",
    "TrendReading",
    # Enums
    "Modality",
    "Difficulty",
    "LearnerTier",
    "Trend",
    "StreakHealth",
    "ChangeDirection",
]
