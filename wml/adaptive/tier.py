"""
Tier Classifier.

The tier score is an EMA over blended evidence:
- all-time average quiz score (60%)
- course completion ratio scaled to 100 (30%)
- engagement streak, capped so it contributes at most 10 points (10%)

Tiers come from fixed bands on the smoothed score. Crossing a band requires
the score to be strictly beyond the boundary; a score sitting exactly on a
boundary keeps whichever adjacent tier the learner already holds.
"""

from __future__ import annotations

from wml.adaptive.modality import DEFAULT_ALPHA, smooth
from wml.adaptive.models import LearnerTier, clamp

# (lower bound of intermediate, lower bound of advanced)
DEFAULT_TIER_BANDS = (40.0, 75.0)

AVERAGE_WEIGHT = 0.6
COMPLETION_WEIGHT = 0.3
STREAK_WEIGHT = 0.1
STREAK_BONUS_CAP = 10


def blend_tier_evidence(
    average_quiz_score: float,
    completion_ratio: float,
    streak: int,
    weights: tuple[float, float, float] = (AVERAGE_WEIGHT, COMPLETION_WEIGHT, STREAK_WEIGHT),
    streak_cap: int = STREAK_BONUS_CAP,
) -> float:
    """Combine the three evidence sources into a single 0-100 value."""
    average_weight, completion_weight, streak_weight = weights
    streak_cap = max(1, streak_cap)
    completion = clamp(completion_ratio, 0.0, 1.0) * 100
    streak_component = min(max(streak, 0), streak_cap) * (100 / streak_cap)
    evidence = (
        average_quiz_score * average_weight
        + completion * completion_weight
        + streak_component * streak_weight
    )
    return clamp(evidence, 0.0, 100.0)


def update_tier_score(previous: float, evidence: float, alpha: float = DEFAULT_ALPHA) -> float:
    return smooth(previous, evidence, alpha)


def _band(tier_score: float, bands: tuple[float, float]) -> LearnerTier:
    intermediate_at, advanced_at = bands
    if tier_score >= advanced_at:
        return LearnerTier.ADVANCED
    if tier_score >= intermediate_at:
        return LearnerTier.INTERMEDIATE
    return LearnerTier.BEGINNER


def classify_tier(
    tier_score: float,
    current_tier: LearnerTier,
    bands: tuple[float, float] = DEFAULT_TIER_BANDS,
) -> LearnerTier:
    """
    Map a tier score to a tier, holding steady on exact boundary values.

    Args:
        tier_score: Smoothed tier score (0-100)
        current_tier: Tier before this update
        bands: Lower bounds of the intermediate and advanced bands

    Returns:
        The new LearnerTier
    """
    intermediate_at, advanced_at = bands
    # Touching a boundary never completes a crossing
    if tier_score == intermediate_at:
        return LearnerTier.BEGINNER if current_tier == LearnerTier.BEGINNER else LearnerTier.INTERMEDIATE
    if tier_score == advanced_at:
        return LearnerTier.ADVANCED if current_tier == LearnerTier.ADVANCED else LearnerTier.INTERMEDIATE
    return _band(tier_score, bands)
