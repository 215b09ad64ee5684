"""
Modality Score Updater.

Exponential smoothing of the per-modality proficiency estimate touched by a
quiz, plus the modality ranking used when generating new courses.
"""

from __future__ import annotations

from typing import Iterable

from loguru import logger

from wml.adaptive.models import Modality, ModalityScores, clamp_score

# Smoothing factor: higher = recent scores matter more
DEFAULT_ALPHA = 0.3

# Ranking weights for course generation
PERFORMANCE_WEIGHT = 0.6
PREFERENCE_BONUS = 40.0


def smooth(previous: float, observation: float, alpha: float = DEFAULT_ALPHA) -> float:
    """EMA step, clamped to [0, 100]."""
    return clamp_score(previous * (1 - alpha) + observation * alpha)


def update_modality_scores(
    scores: ModalityScores,
    modality: Modality | None,
    score: float,
    alpha: float = DEFAULT_ALPHA,
) -> ModalityScores:
    """
    Move the score of ``modality`` toward the quiz result.

    Other modalities are untouched. A single quiz cannot move a modality by
    more than ``alpha * 100`` points.

    Args:
        scores: Current per-modality scores
        modality: Modality of the completed lesson (None = unknown)
        score: Quiz percentage, already clamped to [0, 100]
        alpha: Smoothing factor

    Returns:
        New ModalityScores (the input when modality is unknown)
    """
    if modality is None:
        logger.warning("Unknown lesson modality; modality scores left unchanged")
        return scores
    return scores.with_score(modality, smooth(scores.get(modality), score, alpha))


def rank_modalities(
    scores: ModalityScores,
    preferred_styles: Iterable[Modality | str] = (),
) -> list[Modality]:
    """
    Order modalities for content generation, best first.

    Measured performance contributes 60%; each self-reported preferred style
    earns a flat bonus. Ties keep declaration order.
    """
    weighted = {m: scores.get(m) * PERFORMANCE_WEIGHT for m in Modality}
    for style in preferred_styles:
        modality = Modality.parse(style)
        if modality is not None:
            weighted[modality] += PREFERENCE_BONUS
    return sorted(Modality, key=lambda m: weighted[m], reverse=True)
