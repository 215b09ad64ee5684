"""
Course generation inputs derived from the performance record.

- LearningProfile: Onboarding profile
- build_adaptive_course_prompt: Prompt text for the course generator
- recommend_topics: Catalog-based next-course suggestions
"""

from wml.generation.profile import LearningProfile
from wml.generation.prompts import build_adaptive_course_prompt
from wml.generation.recommendations import (
    RecommendationCategory,
    TopicRecommendation,
    recommend_topics,
    resolve_category,
)

__all__ = [
    "LearningProfile",
    "build_adaptive_course_prompt",
    "recommend_topics",
    "resolve_category",
    "RecommendationCategory",
    "TopicRecommendation",
]
