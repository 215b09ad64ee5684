"""Learner profile captured at onboarding."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wml.adaptive.models import Modality


class LearningProfile(BaseModel):
    """Self-reported learner profile used to tailor generated courses."""

    model_config = ConfigDict(populate_by_name=True)

    age: int = Field(10, ge=3, le=120, description="Learner age in years")
    country: str = Field("", description="Country of residence")
    grade_level: str = Field("", alias="gradeLevel", description="School grade, e.g. 'Grade 5'")
    learning_styles: list[Modality] = Field(
        default_factory=list, alias="learningStyles", description="Preferred modalities"
    )
    interests: list[str] = Field(default_factory=list, description="Interest category keys")
    language: str = Field("English", description="Language courses are written in")
    english_level: Literal["beginner", "intermediate", "advanced", "native"] | None = Field(
        None, alias="englishLevel"
    )

    @field_validator("learning_styles", mode="before")
    @classmethod
    def _known_styles(cls, value):
        styles = []
        for raw in value or []:
            modality = Modality.parse(raw)
            if modality is not None and modality not in styles:
                styles.append(modality)
        return styles

    @field_validator("interests", mode="before")
    @classmethod
    def _lower_interests(cls, value):
        return [str(v).strip().lower() for v in value or [] if str(v).strip()]
