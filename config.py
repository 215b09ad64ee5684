"""
Configuration settings for the WML adaptive engine.

Uses Pydantic Settings for environment variable management with .env file support.
Every variable is prefixed with ``WML_`` (e.g. ``WML_STORE_DIR``).
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wml.adaptive.engine import EngineConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WML_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    store_dir: Path = Field(
        default=Path.home() / ".wml" / "performance",
        description="Directory holding one JSON performance record per learner",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Minimum loguru level written to stderr by the CLI",
    )

    # ========================================
    # Adaptive Engine Tuning
    # ========================================
    # Defaults are design choices, not values validated against learner data
    modality_alpha: float = Field(
        default=0.3,
        gt=0.0,
        le=1.0,
        description="EMA smoothing factor for per-modality scores",
    )
    window_size: int = Field(
        default=5,
        ge=2,
        description="Number of recent quiz scores kept for trend detection",
    )
    trend_threshold: float = Field(
        default=8.0,
        ge=0.0,
        description="Half-window mean difference (points) needed to call a trend",
    )
    tier_alpha: float = Field(
        default=0.3,
        gt=0.0,
        le=1.0,
        description="EMA smoothing factor for the tier score",
    )
    tier_intermediate_at: float = Field(
        default=40.0,
        description="Tier score at which the intermediate band starts",
    )
    tier_advanced_at: float = Field(
        default=75.0,
        description="Tier score at which the advanced band starts",
    )
    tier_average_weight: float = Field(default=0.6, ge=0.0, le=1.0)
    tier_completion_weight: float = Field(default=0.3, ge=0.0, le=1.0)
    tier_streak_weight: float = Field(default=0.1, ge=0.0, le=1.0)
    streak_bonus_cap: int = Field(
        default=10,
        ge=1,
        description="Streak days beyond which the tier streak bonus stops growing",
    )
    healthy_streak: int = Field(default=3, ge=1, description="Streak days for 'healthy'")
    warning_streak: int = Field(default=1, ge=1, description="Streak days for 'warning'")
    min_lessons: int = Field(
        default=3,
        ge=0,
        description="Lessons required before difficulty may adapt",
    )
    strong_threshold: float = Field(default=85.0, description="Score marking a topic as strong")
    weak_threshold: float = Field(default=40.0, description="Score marking a topic as weak")
    topic_cap: int = Field(default=5, ge=1, description="Maximum entries per topic set")

    @model_validator(mode="after")
    def _check_orderings(self) -> Settings:
        if self.warning_streak > self.healthy_streak:
            raise ValueError("warning_streak must not exceed healthy_streak")
        if not 0.0 <= self.tier_intermediate_at < self.tier_advanced_at <= 100.0:
            raise ValueError("tier bands must satisfy 0 <= tier_intermediate_at < tier_advanced_at <= 100")
        if self.weak_threshold >= self.strong_threshold:
            raise ValueError("weak_threshold must be below strong_threshold")
        return self

    # ========================================
    # Helper Methods
    # ========================================
    def get_engine_config(self) -> EngineConfig:
        """Build the engine's tuning constants from these settings."""
        return EngineConfig(
            modality_alpha=self.modality_alpha,
            window_size=self.window_size,
            trend_threshold=self.trend_threshold,
            tier_alpha=self.tier_alpha,
            tier_bands=(self.tier_intermediate_at, self.tier_advanced_at),
            tier_weights=(
                self.tier_average_weight,
                self.tier_completion_weight,
                self.tier_streak_weight,
            ),
            streak_bonus_cap=self.streak_bonus_cap,
            healthy_streak=self.healthy_streak,
            warning_streak=self.warning_streak,
            min_lessons=self.min_lessons,
            strong_threshold=self.strong_threshold,
            weak_threshold=self.weak_threshold,
            topic_cap=self.topic_cap,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
