"""Configuration settings for the Training Intelligence engine."""

from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


# __file__ = src/training_intelligence/config.py
# .parent.parent.parent = project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Engine settings loaded from environment variables (TRAINING_INTEL_*)."""

    model_config = SettingsConfigDict(
        env_prefix="TRAINING_INTEL_",
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"

    # Reference paces (seconds per mile) used by the execution scorer when
    # the athlete has no stored pace settings
    default_easy_pace: int = 540
    default_tempo_pace: int = 450
    default_threshold_pace: int = 420

    # Training-stimulus equivalence tolerances
    stimulus_volume_min: float = 0.8
    stimulus_volume_max: float = 1.2
    stimulus_pace_tolerance: float = 0.075

    # Fitness trend
    ramp_rate_window_weeks: int = 4


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
