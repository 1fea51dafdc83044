"""Request models for plan generation: athlete profile, intermediate races, plan request."""

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .plans import DAYS_ORDER, Aggressiveness
from ..metrics.vdot import PaceZones, pace_zones


def _normalize_day(value: str) -> str:
    day = value.strip().lower()
    if day not in DAYS_ORDER:
        raise ValueError(f"Unknown day of week: {value}")
    return day


class SpeedworkExperience(str, Enum):
    """How much structured speed work the athlete has done."""
    NONE = "none"
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class StressLevel(str, Enum):
    """Life-stress self assessment."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"


class RacePriority(str, Enum):
    """Priority of a non-goal race inside the plan."""
    B = "B"
    C = "C"


class AthleteProfile(BaseModel):
    """Optional refinements that personalise workout choice and volume."""
    comfort_vo2max: Optional[int] = Field(None, ge=1, le=5)
    comfort_tempo: Optional[int] = Field(None, ge=1, le=5)
    comfort_hills: Optional[int] = Field(None, ge=1, le=5)
    years_running: Optional[float] = Field(None, ge=0)
    speedwork_experience: Optional[SpeedworkExperience] = None
    highest_weekly_mileage: Optional[float] = Field(None, ge=0)
    needs_extra_rest: bool = False
    stress_level: Optional[StressLevel] = None
    common_injuries: List[str] = Field(default_factory=list)
    weekday_availability_minutes: Optional[int] = Field(None, ge=0)
    weekend_availability_minutes: Optional[int] = Field(None, ge=0)
    mlr_preference: bool = False


class IntermediateRace(BaseModel):
    """A B or C race embedded in the plan."""
    name: str = Field(..., max_length=200)
    race_date: date
    distance_m: float = Field(..., gt=0)
    distance_label: Optional[str] = None
    priority: RacePriority = RacePriority.B


class PlanRequest(BaseModel):
    """Request model for generating a training plan."""
    race_date: date
    race_distance_m: float = Field(..., gt=0, description="Goal race distance in meters")
    race_distance_label: Optional[str] = None
    race_name: Optional[str] = Field(None, max_length=200)
    start_date: date
    current_weekly_mileage: float = Field(..., gt=0, le=250)
    peak_weekly_mileage: float = Field(..., gt=0, le=250)
    current_long_run_miles: Optional[float] = Field(None, ge=0, le=40)
    runs_per_week: int = Field(default=5, ge=3, le=7)
    preferred_long_run_day: str = "sunday"
    preferred_quality_days: List[str] = Field(default_factory=lambda: ["tuesday", "thursday"])
    required_rest_days: List[str] = Field(default_factory=list)
    aggressiveness: Aggressiveness = Aggressiveness.MODERATE
    quality_sessions_per_week: int = Field(default=2, ge=0, le=3)
    vdot: Optional[float] = Field(None, ge=15, le=85)
    pace_zones: Optional[PaceZones] = None
    athlete_profile: Optional[AthleteProfile] = None
    intermediate_races: List[IntermediateRace] = Field(default_factory=list)

    @field_validator("preferred_long_run_day")
    @classmethod
    def validate_long_run_day(cls, v: str) -> str:
        """Normalise and validate the long run day."""
        return _normalize_day(v)

    @field_validator("preferred_quality_days", "required_rest_days")
    @classmethod
    def validate_days(cls, v: List[str]) -> List[str]:
        """Normalise day names, dropping duplicates but keeping order."""
        days: List[str] = []
        for value in v:
            day = _normalize_day(value)
            if day not in days:
                days.append(day)
        return days

    @model_validator(mode="after")
    def validate_dates_and_volume(self) -> "PlanRequest":
        """Race must follow the start date and peak volume cannot be below current."""
        if self.race_date <= self.start_date:
            raise ValueError("race_date must be after start_date")
        if self.peak_weekly_mileage < self.current_weekly_mileage:
            raise ValueError("peak_weekly_mileage must be at least current_weekly_mileage")
        return self

    def resolved_pace_zones(self) -> Optional[PaceZones]:
        """Explicit pace zones, else zones derived from the VDOT, else None."""
        if self.pace_zones is not None:
            return self.pace_zones
        if self.vdot is not None:
            return pace_zones(self.vdot)
        return None
