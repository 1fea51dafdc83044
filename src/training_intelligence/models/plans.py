"""Data models for generated training plans."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


DAYS_ORDER: Tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


class TrainingPhase(str, Enum):
    """Training phases within a periodized plan."""
    BASE = "base"       # Aerobic foundation building
    BUILD = "build"     # Progressive load increase
    PEAK = "peak"       # Race-specific intensity
    TAPER = "taper"     # Pre-race volume reduction


PHASE_ORDER: Tuple[TrainingPhase, ...] = (
    TrainingPhase.BASE,
    TrainingPhase.BUILD,
    TrainingPhase.PEAK,
    TrainingPhase.TAPER,
)


class WorkoutCategory(str, Enum):
    """Scheduling category of a planned workout."""
    EASY = "easy"
    LONG = "long"
    QUALITY = "quality"
    RACE = "race"
    RECOVERY = "recovery"


class WorkoutStatus(str, Enum):
    """Lifecycle of a planned workout after generation."""
    PLANNED = "planned"
    SKIPPED = "skipped"


class Aggressiveness(str, Enum):
    """How quickly weekly volume is allowed to grow."""
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


@dataclass(frozen=True)
class StructureSegment:
    """
    One segment of a structured workout.

    Distances are in miles unless the field says meters. `pace` names a
    zone of the pace ladder (easy, tempo, threshold, interval, ...).
    """
    segment_type: str  # warmup, work, steady, intervals, fartlek, hills, strides, ladder, cooldown
    distance_miles: Optional[float] = None
    distance_meters: Optional[float] = None
    duration_minutes: Optional[float] = None
    repeats: Optional[int] = None
    work_distance_miles: Optional[float] = None
    work_distance_meters: Optional[float] = None
    work_duration_minutes: Optional[float] = None
    rest_minutes: Optional[float] = None
    percentage: Optional[float] = None
    pace: Optional[str] = None
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, dropping unset fields."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


@dataclass
class PlannedWorkout:
    """A single scheduled workout within a training week."""
    date: date
    day_of_week: str  # "monday" .. "sunday"
    category: WorkoutCategory
    template_id: str
    name: str
    description: str
    rationale: str
    is_key_workout: bool = False
    target_distance_miles: Optional[float] = None
    target_duration_minutes: Optional[int] = None
    target_pace: Optional[int] = None  # seconds per mile
    target_zone: Optional[str] = None  # pace-ladder zone the target pace came from
    alternatives: List[str] = field(default_factory=list)
    structure: Tuple[StructureSegment, ...] = ()
    status: WorkoutStatus = WorkoutStatus.PLANNED
    notes: Optional[str] = None

    @property
    def is_race(self) -> bool:
        return self.category == WorkoutCategory.RACE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "date": self.date.isoformat(),
            "day_of_week": self.day_of_week,
            "category": self.category.value,
            "template_id": self.template_id,
            "name": self.name,
            "description": self.description,
            "rationale": self.rationale,
            "is_key_workout": self.is_key_workout,
            "target_distance_miles": self.target_distance_miles,
            "target_duration_minutes": self.target_duration_minutes,
            "target_pace": self.target_pace,
            "target_zone": self.target_zone,
            "alternatives": list(self.alternatives),
            "structure": [s.to_dict() for s in self.structure],
            "status": self.status.value,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlannedWorkout":
        """Rebuild from to_dict() output. Dates may be ISO strings."""
        workout_date = data["date"]
        if isinstance(workout_date, str):
            workout_date = date.fromisoformat(workout_date)
        return cls(
            date=workout_date,
            day_of_week=data.get("day_of_week") or DAYS_ORDER[workout_date.weekday()],
            category=WorkoutCategory(data.get("category", "easy")),
            template_id=data.get("template_id", "easy_run"),
            name=data.get("name", ""),
            description=data.get("description", ""),
            rationale=data.get("rationale", ""),
            is_key_workout=bool(data.get("is_key_workout", False)),
            target_distance_miles=data.get("target_distance_miles"),
            target_duration_minutes=data.get("target_duration_minutes"),
            target_pace=data.get("target_pace"),
            target_zone=data.get("target_zone"),
            alternatives=list(data.get("alternatives", [])),
            structure=tuple(StructureSegment(**s) for s in data.get("structure", [])),
            status=WorkoutStatus(data.get("status", "planned")),
            notes=data.get("notes"),
        )


@dataclass
class TrainingWeek:
    """A single week within a training plan."""
    week_number: int
    start_date: date
    end_date: date
    phase: TrainingPhase
    week_in_phase: int
    target_mileage: float
    long_run_miles: float
    quality_sessions: int
    focus: str
    is_down_week: bool = False
    workouts: List[PlannedWorkout] = field(default_factory=list)

    @property
    def key_workouts(self) -> List[PlannedWorkout]:
        return [w for w in self.workouts if w.is_key_workout]

    @property
    def scheduled_miles(self) -> float:
        """Sum of workout target distances."""
        return sum(w.target_distance_miles or 0 for w in self.workouts)

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "week_number": self.week_number,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "phase": self.phase.value,
            "week_in_phase": self.week_in_phase,
            "target_mileage": self.target_mileage,
            "long_run_miles": self.long_run_miles,
            "quality_sessions": self.quality_sessions,
            "focus": self.focus,
            "is_down_week": self.is_down_week,
            "workouts": [w.to_dict() for w in self.workouts],
        }


@dataclass
class PhaseSummary:
    """Length and intent of one phase."""
    phase: TrainingPhase
    weeks: int
    focus: str
    intensity_distribution: Dict[str, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "weeks": self.weeks,
            "focus": self.focus,
            "intensity_distribution": dict(self.intensity_distribution),
        }


@dataclass
class PlanSummary:
    """Totals across the whole plan."""
    total_miles: float
    peak_mileage_week: int
    peak_mileage: float
    quality_sessions_total: int
    long_runs_total: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_miles": self.total_miles,
            "peak_mileage_week": self.peak_mileage_week,
            "peak_mileage": self.peak_mileage,
            "quality_sessions_total": self.quality_sessions_total,
            "long_runs_total": self.long_runs_total,
        }


@dataclass
class TrainingPlan:
    """A complete periodized plan leading to a goal race."""
    race_date: date
    race_distance_m: float
    race_distance_label: str
    total_weeks: int
    phases: List[PhaseSummary]
    weeks: List[TrainingWeek]
    summary: PlanSummary
    race_name: Optional[str] = None
    vdot: Optional[float] = None

    @property
    def workouts(self) -> List[PlannedWorkout]:
        """All workouts in date order."""
        return [w for week in self.weeks for w in week.workouts]

    @property
    def phase_weeks(self) -> Dict[TrainingPhase, int]:
        return {p.phase: p.weeks for p in self.phases}

    def get_week_for_date(self, day: date) -> Optional[TrainingWeek]:
        """Get the week containing a date."""
        for week in self.weeks:
            if week.contains(day):
                return week
        return None

    def workout_on(self, day: date) -> Optional[PlannedWorkout]:
        """Get the workout scheduled on a date, if any."""
        week = self.get_week_for_date(day)
        if week is None:
            return None
        for workout in week.workouts:
            if workout.date == day:
                return workout
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "race_name": self.race_name,
            "race_date": self.race_date.isoformat(),
            "race_distance_m": self.race_distance_m,
            "race_distance": self.race_distance_label,
            "vdot": self.vdot,
            "total_weeks": self.total_weeks,
            "phases": [p.to_dict() for p in self.phases],
            "weeks": [w.to_dict() for w in self.weeks],
            "summary": self.summary.to_dict(),
        }
