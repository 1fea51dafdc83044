"""Data models for the training intelligence engine."""

from .plans import (
    Aggressiveness,
    PhaseSummary,
    PlannedWorkout,
    PlanSummary,
    StructureSegment,
    TrainingPhase,
    TrainingPlan,
    TrainingWeek,
    WorkoutCategory,
    WorkoutStatus,
)
from .athlete import (
    AthleteProfile,
    IntermediateRace,
    PlanRequest,
    RacePriority,
    SpeedworkExperience,
    StressLevel,
)
from .execution import (
    CompletedWorkout,
    ExecutionScore,
    ExecutionScoreComponents,
    ReferencePaces,
    TrainingStimulusComparison,
    WeatherSnapshot,
    WorkoutSegment,
)

__all__ = [
    # Plans
    "Aggressiveness",
    "PhaseSummary",
    "PlannedWorkout",
    "PlanSummary",
    "StructureSegment",
    "TrainingPhase",
    "TrainingPlan",
    "TrainingWeek",
    "WorkoutCategory",
    "WorkoutStatus",
    # Requests
    "AthleteProfile",
    "IntermediateRace",
    "PlanRequest",
    "RacePriority",
    "SpeedworkExperience",
    "StressLevel",
    # Execution
    "CompletedWorkout",
    "ExecutionScore",
    "ExecutionScoreComponents",
    "ReferencePaces",
    "TrainingStimulusComparison",
    "WeatherSnapshot",
    "WorkoutSegment",
]
