"""Training Intelligence: periodized plans, pace physiology and execution scoring."""

__version__ = "0.1.0"

from .exceptions import InsufficientTimeError, TrainingIntelligenceError
from .metrics.vdot import pace_zones, predict_time, score_from_result
from .models.athlete import AthleteProfile, IntermediateRace, PlanRequest
from .planning.generator import PlanGenerator, generate_plan
from .services.execution_scorer import ExecutionScorer, compute_execution_score

__all__ = [
    "__version__",
    "InsufficientTimeError",
    "TrainingIntelligenceError",
    "pace_zones",
    "predict_time",
    "score_from_result",
    "AthleteProfile",
    "IntermediateRace",
    "PlanRequest",
    "PlanGenerator",
    "generate_plan",
    "ExecutionScorer",
    "compute_execution_score",
]
