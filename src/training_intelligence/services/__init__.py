"""Services for scoring executed training."""

from .execution_scorer import (
    ExecutionScorer,
    StimulusTolerance,
    compute_execution_score,
    get_execution_scorer,
    reset_execution_scorer,
)

__all__ = [
    "ExecutionScorer",
    "StimulusTolerance",
    "compute_execution_score",
    "get_execution_scorer",
    "reset_execution_scorer",
]
