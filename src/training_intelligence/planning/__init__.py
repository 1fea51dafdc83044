"""Plan construction: templates, scheduling rules, selection and generation."""

from .templates import WORKOUT_TEMPLATES, WorkoutTemplate, find_workout_template, get_workout_template
from .generator import PlanGenerator, generate_plan
from .modifications import scale_down_workout, skip_workout, swap_workout

__all__ = [
    "WORKOUT_TEMPLATES",
    "WorkoutTemplate",
    "find_workout_template",
    "get_workout_template",
    "PlanGenerator",
    "generate_plan",
    "scale_down_workout",
    "skip_workout",
    "swap_workout",
]
