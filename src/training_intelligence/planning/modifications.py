"""
Local edits to a single planned workout.

Each function returns a new PlannedWorkout and leaves the original (and
the plan holding it) untouched.
"""

from dataclasses import replace

from ..models.plans import PlannedWorkout, WorkoutStatus
from ..utils.formatting import round_half_up
from .templates import find_workout_template


DEFAULT_SCALE_FACTOR = 0.75


def scale_down_workout(workout: PlannedWorkout, factor: float = DEFAULT_SCALE_FACTOR) -> PlannedWorkout:
    """
    Shorten a workout by a factor.

    Distance is rounded to 0.1 mile and duration to the minute.
    """
    distance = workout.target_distance_miles
    duration = workout.target_duration_minutes
    return replace(
        workout,
        target_distance_miles=round_half_up(distance * factor, 1) if distance is not None else None,
        target_duration_minutes=int(round_half_up(duration * factor)) if duration is not None else None,
        rationale=f"{workout.rationale} (scaled down to {int(round_half_up(factor * 100))}%)",
    )


def swap_workout(workout: PlannedWorkout, template_id: str) -> PlannedWorkout:
    """
    Replace a workout's content with another template.

    Date, distance and pace targets are kept. An unknown template id
    returns the workout unchanged.
    """
    template = find_workout_template(template_id)
    if template is None:
        return workout
    return replace(
        workout,
        template_id=template.id,
        name=template.name,
        description=template.description,
        structure=template.structure,
        rationale=f"Swapped from {workout.name}: {template.purpose}",
        alternatives=[t for t in workout.alternatives if t != template.id],
    )


def skip_workout(workout: PlannedWorkout, reason: str) -> PlannedWorkout:
    """Mark a workout as skipped, keeping the reason as its note."""
    return replace(workout, status=WorkoutStatus.SKIPPED, notes=reason)
