"""
Workout selection and athlete personalisation.

Picks the long-run and quality template for a given phase and week,
then adjusts that choice for the athlete: comfort-based substitutions,
experience gating of hard intervals, stress-driven volume cuts, and
time-available distance caps.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from ..models.athlete import AthleteProfile, SpeedworkExperience, StressLevel
from ..models.plans import TrainingPhase
from ..utils.formatting import round_half_up
from .rules import HALF_CLASS_M, MARATHON_CLASS_M


# ============================================================================
# Long run and quality selection
# ============================================================================

def long_run_type(phase: TrainingPhase, week_in_phase: int, race_distance_m: float) -> str:
    """
    Long run template for a week.

    Marathon peak weeks open with a marathon-pace long run then move to
    full simulations. Marathon and half build weeks, and half peak weeks,
    alternate easy and progression long runs. Shorter races add a
    progression long run every third build/peak week.
    """
    if phase in (TrainingPhase.BASE, TrainingPhase.TAPER):
        return "easy_long_run"

    if race_distance_m >= MARATHON_CLASS_M:
        if phase == TrainingPhase.PEAK:
            return "marathon_pace_long_run" if week_in_phase == 0 else "marathon_simulation"
        return "easy_long_run" if week_in_phase % 2 == 0 else "progression_long_run"

    if race_distance_m >= HALF_CLASS_M:
        return "easy_long_run" if week_in_phase % 2 == 0 else "progression_long_run"

    return "progression_long_run" if week_in_phase % 3 == 2 else "easy_long_run"


def workout_type_for_phase(
    phase: TrainingPhase,
    week_in_phase: int,
    race_distance_m: float,
    session_number: int,
) -> str:
    """
    Quality template for a session (session_number is 1 or 2).

    Base is light fartlek and hills; build alternates tempo with
    cruise intervals and rotates Yasso 800s with 400s; peak is
    race-specific; taper keeps a short tempo and strides.
    """
    first = session_number == 1

    if phase == TrainingPhase.TAPER:
        return "steady_tempo" if first else "easy_run_strides"

    if phase == TrainingPhase.BASE:
        return "classic_fartlek" if first else "short_hill_repeats"

    if phase == TrainingPhase.BUILD:
        if first:
            return "steady_tempo" if week_in_phase % 2 == 0 else "cruise_intervals"
        return "yasso_800s" if week_in_phase % 3 == 0 else "short_intervals_400m"

    if race_distance_m >= MARATHON_CLASS_M:
        return "marathon_pace_intervals" if first else "progressive_tempo"
    if race_distance_m >= HALF_CLASS_M:
        return "half_marathon_pace_workout" if first else "cruise_intervals"
    return "mile_repeats" if first else "steady_tempo"


# ============================================================================
# Comfort substitutions
# ============================================================================

@dataclass(frozen=True)
class ComfortSubstitution:
    """Alternatives for a workout the athlete is uncomfortable with."""
    comfort_field: str
    alternatives: Tuple[str, ...]


COMFORT_SUBSTITUTIONS: Mapping[str, ComfortSubstitution] = MappingProxyType({
    "yasso_800s": ComfortSubstitution(
        "comfort_vo2max", ("cruise_intervals", "progressive_tempo", "steady_tempo")),
    "short_intervals_400m": ComfortSubstitution(
        "comfort_vo2max", ("classic_fartlek", "structured_fartlek", "steady_tempo")),
    "long_intervals_1000m": ComfortSubstitution(
        "comfort_vo2max", ("cruise_intervals", "threshold_intervals", "progressive_tempo")),
    "mile_repeats": ComfortSubstitution(
        "comfort_vo2max", ("cruise_intervals", "progressive_tempo", "steady_tempo")),
    "ladder_workout": ComfortSubstitution(
        "comfort_vo2max", ("structured_fartlek", "cruise_intervals", "progressive_tempo")),
    "steady_tempo": ComfortSubstitution(
        "comfort_tempo", ("classic_fartlek", "progression_long_run", "general_aerobic")),
    "progressive_tempo": ComfortSubstitution(
        "comfort_tempo", ("structured_fartlek", "medium_long_pickup", "general_aerobic")),
    "cruise_intervals": ComfortSubstitution(
        "comfort_tempo", ("structured_fartlek", "classic_fartlek", "medium_long_pickup")),
    "short_hill_repeats": ComfortSubstitution(
        "comfort_hills", ("classic_fartlek", "easy_run_strides", "structured_fartlek")),
    "long_hill_repeats": ComfortSubstitution(
        "comfort_hills", ("progressive_tempo", "cruise_intervals", "structured_fartlek")),
})

# Comfort at or above this keeps the planned workout
COMFORT_THRESHOLD = 3


def apply_comfort_substitution(workout_type: str, profile: Optional[AthleteProfile]) -> str:
    """
    Swap a workout for a gentler alternative when comfort is low.

    Comfort 1 gets the second alternative, comfort 2 the first. A missing
    comfort rating, or one of 3+, keeps the original workout.
    """
    if profile is None:
        return workout_type
    substitution = COMFORT_SUBSTITUTIONS.get(workout_type)
    if substitution is None:
        return workout_type

    comfort = getattr(profile, substitution.comfort_field)
    if comfort is None or comfort >= COMFORT_THRESHOLD:
        return workout_type

    index = 1 if comfort == 1 else 0
    return substitution.alternatives[index]


# ============================================================================
# Experience and recovery
# ============================================================================

VO2MAX_DELAY_WEEKS: Mapping[SpeedworkExperience, int] = MappingProxyType({
    SpeedworkExperience.NONE: 4,
    SpeedworkExperience.BEGINNER: 2,
    SpeedworkExperience.INTERMEDIATE: 0,
    SpeedworkExperience.ADVANCED: 0,
})

# Interval sessions held back while vo2max work is delayed
DELAYED_VO2MAX_TYPES = frozenset({"yasso_800s", "short_intervals_400m", "mile_repeats"})


@dataclass(frozen=True)
class ExperienceProgression:
    start_with_fartlek: bool
    delay_vo2max_weeks: int
    conservative_mileage: bool


def experience_progression(profile: Optional[AthleteProfile]) -> ExperienceProgression:
    """
    How cautiously to introduce speed work and volume.

    Missing profile fields default to an intermediate runner with three
    years of running and a 40 mile best week.
    """
    if profile is None:
        return ExperienceProgression(False, 0, False)

    speedwork = profile.speedwork_experience or SpeedworkExperience.INTERMEDIATE
    years = profile.years_running if profile.years_running is not None else 3
    highest = profile.highest_weekly_mileage if profile.highest_weekly_mileage is not None else 40

    return ExperienceProgression(
        start_with_fartlek=speedwork in (SpeedworkExperience.NONE, SpeedworkExperience.BEGINNER),
        delay_vo2max_weeks=VO2MAX_DELAY_WEEKS[speedwork],
        conservative_mileage=years < 2 or highest < 30,
    )


STRESS_VOLUME_REDUCTION: Mapping[StressLevel, int] = MappingProxyType({
    StressLevel.HIGH: 10,
    StressLevel.VERY_HIGH: 20,
})


@dataclass(frozen=True)
class RecoveryAdjustments:
    volume_reduction_percent: int
    extra_rest_day: bool


def recovery_adjustments(profile: Optional[AthleteProfile]) -> RecoveryAdjustments:
    """Volume cut for life stress, and whether to drop a quality session."""
    if profile is None:
        return RecoveryAdjustments(0, False)
    reduction = STRESS_VOLUME_REDUCTION.get(profile.stress_level, 0) if profile.stress_level else 0
    extra_rest = profile.needs_extra_rest or profile.stress_level == StressLevel.VERY_HIGH
    return RecoveryAdjustments(volume_reduction_percent=reduction, extra_rest_day=extra_rest)


# ============================================================================
# Time constraints
# ============================================================================

WARMUP_BUFFER_MINUTES = 10
MIN_RUNNING_MINUTES = 20
WEEKEND_START_INDEX = 5


def available_minutes_for_day(profile: Optional[AthleteProfile], day_index: int) -> Optional[int]:
    """Weekday (Mon-Fri) or weekend time budget, if the athlete gave one."""
    if profile is None:
        return None
    if day_index < WEEKEND_START_INDEX:
        return profile.weekday_availability_minutes
    return profile.weekend_availability_minutes


def time_constrained_distance(
    planned_miles: float,
    available_minutes: Optional[float],
    pace: float,
) -> float:
    """
    Cap a run to what fits in the athlete's available time.

    Ten minutes are held back for getting out the door, with at least
    twenty minutes of running.
    """
    if available_minutes is None or pace <= 0:
        return planned_miles

    running_minutes = max(MIN_RUNNING_MINUTES, available_minutes - WARMUP_BUFFER_MINUTES)
    max_miles = round_half_up(running_minutes / (pace / 60), 1)
    return min(planned_miles, max_miles)


def effective_workout_type(
    workout_type: str,
    phase: TrainingPhase,
    week_in_phase: int,
    profile: Optional[AthleteProfile],
) -> str:
    """
    Final quality template after personalisation.

    Comfort substitution first, then inexperienced runners open base with
    fartlek and have interval sessions replaced by cruise intervals until
    their vo2max delay has passed.
    """
    result = apply_comfort_substitution(workout_type, profile)
    progression = experience_progression(profile)

    if progression.start_with_fartlek and phase == TrainingPhase.BASE and week_in_phase < 2:
        result = "classic_fartlek"

    if progression.delay_vo2max_weeks > week_in_phase and result in DELAYED_VO2MAX_TYPES:
        result = "cruise_intervals"

    return result
