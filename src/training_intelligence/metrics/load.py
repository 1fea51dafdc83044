"""Training load calculation from workout duration, type and pace."""

import math
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..utils.formatting import round_half_up


def _default_intensity_factors() -> Mapping[str, float]:
    return MappingProxyType({
        "recovery": 0.5,
        "easy": 0.6,
        "long": 0.65,       # longer duration compensates for lower intensity
        "steady": 0.75,
        "tempo": 0.85,
        "interval": 1.0,
        "race": 1.1,
        "cross_train": 0.4,
        "other": 0.6,
    })


@dataclass(frozen=True)
class LoadConfig:
    """
    Constants for the duration x intensity load model.

    Attributes:
        intensity_factors: Load multiplier per workout category
        long_session_minutes: Duration above which the endurance bonus applies
        long_session_bonus_per_min: Fractional bonus per minute over the threshold
        benchmark_pace: Pace (sec/mile) that earns a pace factor of 1.0
        min_pace: Fastest pace the pace factor is trusted for
        max_pace: Slowest pace the pace factor is trusted for
    """
    intensity_factors: Mapping[str, float] = field(default_factory=_default_intensity_factors)
    long_session_minutes: float = 60.0
    long_session_bonus_per_min: float = 0.005
    benchmark_pace: float = 600.0
    min_pace: float = 240.0
    max_pace: float = 900.0

    def __post_init__(self):
        if not isinstance(self.intensity_factors, MappingProxyType):
            object.__setattr__(self, "intensity_factors", MappingProxyType(dict(self.intensity_factors)))

    def intensity_for(self, category: str) -> float:
        """Intensity factor for a category, falling back to 'other'."""
        return self.intensity_factors.get(category, self.intensity_factors["other"])


DEFAULT_LOAD_CONFIG = LoadConfig()


def calculate_workout_load(
    duration_min: float,
    category: str,
    avg_pace_sec_per_mile: Optional[float] = None,
    distance_miles: Optional[float] = None,
    config: LoadConfig = DEFAULT_LOAD_CONFIG,
) -> float:
    """
    Daily training load for a single workout.

    Load = duration x intensity factor, with a 0.5%-per-minute bonus for
    sessions over an hour. When pace is known and within 4:00-15:00/mi,
    load is scaled by sqrt(benchmark / pace) so faster running of the
    same duration counts for more.

    Args:
        duration_min: Workout duration in minutes
        category: Workout category (easy, long, tempo, interval, race, ...)
        avg_pace_sec_per_mile: Average pace if known
        distance_miles: Distance if known (pace factor needs both)
        config: Load model constants

    Returns:
        Load rounded to a whole number
    """
    if duration_min <= 0:
        return 0.0

    load = duration_min * config.intensity_for(category)

    if duration_min > config.long_session_minutes:
        load *= 1 + (duration_min - config.long_session_minutes) * config.long_session_bonus_per_min

    if avg_pace_sec_per_mile and distance_miles and distance_miles > 0:
        if config.min_pace <= avg_pace_sec_per_mile <= config.max_pace:
            load *= math.sqrt(config.benchmark_pace / avg_pace_sec_per_mile)

    return round_half_up(load)


def daily_loads_from_workouts(
    workouts: Iterable[Tuple],
    config: LoadConfig = DEFAULT_LOAD_CONFIG,
) -> List[Tuple[date, float]]:
    """
    Sum workout loads per calendar day.

    Args:
        workouts: (date, duration_min, category) tuples, optionally extended
            with avg_pace_sec_per_mile and distance_miles (either may be None)
        config: Load model constants

    Returns:
        Date-sorted (date, load) pairs, one per day that had a workout
    """
    totals: Dict[date, float] = {}
    for workout in workouts:
        workout_date, duration_min, category = workout[:3]
        avg_pace = workout[3] if len(workout) > 3 else None
        distance_miles = workout[4] if len(workout) > 4 else None
        load = calculate_workout_load(
            duration_min,
            category,
            avg_pace_sec_per_mile=avg_pace,
            distance_miles=distance_miles,
            config=config,
        )
        totals[workout_date] = totals.get(workout_date, 0.0) + load
    return sorted(totals.items())
