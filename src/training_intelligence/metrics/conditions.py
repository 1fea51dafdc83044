"""
Race-condition corrections for the VDOT fitness model.

Hot, humid or hilly races understate fitness. These helpers estimate the
per-mile time cost of the conditions so a result can be credited at its
condition-neutral value, and so training paces can be eased on hot days.

All temperatures are in Fahrenheit, elevation gain in feet.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .vdot import METERS_PER_MILE, PaceZones, score_from_result
from ..utils.formatting import round_half_up


logger = logging.getLogger(__name__)


# Running performance is best around 45F; 35-45F carries no penalty
OPTIMAL_TEMP_F = 45.0
COLD_THRESHOLD_F = 35.0

# Corrected time may never be less than this share of the actual time
MIN_CORRECTED_TIME_RATIO = 0.85

# Seconds per mile per 100 ft of climbing per mile
ELEVATION_SEC_PER_100FT = 12.0

# How much of the weather penalty each zone absorbs. Short fast reps
# are less affected by heat than sustained efforts.
ZONE_WEATHER_SENSITIVITY: Dict[str, float] = {
    "recovery": 1.0,
    "easy": 1.0,
    "general_aerobic": 1.0,
    "marathon": 1.0,
    "half_marathon": 1.0,
    "tempo": 1.0,
    "threshold": 0.8,
    "vo2max": 0.5,
    "interval": 0.5,
    "repetition": 0.3,
}


def weather_pace_adjustment(
    temp_f: float,
    humidity_pct: float,
    dew_point_f: Optional[float] = None,
) -> int:
    """
    Estimate how many seconds per mile the weather costs.

    Heat penalty is piecewise-linear and escalates: 0.4 s/F from 45-70F,
    1 s/F from 70-85F, 1.5 s/F beyond 85F. Humidity adds a surcharge only
    once it is warm enough to matter, and a dew point above 60F adds its
    own surcharge. Below 35F a small cold penalty applies.

    Args:
        temp_f: Air temperature in Fahrenheit
        humidity_pct: Relative humidity (0-100)
        dew_point_f: Optional dew point in Fahrenheit

    Returns:
        Seconds per mile to add to pace (0 in the 35-45F band)
    """
    adjustment = 0.0

    if temp_f > OPTIMAL_TEMP_F:
        if temp_f > 85:
            adjustment = 10 + 15 + (temp_f - 85) * 1.5
        elif temp_f > 70:
            adjustment = 10 + (temp_f - 70) * 1.0
        else:
            adjustment = (temp_f - OPTIMAL_TEMP_F) * 0.4

        if temp_f > 65 and humidity_pct > 50:
            adjustment += (humidity_pct - 50) * 0.1
        elif temp_f > 55 and humidity_pct > 60:
            adjustment += (humidity_pct - 60) * 0.05
    elif temp_f < COLD_THRESHOLD_F:
        adjustment = (COLD_THRESHOLD_F - temp_f) * 0.2

    if dew_point_f is not None and dew_point_f > 60:
        adjustment += (dew_point_f - 60) * 0.3

    return int(round_half_up(adjustment))


def elevation_pace_correction(elevation_gain_ft: float, distance_miles: float) -> int:
    """
    Seconds per mile lost to climbing.

    100 ft of gain per mile costs roughly 12 seconds per mile.

    Returns:
        Seconds per mile, 0 for non-positive gain or distance
    """
    if elevation_gain_ft <= 0 or distance_miles <= 0:
        return 0
    gain_per_mile = elevation_gain_ft / distance_miles
    return int(round_half_up(gain_per_mile / 100 * ELEVATION_SEC_PER_100FT))


@dataclass
class ConditionAdjustment:
    """Result of crediting a race result for its conditions."""
    raw_vdot: float
    adjusted_vdot: float
    weather_sec_per_mile: int
    elevation_sec_per_mile: int
    corrected_time_sec: float
    clamped: bool

    @property
    def total_sec_per_mile(self) -> int:
        """Combined per-mile correction."""
        return self.weather_sec_per_mile + self.elevation_sec_per_mile

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "raw_vdot": self.raw_vdot,
            "adjusted_vdot": self.adjusted_vdot,
            "weather_sec_per_mile": self.weather_sec_per_mile,
            "elevation_sec_per_mile": self.elevation_sec_per_mile,
            "total_sec_per_mile": self.total_sec_per_mile,
            "corrected_time_sec": round_half_up(self.corrected_time_sec, 1),
            "clamped": self.clamped,
        }


def calculate_condition_adjustment(
    race_distance_m: float,
    race_time_sec: float,
    temp_f: Optional[float] = None,
    humidity_pct: Optional[float] = None,
    elevation_gain_ft: Optional[float] = None,
    dew_point_f: Optional[float] = None,
) -> ConditionAdjustment:
    """
    Credit a race result for weather and elevation.

    The per-mile weather and elevation penalties are removed from the
    actual time across the whole distance. The corrected time is never
    allowed below 85% of the actual time.

    Weather is only applied when both temperature and humidity are known.

    Raises:
        InvalidRaceResultError: If distance or time is not positive
    """
    raw_vdot = score_from_result(race_distance_m, race_time_sec)
    miles = race_distance_m / METERS_PER_MILE

    weather_sec = 0
    if temp_f is not None and humidity_pct is not None:
        weather_sec = weather_pace_adjustment(temp_f, humidity_pct, dew_point_f)

    elevation_sec = 0
    if elevation_gain_ft is not None:
        elevation_sec = elevation_pace_correction(elevation_gain_ft, miles)

    total_sec = weather_sec + elevation_sec
    if total_sec <= 0:
        return ConditionAdjustment(
            raw_vdot=raw_vdot,
            adjusted_vdot=raw_vdot,
            weather_sec_per_mile=weather_sec,
            elevation_sec_per_mile=elevation_sec,
            corrected_time_sec=race_time_sec,
            clamped=False,
        )

    corrected = race_time_sec - total_sec * miles
    floor = race_time_sec * MIN_CORRECTED_TIME_RATIO
    clamped = corrected < floor
    if clamped:
        logger.debug(
            "Condition correction of %ss/mi clamped to %.0f%% of race time",
            total_sec, MIN_CORRECTED_TIME_RATIO * 100,
        )
        corrected = floor

    return ConditionAdjustment(
        raw_vdot=raw_vdot,
        adjusted_vdot=score_from_result(race_distance_m, corrected),
        weather_sec_per_mile=weather_sec,
        elevation_sec_per_mile=elevation_sec,
        corrected_time_sec=corrected,
        clamped=clamped,
    )


def adjusted_score(
    race_distance_m: float,
    race_time_sec: float,
    temp_f: Optional[float] = None,
    humidity_pct: Optional[float] = None,
    elevation_gain_ft: Optional[float] = None,
    dew_point_f: Optional[float] = None,
) -> float:
    """VDOT credited for weather and elevation. See calculate_condition_adjustment."""
    return calculate_condition_adjustment(
        race_distance_m,
        race_time_sec,
        temp_f=temp_f,
        humidity_pct=humidity_pct,
        elevation_gain_ft=elevation_gain_ft,
        dew_point_f=dew_point_f,
    ).adjusted_vdot


def adjust_zones_for_weather(
    zones: PaceZones,
    temp_f: float,
    humidity_pct: float,
    dew_point_f: Optional[float] = None,
) -> PaceZones:
    """
    Slow a pace ladder down for hot or humid conditions.

    Sustained zones take the full weather penalty; threshold takes 80%,
    vo2max/interval 50% and repetition 30%.
    """
    adjustment = weather_pace_adjustment(temp_f, humidity_pct, dew_point_f)
    if adjustment == 0:
        return zones

    adjusted = {
        name: int(round_half_up(pace + adjustment * ZONE_WEATHER_SENSITIVITY[name]))
        for name, pace in zones.as_list()
    }
    return PaceZones(**adjusted)
