"""
VDOT Fitness Model (Daniels' Running Formula)

Implements Jack Daniels' VDOT system for rating running fitness from a
race performance, predicting race times from a rating, and deriving the
ladder of training paces the plan generator schedules against.

Key concepts:
- VDOT: A "pseudo-VO2max" value derived from race performance
- Each VDOT value corresponds to specific training pace zones
- Paces are expressed in seconds per mile

References:
- Jack Daniels' Running Formula (3rd edition)
- Original research: Daniels, J.T. (1978). Physiological Research.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..exceptions import InvalidRaceResultError
from ..utils.formatting import format_pace, format_time, parse_time, round_half_up


METERS_PER_MILE = 1609.34

MIN_VDOT = 15.0
MAX_VDOT = 85.0

# predict_time refinement contract
PREDICTION_MAX_ITERATIONS = 10
PREDICTION_TOLERANCE = 0.1

# Fraction of VO2max for each training zone, slowest to fastest
ZONE_INTENSITIES: Tuple[Tuple[str, float], ...] = (
    ("recovery", 0.55),
    ("easy", 0.65),
    ("general_aerobic", 0.70),
    ("marathon", 0.78),
    ("half_marathon", 0.83),
    ("tempo", 0.85),
    ("threshold", 0.88),
    ("vo2max", 0.95),
    ("interval", 0.97),
    ("repetition", 1.05),
)

# Easy running sits at roughly 65% of VO2max
EASY_PACE_INTENSITY = 0.65


class RaceDistance(Enum):
    """Common race distances with values in meters."""
    FIVE_K = 5000
    TEN_K = 10000
    FIFTEEN_K = 15000
    TEN_MILE = 16093
    HALF_MARATHON = 21097
    MARATHON = 42195

    @classmethod
    def from_string(cls, s: str) -> Optional["RaceDistance"]:
        """Parse race distance from string."""
        mapping = {
            "5k": cls.FIVE_K,
            "5km": cls.FIVE_K,
            "5000": cls.FIVE_K,
            "10k": cls.TEN_K,
            "10km": cls.TEN_K,
            "10000": cls.TEN_K,
            "15k": cls.FIFTEEN_K,
            "15km": cls.FIFTEEN_K,
            "10mi": cls.TEN_MILE,
            "10_mile": cls.TEN_MILE,
            "ten_mile": cls.TEN_MILE,
            "half": cls.HALF_MARATHON,
            "half_marathon": cls.HALF_MARATHON,
            "halfmarathon": cls.HALF_MARATHON,
            "21k": cls.HALF_MARATHON,
            "21.1k": cls.HALF_MARATHON,
            "marathon": cls.MARATHON,
            "full": cls.MARATHON,
            "42k": cls.MARATHON,
            "42.2k": cls.MARATHON,
        }
        return mapping.get(s.lower().replace("-", "_").replace(" ", "_"))

    @classmethod
    def from_meters(cls, meters: float, tolerance_m: float = 50) -> Optional["RaceDistance"]:
        """Match a measured distance to a standard race, within tolerance."""
        for distance in cls:
            if abs(distance.value - meters) <= tolerance_m:
                return distance
        return None

    @property
    def display_name(self) -> str:
        """Get human-readable name."""
        names = {
            RaceDistance.FIVE_K: "5K",
            RaceDistance.TEN_K: "10K",
            RaceDistance.FIFTEEN_K: "15K",
            RaceDistance.TEN_MILE: "10 Mile",
            RaceDistance.HALF_MARATHON: "Half Marathon",
            RaceDistance.MARATHON: "Marathon",
        }
        return names[self]

    @property
    def meters(self) -> int:
        """Distance in meters."""
        return self.value

    @property
    def miles(self) -> float:
        """Distance in miles, as conventionally quoted (3.1, 13.1, ...)."""
        quoted = {
            RaceDistance.FIVE_K: 3.1,
            RaceDistance.TEN_K: 6.2,
            RaceDistance.FIFTEEN_K: 9.3,
            RaceDistance.TEN_MILE: 10.0,
            RaceDistance.HALF_MARATHON: 13.1,
            RaceDistance.MARATHON: 26.2,
        }
        return quoted[self]


@dataclass
class PaceZones:
    """
    The ten-rung training pace ladder derived from a VDOT.

    Every pace is in seconds per mile and the fields are ordered from
    slowest (recovery) to fastest (repetition).
    """
    recovery: int
    easy: int
    general_aerobic: int
    marathon: int
    half_marathon: int
    tempo: int
    threshold: int
    vo2max: int
    interval: int
    repetition: int

    def as_list(self) -> List[Tuple[str, int]]:
        """Return (zone, pace) pairs in slowest-to-fastest order."""
        return [(name, getattr(self, name)) for name, _ in ZONE_INTENSITIES]

    def get(self, zone: str) -> Optional[int]:
        """Look up a pace by zone name, or None for unknown zones."""
        if zone in ZONE_NAMES:
            return getattr(self, zone)
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            name: {"pace_sec_per_mile": pace, "pace_formatted": format_pace(pace)}
            for name, pace in self.as_list()
        }


ZONE_NAMES = frozenset(name for name, _ in ZONE_INTENSITIES)


def oxygen_cost(velocity_m_per_min: float) -> float:
    """Oxygen cost (ml O2/kg/min) of running at a velocity - Daniels' quadratic fit."""
    return -4.60 + 0.182258 * velocity_m_per_min + 0.000104 * velocity_m_per_min ** 2


def fraction_of_vo2max(time_min: float) -> float:
    """
    Fraction of VO2max sustainable for a race of the given duration.

    Shorter races allow a higher percentage of VO2max to be sustained,
    decaying towards 80% for very long efforts.
    """
    return (
        0.8 +
        0.1894393 * math.exp(-0.012778 * time_min) +
        0.2989558 * math.exp(-0.1932605 * time_min)
    )


def score_from_result(race_distance_m: float, race_time_sec: float) -> float:
    """
    Calculate VDOT from a race result using Daniels' formula.

    Args:
        race_distance_m: Race distance in meters
        race_time_sec: Race finishing time in seconds

    Returns:
        VDOT clamped to [15, 85] and rounded to one decimal

    Raises:
        InvalidRaceResultError: If distance or time is not positive

    Example:
        >>> score_from_result(5000, 1200)  # 5K in 20:00
        49.8
    """
    if race_distance_m <= 0:
        raise InvalidRaceResultError(
            "Race distance must be positive", field="distance",
            details={"distance_m": race_distance_m},
        )
    if race_time_sec <= 0:
        raise InvalidRaceResultError(
            "Race time must be positive", field="time",
            details={"time_sec": race_time_sec},
        )

    time_min = race_time_sec / 60
    velocity_m_per_min = race_distance_m / time_min

    vdot = oxygen_cost(velocity_m_per_min) / fraction_of_vo2max(time_min)
    vdot = max(MIN_VDOT, min(MAX_VDOT, vdot))

    return round_half_up(vdot, 1)


def velocity_from_vdot(vdot: float, intensity_pct: float = 1.0) -> float:
    """
    Convert VDOT and intensity fraction to running velocity.

    Solves oxygen_cost(v) = vdot * intensity_pct for the positive root:
    0.000104 * v^2 + 0.182258 * v + (-4.60 - target_vo2) = 0

    Args:
        vdot: VDOT value
        intensity_pct: Fraction of VDOT (e.g., 0.65 for easy pace)

    Returns:
        Velocity in meters per minute
    """
    a = 0.000104
    b = 0.182258
    c = -4.60 - vdot * intensity_pct

    discriminant = b ** 2 - 4 * a * c
    return (-b + math.sqrt(discriminant)) / (2 * a)


def _velocity_to_pace(velocity_m_per_min: float) -> int:
    """Convert velocity in m/min to whole seconds per mile."""
    return int(round_half_up(METERS_PER_MILE / velocity_m_per_min * 60))


def predict_time(vdot: float, race_distance_m: float) -> float:
    """
    Predict race time from VDOT for a given distance.

    Starts from the velocity at 80% of VO2max and refines the time by
    fixed-point iteration (at most 10 passes) until the VDOT recovered
    from the predicted time is within 0.1 of the target.

    Args:
        vdot: VDOT value
        race_distance_m: Race distance in meters

    Returns:
        Predicted time in whole seconds
    """
    velocity = velocity_from_vdot(vdot, 0.80)
    time_sec = race_distance_m / velocity * 60

    for _ in range(PREDICTION_MAX_ITERATIONS):
        time_min = time_sec / 60
        calculated = oxygen_cost(race_distance_m / time_min) / fraction_of_vo2max(time_min)
        if abs(calculated - vdot) < PREDICTION_TOLERANCE:
            break
        # Calculated VDOT too high means the time is too fast
        time_sec = time_sec * calculated / vdot

    return round_half_up(time_sec)


def pace_zones(vdot: float) -> PaceZones:
    """
    Calculate the training pace ladder from VDOT.

    Args:
        vdot: VDOT value

    Returns:
        PaceZones with seconds-per-mile paces, slowest to fastest
    """
    paces = {
        name: _velocity_to_pace(velocity_from_vdot(vdot, pct))
        for name, pct in ZONE_INTENSITIES
    }
    return PaceZones(**paces)


def equivalent_race_times(vdot: float) -> Dict[str, Dict[str, object]]:
    """
    Predict times for every standard race distance.

    Returns:
        Mapping of display name to time_sec, time_formatted,
        pace_sec_per_mile and pace_formatted
    """
    predictions = {}
    for distance in RaceDistance:
        time_sec = predict_time(vdot, distance.meters)
        pace = round_half_up(time_sec / distance.miles)
        predictions[distance.display_name] = {
            "distance_m": distance.meters,
            "time_sec": int(time_sec),
            "time_formatted": format_time(time_sec),
            "pace_sec_per_mile": int(pace),
            "pace_formatted": format_pace(pace),
        }
    return predictions


def estimate_vdot_from_easy_pace(easy_pace_sec_per_mile: float) -> float:
    """
    Rough VDOT estimate for athletes without a recent race.

    Treats the athlete's easy pace as running at 65% of VO2max.
    """
    if easy_pace_sec_per_mile <= 0:
        raise InvalidRaceResultError(
            "Easy pace must be positive", field="easy_pace",
            details={"easy_pace_sec_per_mile": easy_pace_sec_per_mile},
        )
    velocity = METERS_PER_MILE / (easy_pace_sec_per_mile / 60)
    vdot = oxygen_cost(velocity) / EASY_PACE_INTENSITY
    return round_half_up(max(MIN_VDOT, min(MAX_VDOT, vdot)), 1)


@dataclass
class VDOTCalculation:
    """
    Complete VDOT calculation result with zones and predictions.

    This is the main result type returned by calculate_vdot_from_race().
    """
    vdot: float
    race_distance: str
    race_time_sec: int
    race_time_formatted: str
    pace_zones: PaceZones
    race_predictions: Dict[str, Dict[str, object]]

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "vdot": self.vdot,
            "race_distance": self.race_distance,
            "race_time_sec": self.race_time_sec,
            "race_time_formatted": self.race_time_formatted,
            "pace_zones": self.pace_zones.to_dict(),
            "race_predictions": self.race_predictions,
        }


def resolve_distance(distance: str) -> Tuple[float, str]:
    """
    Resolve a distance label or a raw meter value.

    Returns:
        (distance in meters, display name)

    Raises:
        InvalidRaceResultError: If the label is unknown or the value not positive
    """
    race_dist = RaceDistance.from_string(distance)
    if race_dist is not None:
        return float(race_dist.meters), race_dist.display_name
    try:
        meters = float(distance)
    except ValueError:
        raise InvalidRaceResultError(
            f"Unknown race distance: {distance}", field="distance"
        ) from None
    if meters <= 0:
        raise InvalidRaceResultError(
            "Race distance must be positive", field="distance",
            details={"distance_m": meters},
        )
    return meters, f"{meters / 1000:.2f}K"


def calculate_vdot_from_race(distance: str, time_str: str) -> VDOTCalculation:
    """
    Calculate VDOT from a race result with full zone and prediction details.

    Args:
        distance: Race distance label ("5K", "half", "marathon") or meters
        time_str: Race time as string (e.g., "25:30" for 25min 30sec)

    Returns:
        VDOTCalculation with VDOT, zones, and predictions

    Example:
        >>> result = calculate_vdot_from_race("5K", "20:00")
        >>> result.vdot
        49.8
    """
    distance_m, distance_name = resolve_distance(distance)
    time_sec = parse_time(time_str)

    vdot = score_from_result(distance_m, time_sec)

    return VDOTCalculation(
        vdot=vdot,
        race_distance=distance_name,
        race_time_sec=time_sec,
        race_time_formatted=format_time(time_sec),
        pace_zones=pace_zones(vdot),
        race_predictions=equivalent_race_times(vdot),
    )
