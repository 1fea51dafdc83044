"""
Fitness-Fatigue trend model (CTL, ATL, TSB, ramp rate).

Based on the Training Stress Balance model:
- CTL (Chronic Training Load): 42-day exponentially weighted average - fitness
- ATL (Acute Training Load): 7-day exponentially weighted average - fatigue
- TSB (Training Stress Balance): CTL - ATL - form/freshness

Rest days matter: the daily series is always zero-filled before folding,
otherwise both averages would overstate fitness and fatigue.
"""

import math
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from ..utils.formatting import round_half_up


@dataclass(frozen=True)
class TrendConfig:
    """Constants for the fitness trend model."""
    ctl_time_constant: int = 42
    atl_time_constant: int = 7
    min_history_days: int = 7
    ramp_window_weeks: int = 4
    # Ramp-rate band upper bounds (CTL points per week)
    conservative_ramp: float = 5.0
    moderate_ramp: float = 8.0
    elevated_ramp: float = 10.0
    # Detraining faster than this earns a recommendation
    detraining_ramp: float = -5.0

    @property
    def ctl_decay(self) -> float:
        return 1 - math.exp(-1 / self.ctl_time_constant)

    @property
    def atl_decay(self) -> float:
        return 1 - math.exp(-1 / self.atl_time_constant)


DEFAULT_TREND_CONFIG = TrendConfig()


@dataclass
class DailyFitness:
    """Daily fitness metrics from the Fitness-Fatigue model."""

    date: date
    daily_load: float
    ctl: float  # Chronic Training Load (fitness)
    atl: float  # Acute Training Load (fatigue)
    tsb: float  # Training Stress Balance (form) = CTL - ATL

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "date": self.date.isoformat(),
            "daily_load": self.daily_load,
            "ctl": round_half_up(self.ctl, 1),
            "atl": round_half_up(self.atl, 1),
            "tsb": round_half_up(self.tsb, 1),
        }


class FitnessStatus(str, Enum):
    """Readiness label derived from TSB."""
    FRESH = "fresh"
    RACE_READY = "race_ready"
    TRAINING = "training"
    FATIGUED = "fatigued"
    OVERREACHED = "overreached"

    @property
    def label(self) -> str:
        labels = {
            FitnessStatus.FRESH: "Well Rested",
            FitnessStatus.RACE_READY: "Race Ready",
            FitnessStatus.TRAINING: "Training",
            FitnessStatus.FATIGUED: "Fatigued",
            FitnessStatus.OVERREACHED: "Overreached",
        }
        return labels[self]


class RampRiskLevel(str, Enum):
    """Injury-risk band for a CTL ramp rate."""
    INSUFFICIENT_DATA = "insufficient_data"
    DECREASING = "decreasing"
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    ELEVATED = "elevated"
    HIGH = "high"


@dataclass
class RampRateRisk:
    """Ramp-rate risk assessment with guidance."""
    level: RampRiskLevel
    ramp_rate: Optional[float]
    message: str
    recommendation: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "level": self.level.value,
            "ramp_rate": self.ramp_rate,
            "message": self.message,
            "recommendation": self.recommendation,
        }


def calculate_ewma(current_value: float, previous_ewma: float, decay: float) -> float:
    """
    One step of the exponentially weighted moving average.

    EWMA_n = EWMA_{n-1} + decay * (value - EWMA_{n-1})
    where decay = 1 - e^(-1/time_constant)
    """
    return previous_ewma + decay * (current_value - previous_ewma)


def fill_daily_load_gaps(
    daily_loads: Sequence[Tuple[date, float]],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[Tuple[date, float]]:
    """
    Expand a sparse load list into one entry per calendar day.

    Days without a workout get zero load; several workouts on the same
    day are summed.

    Args:
        daily_loads: (date, load) pairs in any order
        start_date: First day of the range (default: earliest load)
        end_date: Last day of the range (default: latest load)

    Returns:
        Consecutive (date, load) pairs from start_date to end_date
    """
    totals: Dict[date, float] = {}
    for load_date, load in daily_loads:
        totals[load_date] = totals.get(load_date, 0.0) + load

    if not totals and (start_date is None or end_date is None):
        return []

    first = start_date or min(totals)
    last = end_date or max(totals)

    result = []
    current = first
    while current <= last:
        result.append((current, totals.get(current, 0.0)))
        current += timedelta(days=1)
    return result


def calculate_fitness_trend(
    daily_loads: Sequence[Tuple[date, float]],
    initial_ctl: float = 0.0,
    initial_atl: float = 0.0,
    config: TrendConfig = DEFAULT_TREND_CONFIG,
) -> List[DailyFitness]:
    """
    Calculate CTL, ATL and TSB for every day of a load history.

    Loads are folded strictly in date order over the zero-filled series.

    Args:
        daily_loads: (date, load) pairs; gaps are filled with zero load
        initial_ctl: Starting CTL value (for new users, use 0)
        initial_atl: Starting ATL value (for new users, use 0)
        config: Time constants

    Returns:
        List of DailyFitness, one per calendar day in range
    """
    series = fill_daily_load_gaps(daily_loads)
    if not series:
        return []

    ctl_decay = config.ctl_decay
    atl_decay = config.atl_decay
    ctl = initial_ctl
    atl = initial_atl

    results = []
    for day, load in series:
        ctl = calculate_ewma(load, ctl, ctl_decay)
        atl = calculate_ewma(load, atl, atl_decay)
        results.append(DailyFitness(
            date=day,
            daily_load=load,
            ctl=ctl,
            atl=atl,
            tsb=ctl - atl,
        ))

    return results


def calculate_ramp_rate(
    metrics: Sequence[DailyFitness],
    weeks: Optional[int] = None,
    config: TrendConfig = DEFAULT_TREND_CONFIG,
) -> Optional[float]:
    """
    CTL ramp rate in points per week over a trailing window.

    Standard guidelines:
    - < 5 pts/week: Conservative (safe for beginners, returning from injury)
    - 5-8 pts/week: Moderate (sustainable for most runners)
    - 8-10 pts/week: Aggressive (may increase injury risk)
    - >= 10 pts/week: High risk

    Returns:
        Ramp rate rounded to one decimal, or None with under a week of data
    """
    if len(metrics) < config.min_history_days:
        return None

    window_days = (weeks or config.ramp_window_weeks) * 7
    end_idx = len(metrics) - 1
    start_idx = max(0, end_idx - window_days)

    if end_idx - start_idx < config.min_history_days:
        return None

    actual_weeks = (end_idx - start_idx) / 7
    ramp_rate = (metrics[end_idx].ctl - metrics[start_idx].ctl) / actual_weeks
    return round_half_up(ramp_rate, 1)


def assess_ramp_rate_risk(
    ramp_rate: Optional[float],
    config: TrendConfig = DEFAULT_TREND_CONFIG,
) -> RampRateRisk:
    """Assess injury risk from a CTL ramp rate."""
    if ramp_rate is None:
        return RampRateRisk(
            level=RampRiskLevel.INSUFFICIENT_DATA,
            ramp_rate=None,
            message="Not enough training history to calculate ramp rate",
        )

    if ramp_rate < 0:
        return RampRateRisk(
            level=RampRiskLevel.DECREASING,
            ramp_rate=ramp_rate,
            message=f"Fitness declining at {abs(ramp_rate):.1f} pts/week",
            recommendation=(
                "Consider increasing training volume gradually to maintain fitness"
                if ramp_rate < config.detraining_ramp else None
            ),
        )

    if ramp_rate < config.conservative_ramp:
        return RampRateRisk(
            level=RampRiskLevel.CONSERVATIVE,
            ramp_rate=ramp_rate,
            message=f"Building at {ramp_rate:.1f} pts/week",
        )

    if ramp_rate < config.moderate_ramp:
        return RampRateRisk(
            level=RampRiskLevel.MODERATE,
            ramp_rate=ramp_rate,
            message=f"Building at {ramp_rate:.1f} pts/week",
        )

    if ramp_rate < config.elevated_ramp:
        return RampRateRisk(
            level=RampRiskLevel.ELEVATED,
            ramp_rate=ramp_rate,
            message=f"Ramping at {ramp_rate:.1f} pts/week",
            recommendation="Consider adding an extra recovery day or reducing volume by 10%",
        )

    return RampRateRisk(
        level=RampRiskLevel.HIGH,
        ramp_rate=ramp_rate,
        message=f"Rapid ramp at {ramp_rate:.1f} pts/week",
        recommendation="High injury risk - schedule a recovery week soon and reduce intensity",
    )


def fitness_status(tsb: float) -> FitnessStatus:
    """Readiness label for a TSB value."""
    if tsb > 20:
        return FitnessStatus.FRESH
    elif tsb > 5:
        return FitnessStatus.RACE_READY
    elif tsb > -10:
        return FitnessStatus.TRAINING
    elif tsb > -25:
        return FitnessStatus.FATIGUED
    else:
        return FitnessStatus.OVERREACHED


def optimal_weekly_load_range(current_ctl: float) -> Tuple[float, float]:
    """
    Weekly load range that maintains or gently builds fitness.

    Roughly 7 x the daily average, allowing 80-120%.
    """
    weekly_target = current_ctl * 7
    return round_half_up(weekly_target * 0.8), round_half_up(weekly_target * 1.2)


def rolling_load(daily_loads: Sequence[Tuple[date, float]], days: int = 7) -> float:
    """Total load of the most recent `days` entries."""
    recent = sorted(daily_loads, key=lambda x: x[0], reverse=True)[:days]
    return sum(load for _, load in recent)


@dataclass
class FitnessSummary:
    """Current fitness snapshot with ramp-rate risk."""
    date: date
    ctl: float
    atl: float
    tsb: float
    status: FitnessStatus
    ramp_risk: RampRateRisk
    weekly_load_range: Tuple[float, float]

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "ctl": round_half_up(self.ctl, 1),
            "atl": round_half_up(self.atl, 1),
            "tsb": round_half_up(self.tsb, 1),
            "status": self.status.value,
            "status_label": self.status.label,
            "ramp_risk": self.ramp_risk.to_dict(),
            "weekly_load_range": {
                "min": self.weekly_load_range[0],
                "max": self.weekly_load_range[1],
            },
        }


def summarize_fitness(
    metrics: Sequence[DailyFitness],
    weeks: Optional[int] = None,
    config: TrendConfig = DEFAULT_TREND_CONFIG,
) -> Optional[FitnessSummary]:
    """Summarise the latest day of a trend, or None for an empty trend."""
    if not metrics:
        return None
    latest = metrics[-1]
    ramp = calculate_ramp_rate(metrics, weeks=weeks, config=config)
    return FitnessSummary(
        date=latest.date,
        ctl=latest.ctl,
        atl=latest.atl,
        tsb=latest.tsb,
        status=fitness_status(latest.tsb),
        ramp_risk=assess_ramp_rate_risk(ramp, config=config),
        weekly_load_range=optimal_weekly_load_range(latest.ctl),
    )
