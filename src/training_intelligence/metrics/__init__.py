"""Training metrics calculations."""

from .vdot import (
    PaceZones,
    RaceDistance,
    VDOTCalculation,
    calculate_vdot_from_race,
    equivalent_race_times,
    estimate_vdot_from_easy_pace,
    pace_zones,
    predict_time,
    score_from_result,
    velocity_from_vdot,
)
from .conditions import (
    ConditionAdjustment,
    adjust_zones_for_weather,
    adjusted_score,
    calculate_condition_adjustment,
    elevation_pace_correction,
    weather_pace_adjustment,
)
from .load import LoadConfig, calculate_workout_load, daily_loads_from_workouts
from .fitness import (
    DailyFitness,
    FitnessStatus,
    FitnessSummary,
    RampRateRisk,
    RampRiskLevel,
    TrendConfig,
    assess_ramp_rate_risk,
    calculate_ewma,
    calculate_fitness_trend,
    calculate_ramp_rate,
    fill_daily_load_gaps,
    fitness_status,
    optimal_weekly_load_range,
    rolling_load,
    summarize_fitness,
)

__all__ = [
    # Fitness score and pace ladder
    "PaceZones",
    "RaceDistance",
    "VDOTCalculation",
    "calculate_vdot_from_race",
    "equivalent_race_times",
    "estimate_vdot_from_easy_pace",
    "pace_zones",
    "predict_time",
    "score_from_result",
    "velocity_from_vdot",
    # Conditions
    "ConditionAdjustment",
    "adjust_zones_for_weather",
    "adjusted_score",
    "calculate_condition_adjustment",
    "elevation_pace_correction",
    "weather_pace_adjustment",
    # Load
    "LoadConfig",
    "calculate_workout_load",
    "daily_loads_from_workouts",
    # Fitness trend
    "DailyFitness",
    "FitnessStatus",
    "FitnessSummary",
    "RampRateRisk",
    "RampRiskLevel",
    "TrendConfig",
    "assess_ramp_rate_risk",
    "calculate_ewma",
    "calculate_fitness_trend",
    "calculate_ramp_rate",
    "fill_daily_load_gaps",
    "fitness_status",
    "optimal_weekly_load_range",
    "rolling_load",
    "summarize_fitness",
]
