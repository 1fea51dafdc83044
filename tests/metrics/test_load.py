"""Tests for workout load calculation."""

from datetime import date

import pytest

from training_intelligence.metrics.load import (
    LoadConfig,
    calculate_workout_load,
    daily_loads_from_workouts,
)


class TestCalculateWorkoutLoad:
    """Tests for calculate_workout_load function."""

    def test_easy_run(self):
        assert calculate_workout_load(30, "easy") == 18

    def test_long_session_bonus(self):
        # 90 min x 0.65, plus 0.5% per minute over the hour
        assert calculate_workout_load(90, "long") == 67

    def test_no_bonus_at_one_hour(self):
        assert calculate_workout_load(60, "tempo") == 51

    def test_unknown_category_uses_other(self):
        assert calculate_workout_load(30, "pilates") == calculate_workout_load(30, "other")

    def test_pace_factor_at_benchmark(self):
        assert calculate_workout_load(30, "tempo", avg_pace_sec_per_mile=600, distance_miles=3) == 26

    def test_faster_pace_counts_more(self):
        fast = calculate_workout_load(30, "tempo", avg_pace_sec_per_mile=400, distance_miles=4.5)
        assert fast == 31

    def test_pace_factor_needs_distance(self):
        assert calculate_workout_load(30, "tempo", avg_pace_sec_per_mile=400) == 26

    def test_implausible_pace_ignored(self):
        assert calculate_workout_load(30, "tempo", avg_pace_sec_per_mile=100, distance_miles=18) == 26

    def test_zero_duration(self):
        assert calculate_workout_load(0, "race") == 0

    def test_custom_config(self):
        config = LoadConfig(intensity_factors={"easy": 1.0, "other": 1.0})
        assert calculate_workout_load(30, "easy", config=config) == 30

    def test_intensity_factors_read_only(self):
        config = LoadConfig()
        with pytest.raises(TypeError):
            config.intensity_factors["easy"] = 2.0

    def test_custom_factors_copied(self):
        factors = {"easy": 1.0, "other": 1.0}
        config = LoadConfig(intensity_factors=factors)
        factors["easy"] = 5.0
        assert config.intensity_for("easy") == 1.0
        with pytest.raises(TypeError):
            config.intensity_factors["easy"] = 2.0


class TestDailyLoadsFromWorkouts:
    """Tests for daily_loads_from_workouts function."""

    def test_sums_same_day(self):
        monday = date(2025, 1, 6)
        tuesday = date(2025, 1, 7)
        loads = daily_loads_from_workouts([
            (tuesday, 60, "tempo"),
            (monday, 30, "easy"),
            (monday, 30, "easy"),
        ])
        assert loads == [(monday, 36.0), (tuesday, 51.0)]

    def test_empty(self):
        assert daily_loads_from_workouts([]) == []

    def test_pace_and_distance_applied(self):
        monday = date(2025, 1, 6)
        loads = daily_loads_from_workouts([(monday, 30, "tempo", 400, 4.5)])
        expected = calculate_workout_load(30, "tempo", avg_pace_sec_per_mile=400, distance_miles=4.5)
        assert loads == [(monday, expected)]
        assert expected == 31

    def test_mixed_tuple_lengths(self):
        monday = date(2025, 1, 6)
        loads = daily_loads_from_workouts([
            (monday, 30, "tempo", 400, 4.5),
            (monday, 30, "easy"),
            (monday, 30, "easy", None, None),
        ])
        assert loads == [(monday, 67.0)]
