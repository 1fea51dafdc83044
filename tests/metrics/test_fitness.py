"""Tests for the CTL/ATL/TSB fitness trend model."""

import math
from datetime import date, timedelta

import pytest

from training_intelligence.metrics.fitness import (
    FitnessStatus,
    RampRiskLevel,
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


START = date(2025, 1, 6)


def constant_loads(days: int, load: float = 50.0):
    return [(START + timedelta(days=i), load) for i in range(days)]


class TestCalculateEwma:
    """Tests for calculate_ewma function."""

    def test_single_step(self):
        assert calculate_ewma(100, 0, 0.5) == 50

    def test_no_change_at_steady_state(self):
        assert calculate_ewma(40, 40, 0.1) == 40


class TestFillDailyLoadGaps:
    """Tests for fill_daily_load_gaps function."""

    def test_zero_fills_rest_days(self):
        filled = fill_daily_load_gaps([(START, 50), (START + timedelta(days=3), 40)])

        assert [load for _, load in filled] == [50, 0.0, 0.0, 40]
        assert filled[-1][0] == START + timedelta(days=3)

    def test_sums_duplicate_days(self):
        assert fill_daily_load_gaps([(START, 20), (START, 30)]) == [(START, 50.0)]

    def test_explicit_range(self):
        filled = fill_daily_load_gaps([], start_date=START, end_date=START + timedelta(days=2))
        assert len(filled) == 3
        assert all(load == 0 for _, load in filled)

    def test_empty(self):
        assert fill_daily_load_gaps([]) == []


class TestCalculateFitnessTrend:
    """Tests for calculate_fitness_trend function."""

    def test_first_day_from_zero(self):
        metrics = calculate_fitness_trend([(START, 100)])

        assert len(metrics) == 1
        assert metrics[0].ctl == pytest.approx(100 * (1 - math.exp(-1 / 42)))
        assert metrics[0].atl == pytest.approx(100 * (1 - math.exp(-1 / 7)))
        assert metrics[0].tsb == pytest.approx(metrics[0].ctl - metrics[0].atl)

    def test_rest_days_decay_fitness(self):
        metrics = calculate_fitness_trend([(START, 100), (START + timedelta(days=5), 0)])

        assert len(metrics) == 6
        assert metrics[1].daily_load == 0
        assert metrics[5].ctl < metrics[0].ctl

    def test_input_order_does_not_matter(self):
        loads = constant_loads(10)
        assert calculate_fitness_trend(loads) == calculate_fitness_trend(list(reversed(loads)))

    def test_building_load_is_tiring(self):
        metrics = calculate_fitness_trend(constant_loads(21))
        assert metrics[-1].atl > metrics[-1].ctl
        assert metrics[-1].tsb < 0

    def test_initial_values(self):
        metrics = calculate_fitness_trend([(START, 0)], initial_ctl=60, initial_atl=60)
        assert metrics[0].ctl < 60
        assert metrics[0].atl < metrics[0].ctl

    def test_empty(self):
        assert calculate_fitness_trend([]) == []


class TestRampRate:
    """Tests for calculate_ramp_rate and assess_ramp_rate_risk."""

    def test_needs_a_week_of_history(self):
        assert calculate_ramp_rate(calculate_fitness_trend(constant_loads(6))) is None

    def test_building_ramp_is_positive(self):
        metrics = calculate_fitness_trend(constant_loads(35))
        assert calculate_ramp_rate(metrics) > 0

    def test_detraining_ramp_is_negative(self):
        loads = constant_loads(28, 80) + [(START + timedelta(days=56), 0)]
        metrics = calculate_fitness_trend(loads)
        assert calculate_ramp_rate(metrics, weeks=4) < 0

    @pytest.mark.parametrize("ramp,level", [
        (None, RampRiskLevel.INSUFFICIENT_DATA),
        (-2.0, RampRiskLevel.DECREASING),
        (3.0, RampRiskLevel.CONSERVATIVE),
        (6.0, RampRiskLevel.MODERATE),
        (9.0, RampRiskLevel.ELEVATED),
        (12.0, RampRiskLevel.HIGH),
    ])
    def test_risk_levels(self, ramp, level):
        assert assess_ramp_rate_risk(ramp).level == level

    def test_fast_detraining_gets_recommendation(self):
        assert assess_ramp_rate_risk(-6.0).recommendation is not None
        assert assess_ramp_rate_risk(-2.0).recommendation is None

    def test_high_risk_recommends_recovery(self):
        risk = assess_ramp_rate_risk(12.0)
        assert "recovery" in risk.recommendation


class TestFitnessStatus:
    """Tests for fitness_status function."""

    @pytest.mark.parametrize("tsb,status", [
        (25, FitnessStatus.FRESH),
        (10, FitnessStatus.RACE_READY),
        (0, FitnessStatus.TRAINING),
        (-15, FitnessStatus.FATIGUED),
        (-30, FitnessStatus.OVERREACHED),
    ])
    def test_bands(self, tsb, status):
        assert fitness_status(tsb) == status

    def test_labels(self):
        assert FitnessStatus.RACE_READY.label == "Race Ready"


class TestSummaries:
    """Tests for summary helpers."""

    def test_optimal_weekly_load_range(self):
        assert optimal_weekly_load_range(50) == (280, 420)

    def test_rolling_load(self):
        assert rolling_load(constant_loads(10, 10), days=7) == 70

    def test_summarize_fitness(self):
        metrics = calculate_fitness_trend(constant_loads(35))
        summary = summarize_fitness(metrics)

        assert summary.date == metrics[-1].date
        assert summary.ctl == metrics[-1].ctl
        assert summary.status == fitness_status(metrics[-1].tsb)
        assert summary.ramp_risk.ramp_rate == calculate_ramp_rate(metrics)
        assert summary.to_dict()["status_label"] == summary.status.label

    def test_summarize_empty(self):
        assert summarize_fitness([]) is None
