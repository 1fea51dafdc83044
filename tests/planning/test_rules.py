"""Tests for phase, progression and weekly-structure rules."""

import pytest

from training_intelligence.models.plans import Aggressiveness, TrainingPhase
from training_intelligence.planning.rules import (
    DEFAULT_PROGRESSION,
    RunType,
    adjacent_hard_days,
    down_week_flags,
    effort_distribution,
    max_taper_weeks,
    mileage_progression,
    phase_boundaries,
    phase_split,
    phase_weeks,
    validate_hard_easy_pattern,
    weekly_structure,
)


BASE = TrainingPhase.BASE
BUILD = TrainingPhase.BUILD
PEAK = TrainingPhase.PEAK
TAPER = TrainingPhase.TAPER

MARATHON_16 = {BASE: 5, BUILD: 7, PEAK: 2, TAPER: 2}


class TestPhaseSplit:
    """Tests for phase_split and max_taper_weeks."""

    def test_marathon_gets_most_base(self):
        assert phase_split(42195).base == 0.30
        assert phase_split(21097).base == 0.25
        assert phase_split(10000).base == 0.20

    def test_short_races_get_short_taper(self):
        assert phase_split(5000).taper == 0.10

    def test_splits_sum_to_one(self):
        for distance in (5000, 10000, 21097, 42195):
            split = phase_split(distance)
            assert split.base + split.build + split.peak + split.taper == pytest.approx(1.0)

    def test_taper_caps(self):
        assert max_taper_weeks(42195, 20) == 3
        assert max_taper_weeks(21097, 20) == 2
        assert max_taper_weeks(5000, 8) == 1
        assert max_taper_weeks(5000, 20) == 2


class TestPhaseWeeks:
    """Tests for phase_weeks function."""

    def test_16_week_marathon(self):
        assert phase_weeks(phase_split(42195), 16, 42195) == MARATHON_16

    def test_12_week_half(self):
        weeks = phase_weeks(phase_split(21097), 12, 21097)
        assert weeks == {BASE: 3, BUILD: 5, PEAK: 2, TAPER: 2}

    def test_8_week_5k(self):
        weeks = phase_weeks(phase_split(5000), 8, 5000)
        assert weeks == {BASE: 1, BUILD: 4, PEAK: 2, TAPER: 1}

    @pytest.mark.parametrize("total", range(4, 31))
    def test_always_sums_to_total(self, total):
        for distance in (5000, 10000, 21097, 42195):
            weeks = phase_weeks(phase_split(distance), total, distance)
            assert sum(weeks.values()) == total
            assert all(count >= 1 for count in weeks.values())

    def test_four_week_plan_gives_back_weeks(self):
        weeks = phase_weeks(phase_split(42195), 4, 42195)
        assert weeks == {BASE: 1, BUILD: 1, PEAK: 1, TAPER: 1}

    def test_peak_is_clamped(self):
        weeks = phase_weeks(phase_split(42195), 30, 42195)
        assert weeks[PEAK] == 4
        assert weeks[TAPER] == 3

    def test_boundaries(self):
        assert phase_boundaries(MARATHON_16) == [(BASE, 5), (BUILD, 12), (PEAK, 14), (TAPER, 16)]


class TestDownWeeks:
    """Tests for down_week_flags function."""

    def test_every_fourth_week_for_moderate(self):
        flags = down_week_flags(MARATHON_16, Aggressiveness.MODERATE)
        assert [i + 1 for i, down in enumerate(flags) if down] == [4, 8, 12]

    def test_every_third_week_for_conservative(self):
        flags = down_week_flags(MARATHON_16, Aggressiveness.CONSERVATIVE)
        assert [i + 1 for i, down in enumerate(flags) if down] == [3, 6, 9, 12]

    def test_taper_never_down(self):
        flags = down_week_flags(MARATHON_16, Aggressiveness.CONSERVATIVE)
        assert flags[-2:] == [False, False]

    def test_last_peak_week_never_down(self):
        weeks = {BASE: 1, BUILD: 1, PEAK: 2, TAPER: 1}
        flags = down_week_flags(weeks, Aggressiveness.MODERATE)
        assert flags == [False, False, False, False, False]


class TestMileageProgression:
    """Tests for mileage_progression function."""

    @pytest.fixture
    def mileages(self):
        return mileage_progression(30, 50, 16, MARATHON_16, Aggressiveness.MODERATE)

    def test_length(self, mileages):
        assert len(mileages) == 16

    def test_starts_at_current(self, mileages):
        assert mileages[0] == 30

    def test_base_grows_ten_percent(self, mileages):
        assert mileages[1] == 33
        assert mileages[2] == 36

    def test_down_week_drops(self, mileages):
        assert mileages[3] < mileages[2]

    def test_peak_holds(self, mileages):
        assert mileages[12] == 50
        assert mileages[13] == 50

    def test_taper_steps_down(self, mileages):
        assert mileages[14] == 38
        assert mileages[15] == 25

    def test_never_exceeds_peak(self, mileages):
        assert max(mileages) == 50

    def test_base_capped_below_peak(self):
        mileages = mileage_progression(45, 50, 16, MARATHON_16, Aggressiveness.AGGRESSIVE)
        assert mileages[0] == 45
        assert all(m <= 43 for m in mileages[1:5])

    def test_long_taper_schedule(self):
        schedule = DEFAULT_PROGRESSION.taper_schedule(5)
        assert schedule[0] == 0.9
        assert schedule[-1] == 0.5
        assert list(schedule) == sorted(schedule, reverse=True)

    def test_known_taper_schedules(self):
        assert DEFAULT_PROGRESSION.taper_schedule(3) == (0.80, 0.65, 0.50)
        assert DEFAULT_PROGRESSION.taper_schedule(0) == ()


class TestWeeklyStructure:
    """Tests for weekly_structure function."""

    def test_default_week(self):
        structure = weekly_structure(5, "sunday", ["tuesday", "thursday"], [], 2)

        assert [d.run_type for d in structure.days] == [
            RunType.EASY, RunType.QUALITY, RunType.EASY, RunType.QUALITY,
            RunType.REST, RunType.REST, RunType.LONG,
        ]
        assert structure.quality_days == ["tuesday", "thursday"]
        assert structure.long_run_index == 6
        assert structure.run_days == 5

    def test_rest_days_respected(self):
        structure = weekly_structure(5, "sunday", ["tuesday", "thursday"], ["monday"], 2)

        assert structure.run_type(0) == RunType.REST
        assert structure.rest_days == ["monday"]
        assert structure.run_days == 5

    def test_quality_not_next_to_long_run(self):
        structure = weekly_structure(5, "sunday", ["saturday", "monday"], [], 2)

        assert "saturday" not in structure.quality_days
        assert "monday" not in structure.quality_days
        assert structure.quality_days == ["tuesday", "thursday"]

    def test_long_run_on_rest_day_is_dropped(self):
        structure = weekly_structure(4, "sunday", ["tuesday"], ["sunday"], 1)
        assert structure.long_run_index is None
        assert structure.run_type(6) == RunType.REST

    def test_no_quality_sessions(self):
        structure = weekly_structure(4, "saturday", [], [], 0)
        assert structure.quality_days == []
        assert structure.indices_of(RunType.QUALITY) == []

    def test_seven_runs(self):
        structure = weekly_structure(7, "sunday", ["tuesday", "thursday"], [], 2)
        assert structure.indices_of(RunType.REST) == []


class TestHardEasyPattern:
    """Tests for the hard/easy validation helpers."""

    def test_default_week_is_valid(self):
        structure = weekly_structure(5, "sunday", ["tuesday", "thursday"], [], 2)
        assert validate_hard_easy_pattern(structure)
        assert adjacent_hard_days(structure) == []

    def test_detects_back_to_back(self):
        structure = weekly_structure(5, "sunday", ["tuesday", "thursday"], [], 2)
        structure.days[2].run_type = RunType.QUALITY
        structure.days[2].is_key_workout = True

        assert not validate_hard_easy_pattern(structure)
        assert ("tuesday", "wednesday") in adjacent_hard_days(structure)

    def test_detects_week_wrap(self):
        structure = weekly_structure(5, "sunday", ["tuesday", "thursday"], [], 2)
        structure.days[0].is_key_workout = True
        assert ("sunday", "monday") in adjacent_hard_days(structure)

    def test_effort_distribution(self):
        structure = weekly_structure(5, "sunday", ["tuesday", "thursday"], [], 2)
        assert effort_distribution(structure) == {"easy_percent": 40, "hard_percent": 60}
