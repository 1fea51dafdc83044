"""Tests for workout selection and personalisation."""

import pytest

from training_intelligence.models.athlete import AthleteProfile, SpeedworkExperience, StressLevel
from training_intelligence.models.plans import TrainingPhase
from training_intelligence.planning.selection import (
    COMFORT_SUBSTITUTIONS,
    apply_comfort_substitution,
    available_minutes_for_day,
    effective_workout_type,
    experience_progression,
    long_run_type,
    recovery_adjustments,
    time_constrained_distance,
    workout_type_for_phase,
)
from training_intelligence.planning.templates import WORKOUT_TEMPLATES


BASE = TrainingPhase.BASE
BUILD = TrainingPhase.BUILD
PEAK = TrainingPhase.PEAK
TAPER = TrainingPhase.TAPER

MARATHON_M = 42195
HALF_M = 21097
FIVE_K_M = 5000


class TestLongRunType:
    """Tests for long_run_type function."""

    def test_base_and_taper_are_easy(self):
        assert long_run_type(BASE, 3, MARATHON_M) == "easy_long_run"
        assert long_run_type(TAPER, 0, MARATHON_M) == "easy_long_run"

    def test_marathon_peak(self):
        assert long_run_type(PEAK, 0, MARATHON_M) == "marathon_pace_long_run"
        assert long_run_type(PEAK, 1, MARATHON_M) == "marathon_simulation"

    def test_marathon_build_alternates(self):
        assert long_run_type(BUILD, 0, MARATHON_M) == "easy_long_run"
        assert long_run_type(BUILD, 1, MARATHON_M) == "progression_long_run"

    def test_half_peak_alternates(self):
        assert long_run_type(PEAK, 1, HALF_M) == "progression_long_run"

    def test_short_race_progression_every_third_week(self):
        types = [long_run_type(BUILD, w, FIVE_K_M) for w in range(6)]
        assert types.count("progression_long_run") == 2
        assert types[2] == "progression_long_run"


class TestWorkoutTypeForPhase:
    """Tests for workout_type_for_phase function."""

    def test_base(self):
        assert workout_type_for_phase(BASE, 0, MARATHON_M, 1) == "classic_fartlek"
        assert workout_type_for_phase(BASE, 0, MARATHON_M, 2) == "short_hill_repeats"

    def test_build_rotation(self):
        assert workout_type_for_phase(BUILD, 0, MARATHON_M, 1) == "steady_tempo"
        assert workout_type_for_phase(BUILD, 1, MARATHON_M, 1) == "cruise_intervals"
        assert workout_type_for_phase(BUILD, 0, MARATHON_M, 2) == "yasso_800s"
        assert workout_type_for_phase(BUILD, 1, MARATHON_M, 2) == "short_intervals_400m"

    def test_peak_is_race_specific(self):
        assert workout_type_for_phase(PEAK, 0, MARATHON_M, 1) == "marathon_pace_intervals"
        assert workout_type_for_phase(PEAK, 0, HALF_M, 1) == "half_marathon_pace_workout"
        assert workout_type_for_phase(PEAK, 0, FIVE_K_M, 1) == "mile_repeats"

    def test_taper(self):
        assert workout_type_for_phase(TAPER, 0, HALF_M, 1) == "steady_tempo"
        assert workout_type_for_phase(TAPER, 0, HALF_M, 2) == "easy_run_strides"

    @pytest.mark.parametrize("phase", [BASE, BUILD, PEAK, TAPER])
    @pytest.mark.parametrize("distance", [FIVE_K_M, HALF_M, MARATHON_M])
    def test_every_choice_is_a_template(self, phase, distance):
        for week in range(4):
            assert long_run_type(phase, week, distance) in WORKOUT_TEMPLATES
            for session in (1, 2):
                assert workout_type_for_phase(phase, week, distance, session) in WORKOUT_TEMPLATES


class TestComfortSubstitution:
    """Tests for apply_comfort_substitution function."""

    def test_no_profile(self):
        assert apply_comfort_substitution("yasso_800s", None) == "yasso_800s"

    def test_comfort_two_takes_first_alternative(self):
        profile = AthleteProfile(comfort_vo2max=2)
        assert apply_comfort_substitution("yasso_800s", profile) == "cruise_intervals"

    def test_comfort_one_takes_second_alternative(self):
        profile = AthleteProfile(comfort_vo2max=1)
        assert apply_comfort_substitution("yasso_800s", profile) == "progressive_tempo"

    def test_comfortable_athlete_keeps_workout(self):
        profile = AthleteProfile(comfort_vo2max=3, comfort_tempo=5)
        assert apply_comfort_substitution("yasso_800s", profile) == "yasso_800s"

    def test_uses_matching_comfort_field(self):
        profile = AthleteProfile(comfort_hills=1, comfort_tempo=5)
        assert apply_comfort_substitution("short_hill_repeats", profile) == "easy_run_strides"
        assert apply_comfort_substitution("steady_tempo", profile) == "steady_tempo"

    def test_unknown_workout(self):
        profile = AthleteProfile(comfort_vo2max=1)
        assert apply_comfort_substitution("easy_run", profile) == "easy_run"

    def test_alternatives_are_templates(self):
        for workout_type, substitution in COMFORT_SUBSTITUTIONS.items():
            assert workout_type in WORKOUT_TEMPLATES
            assert all(alt in WORKOUT_TEMPLATES for alt in substitution.alternatives)


class TestExperienceProgression:
    """Tests for experience_progression function."""

    def test_no_profile(self):
        progression = experience_progression(None)
        assert not progression.start_with_fartlek
        assert progression.delay_vo2max_weeks == 0
        assert not progression.conservative_mileage

    def test_new_to_speedwork(self):
        progression = experience_progression(AthleteProfile(speedwork_experience=SpeedworkExperience.NONE))
        assert progression.start_with_fartlek
        assert progression.delay_vo2max_weeks == 4

    def test_beginner(self):
        progression = experience_progression(AthleteProfile(speedwork_experience=SpeedworkExperience.BEGINNER))
        assert progression.delay_vo2max_weeks == 2

    def test_short_history_is_conservative(self):
        assert experience_progression(AthleteProfile(years_running=1)).conservative_mileage
        assert experience_progression(AthleteProfile(highest_weekly_mileage=20)).conservative_mileage

    def test_defaults_for_missing_fields(self):
        progression = experience_progression(AthleteProfile())
        assert not progression.start_with_fartlek
        assert not progression.conservative_mileage


class TestRecoveryAdjustments:
    """Tests for recovery_adjustments function."""

    def test_no_profile(self):
        adjustments = recovery_adjustments(None)
        assert adjustments.volume_reduction_percent == 0
        assert not adjustments.extra_rest_day

    @pytest.mark.parametrize("stress,reduction", [
        (StressLevel.LOW, 0),
        (StressLevel.HIGH, 10),
        (StressLevel.VERY_HIGH, 20),
    ])
    def test_stress_reduces_volume(self, stress, reduction):
        assert recovery_adjustments(AthleteProfile(stress_level=stress)).volume_reduction_percent == reduction

    def test_extra_rest(self):
        assert recovery_adjustments(AthleteProfile(needs_extra_rest=True)).extra_rest_day
        assert recovery_adjustments(AthleteProfile(stress_level=StressLevel.VERY_HIGH)).extra_rest_day
        assert not recovery_adjustments(AthleteProfile(stress_level=StressLevel.HIGH)).extra_rest_day


class TestTimeConstraints:
    """Tests for time availability helpers."""

    def test_available_minutes(self):
        profile = AthleteProfile(weekday_availability_minutes=45, weekend_availability_minutes=120)
        assert available_minutes_for_day(profile, 0) == 45
        assert available_minutes_for_day(profile, 4) == 45
        assert available_minutes_for_day(profile, 5) == 120
        assert available_minutes_for_day(None, 5) is None

    def test_caps_distance(self):
        # 45 minutes less a 10-minute buffer at 10:00/mi
        assert time_constrained_distance(6.0, 45, 600) == 3.5

    def test_keeps_shorter_plan(self):
        assert time_constrained_distance(3.0, 90, 540) == 3.0

    def test_minimum_running_time(self):
        assert time_constrained_distance(6.0, 15, 600) == 2.0

    def test_no_constraint(self):
        assert time_constrained_distance(6.0, None, 600) == 6.0


class TestEffectiveWorkoutType:
    """Tests for effective_workout_type function."""

    def test_no_profile_passes_through(self):
        assert effective_workout_type("yasso_800s", BUILD, 0, None) == "yasso_800s"

    def test_beginner_opens_with_fartlek(self):
        profile = AthleteProfile(speedwork_experience=SpeedworkExperience.BEGINNER)
        assert effective_workout_type("short_hill_repeats", BASE, 0, profile) == "classic_fartlek"
        assert effective_workout_type("short_hill_repeats", BASE, 2, profile) == "short_hill_repeats"

    def test_vo2max_delayed(self):
        profile = AthleteProfile(speedwork_experience=SpeedworkExperience.NONE)
        assert effective_workout_type("yasso_800s", BUILD, 1, profile) == "cruise_intervals"
        assert effective_workout_type("yasso_800s", BUILD, 4, profile) == "yasso_800s"

    def test_comfort_applied_first(self):
        profile = AthleteProfile(comfort_vo2max=1)
        assert effective_workout_type("short_intervals_400m", BUILD, 0, profile) == "structured_fartlek"
