"""Tests for the workout template library."""

import pytest

from training_intelligence.exceptions import ErrorCode, WorkoutTemplateNotFoundError
from training_intelligence.models.plans import TrainingPhase
from training_intelligence.planning.templates import (
    WORKOUT_TEMPLATES,
    find_workout_template,
    get_workout_template,
    key_workout_templates,
    structure_work_miles,
    templates_by_category,
    templates_for_phase,
)
from training_intelligence.metrics.vdot import ZONE_NAMES


class TestTemplateLibrary:
    """Tests for template lookup."""

    def test_lookup_by_id(self):
        template = get_workout_template("cruise_intervals")
        assert template.name == "Cruise Intervals"
        assert template.pace_zone == "threshold"

    def test_find_missing_returns_none(self):
        assert find_workout_template("moonwalk") is None

    def test_get_missing_raises(self):
        with pytest.raises(WorkoutTemplateNotFoundError) as exc_info:
            get_workout_template("moonwalk")
        assert exc_info.value.code == ErrorCode.TEMPLATE_NOT_FOUND
        assert exc_info.value.status_code == 404

    def test_library_is_read_only(self):
        with pytest.raises(TypeError):
            WORKOUT_TEMPLATES["new"] = WORKOUT_TEMPLATES["easy_run"]

    def test_pace_zones_exist(self):
        for template in WORKOUT_TEMPLATES.values():
            if template.category == "race":
                assert template.pace_zone == "race"
            else:
                assert template.pace_zone in ZONE_NAMES, template.id

    def test_generator_templates_present(self):
        for template_id in ("race_day", "tune_up_race", "shakeout_run", "race_pace_tune_up",
                            "medium_long_run", "recovery_run", "easy_run"):
            assert template_id in WORKOUT_TEMPLATES

    def test_templates_for_phase(self):
        taper = templates_for_phase(TrainingPhase.TAPER)
        assert any(t.id == "easy_run" for t in taper)
        assert all(t.is_appropriate_for(TrainingPhase.TAPER) for t in taper)

    def test_templates_by_category(self):
        long_runs = templates_by_category("long")
        assert {t.id for t in long_runs} >= {"easy_long_run", "progression_long_run"}

    def test_key_workouts(self):
        assert all(t.is_key_workout for t in key_workout_templates())
        assert not get_workout_template("easy_run").is_key_workout


class TestStructureWorkMiles:
    """Tests for structure_work_miles function."""

    def test_continuous_tempo(self):
        result = structure_work_miles(get_workout_template("steady_tempo").structure)
        assert result["total_work_miles"] == 4
        assert result["work_pace"] == "tempo"

    def test_interval_repeats(self):
        result = structure_work_miles(get_workout_template("cruise_intervals").structure)
        assert result["total_work_miles"] == 6
        assert result["work_pace"] == "threshold"

    def test_meter_repeats(self):
        result = structure_work_miles(get_workout_template("yasso_800s").structure)
        assert result["total_work_miles"] == pytest.approx(8000 / 1609.34)

    def test_multi_step_tempo_keeps_first_pace(self):
        result = structure_work_miles(get_workout_template("progressive_tempo").structure)
        assert result["total_work_miles"] == 5
        assert result["work_pace"] == "half_marathon"

    def test_easy_run_has_no_measured_work(self):
        result = structure_work_miles(get_workout_template("easy_run").structure)
        assert result["total_work_miles"] == 0
        assert result["work_pace"] == "easy"

    def test_warmup_and_cooldown_ignored(self):
        result = structure_work_miles(get_workout_template("classic_fartlek").structure)
        assert result["total_work_miles"] == 0
