"""Tests for the exception hierarchy."""

import pytest

from training_intelligence.exceptions import (
    ErrorCode,
    InsufficientTimeError,
    InvalidRaceResultError,
    PlanGenerationError,
    PlanValidationError,
    TrainingIntelligenceError,
    ValidationError,
    WorkoutTemplateNotFoundError,
)


class TestTrainingIntelligenceError:
    """Tests for the base exception."""

    def test_defaults(self):
        error = TrainingIntelligenceError("boom")
        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.status_code == 500
        assert error.details == {}
        assert str(error) == "boom"

    def test_to_dict_without_details(self):
        assert TrainingIntelligenceError("boom").to_dict() == {
            "error": {"code": "INTERNAL_ERROR", "message": "boom"}
        }

    def test_repr(self):
        assert repr(TrainingIntelligenceError("boom")) == (
            "TrainingIntelligenceError(code=INTERNAL_ERROR, message='boom')"
        )


class TestValidationErrors:
    """Tests for 400-class errors."""

    def test_field_in_details(self):
        error = ValidationError("Bad value", field="distance")
        assert error.status_code == 400
        assert error.to_dict()["error"]["details"] == {"field": "distance"}

    def test_invalid_race_result(self):
        error = InvalidRaceResultError("Race time must be positive", field="time")
        assert error.code == ErrorCode.INVALID_RACE_RESULT
        assert error.status_code == 400
        assert isinstance(error, ValidationError)

    def test_plan_validation(self):
        error = PlanValidationError("Bad plan", field="race_date")
        assert error.code == ErrorCode.PLAN_VALIDATION_ERROR
        assert error.details["field"] == "race_date"


class TestTemplateNotFound:
    """Tests for WorkoutTemplateNotFoundError."""

    def test_message_and_details(self):
        error = WorkoutTemplateNotFoundError("moonwalk")
        assert error.message == "Workout template not found: moonwalk"
        assert error.details == {"template_id": "moonwalk"}
        assert error.status_code == 404


class TestPlanGenerationErrors:
    """Tests for plan generation failures."""

    def test_generation_failed(self):
        error = PlanGenerationError("No weeks")
        assert error.code == ErrorCode.PLAN_GENERATION_FAILED
        assert error.status_code == 500

    def test_insufficient_time(self):
        error = InsufficientTimeError(available_weeks=2)

        assert error.code == ErrorCode.INSUFFICIENT_TIME
        assert error.status_code == 422
        assert error.available_weeks == 2
        assert error.minimum_weeks == 4
        assert error.details == {"available_weeks": 2, "minimum_weeks": 4}
        assert "2 week(s)" in error.message

    def test_catchable_as_base(self):
        with pytest.raises(TrainingIntelligenceError):
            raise InsufficientTimeError(available_weeks=1)
