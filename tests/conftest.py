"""Shared fixtures for the Training Intelligence test suite."""

from datetime import date

import pytest

from training_intelligence.models.athlete import PlanRequest
from training_intelligence.services.execution_scorer import reset_execution_scorer


MARATHON_M = 42195
HALF_MARATHON_M = 21097


@pytest.fixture(autouse=True)
def fresh_execution_scorer():
    """Each test gets its own scorer singleton."""
    reset_execution_scorer()
    yield
    reset_execution_scorer()


@pytest.fixture
def marathon_request():
    """16-week marathon: Monday 2025-01-06 to Sunday 2025-04-27."""
    return PlanRequest(
        race_date=date(2025, 4, 27),
        race_distance_m=MARATHON_M,
        race_name="Spring Marathon",
        start_date=date(2025, 1, 6),
        current_weekly_mileage=30,
        peak_weekly_mileage=50,
        runs_per_week=5,
        preferred_long_run_day="sunday",
        preferred_quality_days=["tuesday", "thursday"],
        quality_sessions_per_week=2,
        vdot=45.0,
    )


@pytest.fixture
def make_request():
    """Factory for marathon requests with field overrides."""
    def _make(**overrides) -> PlanRequest:
        fields = dict(
            race_date=date(2025, 4, 27),
            race_distance_m=MARATHON_M,
            start_date=date(2025, 1, 6),
            current_weekly_mileage=30,
            peak_weekly_mileage=50,
        )
        fields.update(overrides)
        return PlanRequest(**fields)
    return _make
