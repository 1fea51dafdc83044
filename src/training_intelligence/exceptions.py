"""
Custom exceptions for the Training Intelligence engine.

This module defines a hierarchy of exceptions that provide clear error
handling throughout the engine. Each exception includes:
- A descriptive message
- An error code for API responses
- HTTP status code mapping
- Optional details for debugging

Only two conditions are fatal for callers: malformed race results handed
to the fitness model and plan requests with too little time before the
goal race. Every other path returns a best-effort result.
"""

from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for consistent API error responses."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Fitness model errors
    INVALID_RACE_RESULT = "INVALID_RACE_RESULT"

    # Plan errors
    PLAN_VALIDATION_ERROR = "PLAN_VALIDATION_ERROR"
    PLAN_GENERATION_FAILED = "PLAN_GENERATION_FAILED"
    INSUFFICIENT_TIME = "INSUFFICIENT_TIME"

    # Workout template errors
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"


class TrainingIntelligenceError(Exception):
    """
    Base exception for all Training Intelligence errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        status_code: HTTP status code for API responses
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# ============================================================================
# Validation Errors (400)
# ============================================================================

class ValidationError(TrainingIntelligenceError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=error_details,
        )


class InvalidRaceResultError(ValidationError):
    """Raised when a race result has a non-positive distance or time."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, field=field, details=details)
        self.code = ErrorCode.INVALID_RACE_RESULT


class PlanValidationError(ValidationError):
    """Raised when plan request data validation fails."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, field=field, details=details)
        self.code = ErrorCode.PLAN_VALIDATION_ERROR


# ============================================================================
# Not Found Errors (404)
# ============================================================================

class WorkoutTemplateNotFoundError(TrainingIntelligenceError):
    """Raised when a workout template id is not in the library."""

    def __init__(self, template_id: str) -> None:
        super().__init__(
            message=f"Workout template not found: {template_id}",
            code=ErrorCode.TEMPLATE_NOT_FOUND,
            status_code=404,
            details={"template_id": template_id},
        )


# ============================================================================
# Plan Generation Errors
# ============================================================================

class PlanGenerationError(TrainingIntelligenceError):
    """Raised when plan generation fails."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.PLAN_GENERATION_FAILED,
            status_code=500,
            details=details,
        )


class InsufficientTimeError(PlanGenerationError):
    """Raised when there are too few weeks before the goal race for a structured plan."""

    def __init__(self, available_weeks: int, minimum_weeks: int = 4) -> None:
        super().__init__(
            message=(
                f"Not enough time for a structured plan: {available_weeks} week(s) "
                f"available, at least {minimum_weeks} required"
            ),
            details={
                "available_weeks": available_weeks,
                "minimum_weeks": minimum_weeks,
            },
        )
        self.code = ErrorCode.INSUFFICIENT_TIME
        self.status_code = 422
        self.available_weeks = available_weeks
        self.minimum_weeks = minimum_weeks
