"""
Exercise Tracker Backend - Shared Schemas and Validation Helpers
=================================================================

What:  Error/health response models plus `parse_payload()`, the single entry
       point that turns raw request data into a validated request model.
How:   Pydantic does the checking; the first reported failure is rewritten
       into a short human-readable sentence and raised as our ValidationError.
Who:   Routes call parse_payload() before touching any service. The
       RequestValidationError handler in main.py reuses first_error_message().
"""

from typing import Any, Mapping, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

_NUMBER_ERRORS = {"float_type", "float_parsing", "finite_number"}
_INTEGER_ERRORS = {"int_type", "int_parsing", "int_from_float", "greater_than_equal"}


def _field_name(error: Mapping[str, Any]) -> str:
    loc = error.get("loc") or ()
    return str(loc[-1]) if loc else "body"


def first_error_message(errors: Sequence[Mapping[str, Any]]) -> str:
    """
    Describe the first Pydantic error in one sentence.

    Examples:
        {"type": "missing", "loc": ("username",)}     → "username is required"
        {"type": "float_parsing", "loc": ("duration",)} → "duration must be a number"
    """
    if not errors:
        return "Validation failed"

    error = errors[0]
    field = _field_name(error)
    error_type = error.get("type", "")

    if error_type in ("missing", "string_too_short"):
        return f"{field} is required"
    if error_type == "string_type":
        return f"{field} must be a string"
    if error_type in _NUMBER_ERRORS:
        return f"{field} must be a number"
    if error_type in _INTEGER_ERRORS:
        return f"{field} must be a positive integer"
    if error_type == "value_error":
        # Raised by our own field validators; ctx carries the original ValueError
        ctx = error.get("ctx") or {}
        return f"{field}: {ctx.get('error', error.get('msg', 'invalid value'))}"
    return f"{field}: {error.get('msg', 'invalid value')}"


def parse_payload(model: Type[ModelT], data: Mapping[str, Any]) -> ModelT:
    """
    Validate raw request data against `model`.

    Raises:
        ValidationError: with the first failure's message (→ 400)
    """
    try:
        return model.model_validate(dict(data))
    except PydanticValidationError as e:
        errors = e.errors()
        raise ValidationError(
            message=first_error_message(errors),
            field=_field_name(errors[0]) if errors else None,
            context={"error_count": len(errors)},
        ) from e


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body returned by every exception handler.

    Example:
        {
            "error": "not_found",
            "message": "user with ID 'Xy3_ab12' not found",
            "request_id": "550e8400"
        }
    """
    error: str = Field(description="Machine-readable error kind")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
