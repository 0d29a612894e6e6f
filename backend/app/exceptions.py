"""
Exercise Tracker Backend - Exception Hierarchy
===============================================

What:  Application exceptions, each tagged with one of a closed set of error kinds.
How:   Services raise these; the handlers registered in main.py turn the kind into
       an HTTP status with `status_for_kind()` and render the message.
Who:   Raised by schemas (validation) and services (lookups, storage failures).

Exception Hierarchy:
    ExerciseTrackerError (base, kind=INTERNAL)
    ├── ValidationError   → VALIDATION → 400 Bad Request
    ├── NotFoundError     → NOT_FOUND  → 404 Not Found
    └── DatabaseError     → INTERNAL   → 500 Internal Server Error
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Every failure the API reports falls into exactly one of these."""

    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    INTERNAL = "internal_server_error"


_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


def status_for_kind(kind: ErrorKind) -> int:
    """Map an error kind to its HTTP status code."""
    return _STATUS_BY_KIND[kind]


class ExerciseTrackerError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (returned in the response body)
        context:  Debug details (logged server-side, not returned)
        kind:     The ErrorKind used to pick the status code
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str = "Internal Server Error",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return status_for_kind(self.kind)


class ValidationError(ExerciseTrackerError):
    """
    Raised when client input fails validation.

    When:  Missing username/description/duration, non-numeric duration,
           unparseable dates, non-positive limit, malformed request body.
    HTTP:  400 Bad Request

    Only the first failure is reported, e.g.:
        {"error": "validation_error", "message": "description is required"}
    """

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(ExerciseTrackerError):
    """
    Raised when a requested resource does not exist.

    When:  Adding an exercise to, or reading the log of, an unknown user id.
    HTTP:  404 Not Found

    SQLAlchemy returns None (or no row) for missing records; services convert
    that into this exception instead of dereferencing the missing value.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(ExerciseTrackerError):
    """
    Raised when a database operation fails unexpectedly.

    When:  Connection lost mid-query, deadlock, constraint violation we can't
           recover from.
    HTTP:  500 Internal Server Error

    The message is always generic; the original SQLAlchemy error type goes into
    `context` and is only logged.
    """

    kind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
