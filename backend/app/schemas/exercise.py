"""
Exercise Tracker Backend - Exercise and Log Schemas
====================================================

What:  Request models for adding exercises and querying logs, the response
       models for both, and the date helpers they share.
How:   Dates come in as ISO strings (date or datetime) and are kept as
       `datetime.date`. On the way out they are rendered in the short
       "Mon Jan 01 2024" form by `to_date_string()`.
"""

import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, field_serializer, field_validator


def parse_date_value(value: Any) -> Optional[datetime.date]:
    """
    Coerce a request value into a calendar date.

    None or blank strings mean "not supplied" and return None. Datetimes are
    truncated to their date in the offset they were given in.

    Raises:
        ValueError: value is not an ISO 8601 date/datetime
    """
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if not isinstance(value, str):
        raise ValueError("expected an ISO date string such as 2024-01-31")

    value = value.strip()
    if not value:
        return None
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.datetime.fromisoformat(value).date()
    except ValueError:
        raise ValueError(f"invalid date '{value}', expected an ISO date such as 2024-01-31")


def to_date_string(value: datetime.date) -> str:
    """Render a date as e.g. 'Mon Jan 01 2024'. The year is always four digits."""
    return f"{value.strftime('%a %b %d')} {value.year:04d}"


def render_duration(value: float) -> Union[int, float]:
    """Whole-minute durations are echoed as integers (30, not 30.0)."""
    if float(value).is_integer():
        return int(value)
    return value


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class AddExerciseRequest(BaseModel):
    """
    Body of POST /api/users/{id}/exercises.

    Form posts send every field as a string; Pydantic's lax mode turns
    "30" into 30.0 for duration.
    """
    description: str = Field(min_length=1)
    duration: float = Field(allow_inf_nan=False, description="Minutes")
    date: Optional[datetime.date] = Field(
        default=None,
        description="ISO date; today (server time) when omitted or blank",
    )

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v: Any) -> Optional[datetime.date]:
        return parse_date_value(v)

    def resolved_date(self) -> datetime.date:
        return self.date or datetime.date.today()


class LogQuery(BaseModel):
    """
    Query string of GET /api/users/{id}/logs.

    `from` and `to` are inclusive bounds; `limit` keeps the first N entries
    after filtering. Blank values are treated as absent.
    """
    date_from: Optional[datetime.date] = Field(default=None, alias="from")
    date_to: Optional[datetime.date] = Field(default=None, alias="to")
    limit: Optional[int] = Field(default=None, ge=1)

    model_config = {"populate_by_name": True}

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def validate_bounds(cls, v: Any) -> Optional[datetime.date]:
        return parse_date_value(v)

    @field_validator("limit", mode="before")
    @classmethod
    def blank_limit(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ExerciseCreatedResponse(BaseModel):
    """POST /api/users/{id}/exercises → 201. `id` is the user's id."""
    username: str
    description: str
    duration: float
    id: str
    date: str

    @field_serializer("duration")
    def serialize_duration(self, v: float) -> Union[int, float]:
        return render_duration(v)


class LogEntry(BaseModel):
    description: str
    duration: float
    date: str

    @field_serializer("duration")
    def serialize_duration(self, v: float) -> Union[int, float]:
        return render_duration(v)


class UserLogResponse(BaseModel):
    """
    GET /api/users/{id}/logs → 200.

    `count` is the user's total number of exercises, not len(log).
    """
    id: str
    username: str
    count: int
    log: List[LogEntry]
