"""
Exercise Tracker Backend - User Route Handlers
===============================================

What:  POST/GET /api/users, POST /api/users/{id}/exercises,
       GET /api/users/{id}/logs.
How:   Read the raw body or query string, validate it with parse_payload(),
       delegate to the services, return the response model. Errors are never
       handled here; they propagate to the handlers registered in main.py.

Request bodies may be JSON objects or form fields (urlencoded or multipart).
"""

import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import ValidationError
from app.schemas.common import ErrorResponse, parse_payload
from app.schemas.exercise import (
    AddExerciseRequest,
    ExerciseCreatedResponse,
    LogQuery,
    UserLogResponse,
)
from app.schemas.user import (
    CreateUserRequest,
    ExistingUserResponse,
    UserCreatedResponse,
    UserSummary,
)
from app.services.exercise_service import exercise_service
from app.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Users"])

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_payload(request: Request) -> Dict[str, Any]:
    """
    Dependency returning the request body as a flat dict.

    Form bodies become {field: last value}; JSON bodies must be objects.
    An empty body is an empty dict, so missing fields are reported by the
    request model rather than here.

    Raises:
        ValidationError: body is not valid JSON or not a JSON object
    """
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        raise ValidationError(message="Request body is not valid JSON", field="body")
    if not isinstance(data, dict):
        raise ValidationError(message="Request body must be a JSON object", field="body")
    return data


@router.post(
    "/users",
    status_code=201,
    response_model=None,
    responses={
        200: {"description": "User already existed", "model": ExistingUserResponse},
        201: {"description": "User created", "model": UserCreatedResponse},
        400: {"description": "Missing username", "model": ErrorResponse},
    },
    summary="Create a user (idempotent by username)",
)
async def create_user(
    payload: Dict[str, Any] = Depends(read_payload),
    db: AsyncSession = Depends(get_db_session, scope="function"),
):
    """
    Create a user, or return the existing one with the same username.

    201 {username, id} for a new user; 200 {id, username, count} otherwise.
    """
    request_model = parse_payload(CreateUserRequest, payload)
    result, created = await user_service.create_user(db, request_model)
    return JSONResponse(status_code=201 if created else 200, content=result.model_dump())


@router.get(
    "/users",
    response_model=List[UserSummary],
    summary="List all users",
)
async def list_users(
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> List[UserSummary]:
    """Every user as {id, username}, oldest first."""
    return await user_service.list_users(db)


@router.post(
    "/users/{user_id}/exercises",
    status_code=201,
    response_model=ExerciseCreatedResponse,
    responses={
        400: {"description": "Invalid description, duration or date", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Log an exercise for a user",
)
async def add_exercise(
    user_id: str,
    payload: Dict[str, Any] = Depends(read_payload),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> ExerciseCreatedResponse:
    """Append an exercise; `date` defaults to today when omitted."""
    request_model = parse_payload(AddExerciseRequest, payload)
    return await exercise_service.add_exercise(db, user_id, request_model)


@router.get(
    "/users/{user_id}/logs",
    response_model=UserLogResponse,
    responses={
        400: {"description": "Invalid from, to or limit", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Get a user's exercise log",
)
async def get_log(
    user_id: str,
    date_from: Optional[str] = Query(
        default=None, alias="from", description="Inclusive lower bound (YYYY-MM-DD)",
    ),
    date_to: Optional[str] = Query(
        default=None, alias="to", description="Inclusive upper bound (YYYY-MM-DD)",
    ),
    limit: Optional[str] = Query(
        default=None, description="Return at most this many entries (positive integer)",
    ),
    db: AsyncSession = Depends(get_db_session, scope="function"),
) -> UserLogResponse:
    """
    Exercise log in insertion order, filtered then limited.

    Example:
        GET /api/users/Xy3_ab12/logs?from=2024-01-10&to=2024-01-31&limit=5
    """
    query = parse_payload(LogQuery, {"from": date_from, "to": date_to, "limit": limit})
    return await exercise_service.get_log(db, user_id, query)
