"""
Exercise Tracker Backend - User Schemas
========================================

Request and response shapes for the /api/users endpoints.
"""

from pydantic import BaseModel, Field


class CreateUserRequest(BaseModel):
    """Body of POST /api/users. Unknown fields are ignored."""
    username: str = Field(min_length=1, description="Username (any non-empty string)")


class UserCreatedResponse(BaseModel):
    """POST /api/users → 201 when a new user was stored."""
    username: str
    id: str


class ExistingUserResponse(BaseModel):
    """POST /api/users → 200 when the name was already taken."""
    id: str
    username: str
    count: int


class UserSummary(BaseModel):
    """One element of GET /api/users."""
    id: str
    username: str
