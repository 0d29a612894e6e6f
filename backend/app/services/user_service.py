"""
Exercise Tracker Backend - User Service
========================================

What:  Creating users (idempotent by name) and listing them.
How:   Plain SQLAlchemy selects/inserts on the session passed in by the route.
Who:   Called by app/routes/users.py.

The service is stateless; every call receives its session, so tests pass a
mock AsyncSession and no database is needed.
"""

import logging
from typing import List, Optional, Tuple, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import short_id
from app.exceptions import DatabaseError
from app.models.user import User
from app.schemas.user import (
    CreateUserRequest,
    ExistingUserResponse,
    UserCreatedResponse,
    UserSummary,
)

logger = logging.getLogger(__name__)

CreateUserResult = Union[UserCreatedResponse, ExistingUserResponse]


class UserService:
    """
    Business logic for users.

    Responsibilities:
        - create_user(): return the existing user for a name, or store a new one
        - list_users(): id + name of every user, oldest first
    """

    async def _find_by_name(self, db: AsyncSession, name: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.name == name))
        return result.scalar_one_or_none()

    async def create_user(
        self, db: AsyncSession, payload: CreateUserRequest
    ) -> Tuple[CreateUserResult, bool]:
        """
        Create a user unless one with the same name exists.

        Returns:
            (response, created). `created` is False when an existing user was
            returned; the route answers 200 instead of 201 in that case.

        Concurrency:
            Two requests racing on the same new name both miss the lookup; the
            unique index on users.name rejects the second insert. That request
            rolls back and returns the row the first one stored.

        Raises:
            DatabaseError: Query or insert failed for any other reason (→ 500)
        """
        try:
            existing = await self._find_by_name(db, payload.username)
            if existing is not None:
                logger.debug("User '%s' already exists (%s)", existing.name, existing.id)
                return self._existing(existing), False

            user = User(id=short_id(), name=payload.username, count=0)
            db.add(user)
            try:
                await db.flush()
            except IntegrityError:
                await db.rollback()
                winner = await self._find_by_name(db, payload.username)
                if winner is None:
                    raise
                logger.info("Concurrent create for '%s' resolved to %s", winner.name, winner.id)
                return self._existing(winner), False

            logger.info("User created: %s (%s)", user.name, user.id)
            return UserCreatedResponse(username=user.name, id=user.id), True

        except SQLAlchemyError as e:
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the user. Please try again.",
                context={"error_type": type(e).__name__},
            )

    @staticmethod
    def _existing(user: User) -> ExistingUserResponse:
        return ExistingUserResponse(id=user.id, username=user.name, count=user.count)

    async def list_users(self, db: AsyncSession) -> List[UserSummary]:
        """
        Return every user as {id, username}.

        Order: creation time, then id as a tie-breaker.
        """
        try:
            result = await db.execute(
                select(User.id, User.name).order_by(User.created_at, User.id)
            )
            return [UserSummary(id=row.id, username=row.name) for row in result.all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve users. Please try again.",
                context={"error_type": type(e).__name__},
            )


user_service = UserService()
