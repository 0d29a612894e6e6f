"""
Exercise Tracker Backend - Exercise Service
============================================

What:  Appending exercises to a user and reading a user's exercise log.
How:   Appends are a single UPDATE ... RETURNING that bumps users.count,
       followed by the exercise INSERT, both in the request's transaction.
Who:   Called by app/routes/users.py.

Append Flow (POST /api/users/{id}/exercises):
    ┌───────────────────────────┐    ┌────────────────────┐    ┌──────────┐
    │ UPDATE users              │───▶│ INSERT exercises   │───▶│  COMMIT  │
    │ SET count = count + 1     │    │ position = count-1 │    │ (session │
    │ WHERE id = :id RETURNING  │    └────────────────────┘    │  dep.)   │
    └───────────────────────────┘                              └──────────┘
          │ no row
          ▼
      NotFoundError (404), nothing written

    The UPDATE locks the user row until commit, so concurrent appends to one
    user are serialized and each gets a distinct position. If the INSERT
    fails, the rollback also undoes the increment: count always equals the
    number of exercise rows.
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import short_id
from app.exceptions import DatabaseError, NotFoundError
from app.models.exercise import Exercise
from app.models.user import User
from app.schemas.exercise import (
    AddExerciseRequest,
    ExerciseCreatedResponse,
    LogEntry,
    LogQuery,
    UserLogResponse,
    to_date_string,
)

logger = logging.getLogger(__name__)


class ExerciseService:
    """
    Business logic for exercises.

    Responsibilities:
        - add_exercise(): atomic increment-and-append
        - get_log(): filtered, limited log with the unfiltered total
    """

    async def add_exercise(
        self, db: AsyncSession, user_id: str, payload: AddExerciseRequest
    ) -> ExerciseCreatedResponse:
        """
        Append an exercise to a user's log.

        Args:
            db: Async database session (committed by get_db_session)
            user_id: Target user id from the path
            payload: Validated request body

        Raises:
            NotFoundError: No user with this id (→ 404)
            DatabaseError: Update or insert failed (→ 500)
        """
        exercise_date = payload.resolved_date()

        try:
            result = await db.execute(
                update(User)
                .where(User.id == user_id)
                .values(count=User.count + 1)
                .returning(User.id, User.name, User.count)
                .execution_options(synchronize_session=False)
            )
            row = result.one_or_none()
            if row is None:
                raise NotFoundError(resource="user", resource_id=user_id)
            # row.count would be tuple.count(); unpack instead
            owner_id, username, exercise_count = row

            exercise = Exercise(
                id=short_id(),
                user_id=owner_id,
                description=payload.description,
                duration=payload.duration,
                date=exercise_date,
                position=exercise_count - 1,
            )
            db.add(exercise)
            await db.flush()
            logger.info(
                "Exercise %s added for user %s (count=%d)", exercise.id, owner_id, exercise_count
            )

            return ExerciseCreatedResponse(
                username=username,
                description=exercise.description,
                duration=exercise.duration,
                id=owner_id,
                date=to_date_string(exercise.date),
            )

        except NotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error adding exercise for %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not add the exercise. Please try again.",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

    async def get_log(
        self, db: AsyncSession, user_id: str, query: LogQuery
    ) -> UserLogResponse:
        """
        Return a user's exercises, oldest insertion first.

        Filtering:
            - from/to: inclusive calendar-date bounds
            - limit: first N entries after filtering

        `count` in the response is the user's unfiltered total.

        Raises:
            NotFoundError: No user with this id (→ 404)
            DatabaseError: Query failed (→ 500)
        """
        try:
            user = await db.get(User, user_id)
            if user is None:
                raise NotFoundError(resource="user", resource_id=user_id)

            stmt = select(Exercise).where(Exercise.user_id == user.id)
            if query.date_from is not None:
                stmt = stmt.where(Exercise.date >= query.date_from)
            if query.date_to is not None:
                stmt = stmt.where(Exercise.date <= query.date_to)
            stmt = stmt.order_by(Exercise.position)
            if query.limit is not None:
                stmt = stmt.limit(query.limit)

            result = await db.execute(stmt)
            log = [
                LogEntry(
                    description=exercise.description,
                    duration=exercise.duration,
                    date=to_date_string(exercise.date),
                )
                for exercise in result.scalars().all()
            ]

            return UserLogResponse(
                id=user.id,
                username=user.name,
                count=user.count,
                log=log,
            )

        except NotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error reading log for %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the exercise log. Please try again.",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )


exercise_service = ExerciseService()
