"""
Exercise Tracker Backend - Exercise Service Unit Tests
=======================================================

What:  ExerciseService against a mocked AsyncSession.

What we test:
    ✅ Unknown user → NotFoundError, nothing inserted
    ✅ Append uses the incremented count for position and echoes user fields
    ✅ Missing date defaults to today
    ✅ Log keeps the unfiltered count and renders dates
    ✅ from/to/limit end up in the SQL statement
"""

import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import DatabaseError, NotFoundError
from app.models.exercise import Exercise
from app.schemas.exercise import AddExerciseRequest, LogQuery, to_date_string
from app.services.exercise_service import ExerciseService


def _update_result(row):
    result = MagicMock()
    result.one_or_none.return_value = row
    return result


def _log_result(exercises):
    result = MagicMock()
    result.scalars.return_value.all.return_value = exercises
    return result


class TestAddExercise:
    """Tests for the atomic append."""

    def setup_method(self):
        self.service = ExerciseService()

    @pytest.mark.asyncio
    async def test_unknown_user_raises_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = _update_result(None)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.add_exercise(
                mock_db_session,
                "missing",
                AddExerciseRequest(description="run", duration=30),
            )

        assert exc_info.value.status_code == 404
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_append_uses_incremented_count(self, mock_db_session):
        mock_db_session.execute.return_value = _update_result(("u1", "alice", 3))

        result = await self.service.add_exercise(
            mock_db_session,
            "u1",
            AddExerciseRequest(description="swim", duration=45, date="2024-01-15"),
        )

        added = mock_db_session.add.call_args[0][0]
        assert isinstance(added, Exercise)
        assert added.user_id == "u1"
        assert added.position == 2
        assert added.date == datetime.date(2024, 1, 15)

        assert result.model_dump() == {
            "username": "alice",
            "description": "swim",
            "duration": 45,
            "id": "u1",
            "date": "Mon Jan 15 2024",
        }

    @pytest.mark.asyncio
    async def test_missing_date_defaults_to_today(self, mock_db_session):
        mock_db_session.execute.return_value = _update_result(("u1", "alice", 1))

        result = await self.service.add_exercise(
            mock_db_session, "u1", AddExerciseRequest(description="walk", duration=10)
        )

        assert result.date == to_date_string(datetime.date.today())

    @pytest.mark.asyncio
    async def test_database_failure_is_wrapped(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("UPDATE users", {}, Exception("locked"))
        )

        with pytest.raises(DatabaseError):
            await self.service.add_exercise(
                mock_db_session, "u1", AddExerciseRequest(description="run", duration=5)
            )


class TestGetLog:
    """Tests for log retrieval."""

    def setup_method(self):
        self.service = ExerciseService()

    @pytest.mark.asyncio
    async def test_unknown_user_raises_not_found(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError):
            await self.service.get_log(mock_db_session, "missing", LogQuery())

        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_count_is_unfiltered_total(self, mock_db_session):
        mock_db_session.get.return_value = SimpleNamespace(id="u1", name="alice", count=3)
        mock_db_session.execute.return_value = _log_result([
            SimpleNamespace(description="run", duration=30.0, date=datetime.date(2024, 1, 15)),
        ])

        result = await self.service.get_log(
            mock_db_session, "u1", LogQuery(date_from=datetime.date(2024, 1, 10))
        )

        assert result.count == 3
        assert len(result.log) == 1
        assert result.log[0].model_dump() == {
            "description": "run",
            "duration": 30,
            "date": "Mon Jan 15 2024",
        }

    @pytest.mark.asyncio
    async def test_filters_and_limit_reach_the_query(self, mock_db_session):
        mock_db_session.get.return_value = SimpleNamespace(id="u1", name="alice", count=0)
        mock_db_session.execute.return_value = _log_result([])

        await self.service.get_log(
            mock_db_session,
            "u1",
            LogQuery(
                date_from=datetime.date(2024, 1, 10),
                date_to=datetime.date(2024, 1, 31),
                limit=2,
            ),
        )

        sql = str(mock_db_session.execute.call_args[0][0])
        assert "exercises.date >=" in sql
        assert "exercises.date <=" in sql
        assert "ORDER BY exercises.position" in sql
        assert "LIMIT" in sql

    @pytest.mark.asyncio
    async def test_no_filters_no_limit(self, mock_db_session):
        mock_db_session.get.return_value = SimpleNamespace(id="u1", name="alice", count=0)
        mock_db_session.execute.return_value = _log_result([])

        result = await self.service.get_log(mock_db_session, "u1", LogQuery())

        sql = str(mock_db_session.execute.call_args[0][0])
        assert "LIMIT" not in sql
        assert "exercises.date" not in sql.split("WHERE", 1)[1]
        assert result.log == []
