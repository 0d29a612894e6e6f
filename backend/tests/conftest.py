"""
Exercise Tracker Backend - Test Configuration (conftest.py)
============================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures (function-scoped):
    ├── mock_db_session: Mock AsyncSession for service unit tests (no DB)
    ├── database:        Database on a fresh SQLite file with all tables
    └── test_client:     HTTPX AsyncClient bound to an app using `database`
"""

import os

# Set before any app import so the module-level Settings never points at a
# real server.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.config import Settings  # noqa: E402
from app.database import Database  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_log(mock_db_session):
            mock_db_session.get.return_value = user
            result = await exercise_service.get_log(mock_db_session, "u1", LogQuery())
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def test_settings(tmp_path):
    return Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")


@pytest_asyncio.fixture
async def database(test_settings):
    """A Database on a throwaway SQLite file, with every table created."""
    db = Database.from_settings(test_settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def test_client(test_settings, database):
    """
    HTTPX AsyncClient routed straight into a fresh app.

    ASGITransport does not run the lifespan, so the fixture attaches the
    Database itself, the same way the lifespan would.
    """
    from app.main import create_app

    app = create_app(test_settings)
    app.state.database = database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
