"""
Exercise Tracker Backend - Database Session Management
=======================================================

What:  The `Database` resource (engine + session factory), the declarative
       Base, and the per-request session dependency.
How:   The lifespan handler in main.py builds one Database from settings and
       stores it on `app.state.database`. `get_db_session` pulls it from there
       for each request, commits on success and rolls back on error.
Who:   Route handlers receive sessions via FastAPI's Depends(); tests build a
       Database against a temporary SQLite file and attach it to the app.

Nothing in this module opens a connection at import time.
"""

import logging
import secrets
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings

logger = logging.getLogger(__name__)


def short_id() -> str:
    """Generate a short, URL-safe identifier (8 characters)."""
    return secrets.token_urlsafe(6)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Models register with `Base.metadata`, which Alembic reads for
    autogenerate and `Database.create_all()` uses for test schemas.
    """
    pass


class Database:
    """
    Owns the async engine and session factory for one application instance.

    Lifecycle:
        database = Database.from_settings(settings)   # startup
        async with database.session() as session: ... # per request
        await database.dispose()                      # shutdown
    """

    def __init__(self, url: str, **engine_options: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_options)
        # expire_on_commit=False: attributes stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """
        Build a Database using the pool configuration from settings.

        SQLite engines use SQLAlchemy's default pool for the driver, which
        rejects pool_size/max_overflow, so those are only passed for servers.
        """
        options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
        if not settings.is_sqlite:
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(settings.database_url, **options)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Yield a session inside a unit of work.

        On success: commit. On any exception: roll back and re-raise so the
        global exception handlers can respond. The session is always closed.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def create_all(self) -> None:
        """Create every table registered on Base.metadata (if missing)."""
        # Import models so they register with Base.metadata
        from app.models import exercise, user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def ping(self) -> bool:
        """Run SELECT 1; False if the database can't be reached."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Example usage in a route:
        @router.get("/users")
        async def list_users(
            db: AsyncSession = Depends(get_db_session, scope="function"),
        ):
            ...

    Routes declare it with scope="function" so the commit finishes before
    the response is sent.

    Raises:
        Any exception from the handler is propagated after rollback.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
