"""
Exercise Tracker Backend - FastAPI Application Factory
=======================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers; the
       lifespan handler owns the Database resource.
Who:   uvicorn (`uvicorn app.main:app`), and tests via create_app().

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐                   │
    │  │ Req ID   │→│  Access Log     │                   │
    │  └──────────┘ └─────────────────┘                   │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────────┐ ┌─────────────────┐   │
    │  │ /api/users[/{id}/...]    │ │ GET /health     │   │
    │  └──────────────────────────┘ └─────────────────┘   │
    │                                                     │
    │  Exception Handlers (by ErrorKind):                 │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ VALIDATION→400 │ NOT_FOUND→404 │ INTERNAL→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging → build Database → (optionally) create tables
    Shutdown: dispose Database (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app import __version__
from app.config import Settings, settings as default_settings
from app.database import Database
from app.exceptions import ErrorKind, ExerciseTrackerError, status_for_kind
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import health, users
from app.schemas.common import first_error_message

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure the root logger once, at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Own the Database for the lifetime of the app.

    The instance is published on `app.state.database`, where the
    get_db_session dependency picks it up.
    """
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("Exercise Tracker starting up (version %s)", __version__)

    database = Database.from_settings(app_settings)
    if app_settings.db_create_tables:
        await database.create_all()
    app.state.database = database

    logger.info(
        "Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port
    )

    yield

    logger.info("Exercise Tracker shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(kind: ErrorKind, message: str) -> JSONResponse:
    """Build the JSON error body for an error kind."""
    return JSONResponse(
        status_code=status_for_kind(kind),
        content={
            "error": kind.value,
            "message": message,
            "request_id": request_id_var.get(""),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the centralized error formatting stage.

    Handler hierarchy:
        ExerciseTrackerError    → status from its ErrorKind
        RequestValidationError  → VALIDATION (400), first error only
        Exception (fallback)    → INTERNAL (500) "Internal Server Error"

    Stack traces are only ever logged.
    """

    @app.exception_handler(ExerciseTrackerError)
    async def handle_app_error(request: Request, exc: ExerciseTrackerError):
        rid = request_id_var.get("")
        if exc.kind is ErrorKind.INTERNAL:
            logger.error("[%s] %s | Context: %s", rid, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s", rid, exc.kind.value, exc.message)
        return error_response(exc.kind, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = first_error_message(exc.errors())
        logger.warning("[%s] Validation error on %s: %s", request_id_var.get(""), request.url.path, message)
        return error_response(ErrorKind.VALIDATION, message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return error_response(ErrorKind.INTERNAL, "Internal Server Error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use instead of the environment-derived default.

    The Database is not created here; the lifespan handler does that, and
    tests attach their own instance to `app.state.database`.
    """
    app = FastAPI(
        title="Exercise Tracker API",
        description=(
            "Create users, log exercises against them, and read back an "
            "exercise log filtered by date range and limit."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = app_settings or default_settings

    # Last added runs first: RequestID → Logging → route
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(health.router)

    return app


app = create_app()
