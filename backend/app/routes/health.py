"""
Exercise Tracker Backend - Health Check Route
==============================================

What:  GET /health for container and load balancer probes.
How:   Pings the injected Database with SELECT 1 and reports uptime.
Who:   Docker health checks, uptime monitors.

Status levels:
    - healthy:   database reachable
    - unhealthy: database unreachable (or not initialized yet)
"""

import logging
import time

from fastapi import APIRouter, Request

from app import __version__
from app.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Probe the database and return aggregate status with uptime."""
    database = getattr(request.app.state, "database", None)
    connected = database is not None and await database.ping()
    if not connected:
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
