"""
DocCRUD Backend - Health Check Route
=====================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings the document store database and reports uptime.
Who:   Called by Docker health checks, load balancers, and monitoring systems.

Status levels:
    - healthy:   Database reachable (HTTP 200)
    - unhealthy: Database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request, Response, status

from doccrud import __version__
from doccrud.schemas.document import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the health status of the backend service and its database.",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """
    Probe the store with `SELECT 1` and return aggregate status.

    The store is read from `app.state.store`, set by the app factory.
    """
    db_status = "connected"
    overall = "healthy"

    try:
        await request.app.state.store.ping()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
