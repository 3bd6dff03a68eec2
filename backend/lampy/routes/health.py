"""
LAMPY Backend - Health Check Route
==================================

What:  Liveness probe for load balancers and container health checks.
How:   Runs SELECT 1 through the app's Database and reports server time.

Status levels:
    - ok:        database answered
    - degraded:  database unreachable (still HTTP 200 so the probe itself
                 does not flap; monitoring keys off the body)
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from lampy import __version__
from lampy.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(request: Request) -> HealthResponse:
    connected = await request.app.state.database.ping()
    if not connected:
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status="ok" if connected else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        database="connected" if connected else "disconnected",
    )
