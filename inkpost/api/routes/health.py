"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /health always returns 200 if the process is up (liveness)
    - GET /health/ready returns 503 if the database is unreachable (readiness)
    - Both answer in the standard envelope
"""

import logging

from fastapi import APIRouter, Request, status

from inkpost.api.responses import send_error, send_success
from inkpost.infrastructure.database import get_db_manager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Basic liveness probe."""
    return send_success(
        request, "Service is healthy",
        {"status": "healthy", "service": "inkpost-api", "version": request.app.version},
    )


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe, including database connectivity."""
    db_manager = get_db_manager(request)
    db_ok = await db_manager.health_check() if db_manager else False
    if not db_ok:
        logger.warning("Readiness check failed: database unavailable")
        return send_error(
            request, status.HTTP_503_SERVICE_UNAVAILABLE, "Database unavailable",
        )
    return send_success(
        request, "Service is ready",
        {"status": "ready", "checks": {"database": "healthy"}},
    )
