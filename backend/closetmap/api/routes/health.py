"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if database is unreachable (readiness)
    - Neither probe requires caller identity
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from closetmap.api.dependencies import get_context
from closetmap.infrastructure.app_context import AppContext

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe."""
    return {"status": "healthy", "service": "closetmap-api", "version": "1.0.0"}


@router.get("/ready")
async def readiness_check(context: AppContext = Depends(get_context)):
    """Readiness probe, including database connectivity."""
    if not await context.db.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
