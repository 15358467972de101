"""Health & Readiness Probes.

Invariants:
    - GET /health/ returns 200 whenever the process is up (liveness)
    - GET /health/ready returns 503 until the database answers (readiness),
      and reports how many events the catalog holds
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import cubetimer.infrastructure.database as database
from cubetimer.services import timer_registry

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": "cubetimer-api", "version": "1.0.0"}


@router.get("/ready")
async def readiness_check():
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {
            "database": "healthy",
            "events": len(timer_registry.get_catalog().events_list()),
        },
    }
