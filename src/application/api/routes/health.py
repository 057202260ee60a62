"""
Health Check Routes
===================

Two checks, following the usual Kubernetes liveness/readiness split:

1. LIVENESS (``GET /health``):
   - "Is the process serving requests?"
   - No dependency checks; always 200 while the event loop runs

2. READINESS (``GET /health/ready``):
   - "Can this instance serve screenshots right now?"
   - Checks the artifact store; 503 when it reports unhealthy
   - Reports pending background cache writes

A Redis outage does not stop the gateway from serving (lookups degrade to
misses), but an instance in that state renders every request upstream, so
readiness reports it.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.application.api.dependencies import SettingsDep, StoreDep
from src.core.logging.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    timestamp: str
    version: str
    components: dict[str, Any] | None = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("", response_model=HealthResponse)
async def health_check(settings: SettingsDep) -> HealthResponse:
    """
    Liveness check for load balancers.

    Returns:
        HealthResponse: Always "healthy" while the process is up
    """
    return HealthResponse(status="healthy", timestamp=_now(), version=settings.app.APP_VERSION)


@router.get("/ready", response_model=HealthResponse)
async def readiness_check(request: Request, store: StoreDep, settings: SettingsDep):
    """
    Readiness check including the artifact store.

    HTTP Status Codes:
        200: Store reachable
        503: Store unhealthy
    """
    store_health = await store.health_check()

    components: dict[str, Any] = {"artifact_store": store_health}
    tasks = getattr(request.app.state, "tasks", None)
    if tasks is not None:
        components["background_writes"] = {
            "pending": tasks.pending,
            "completed": tasks.completed,
            "failed": tasks.failed,
        }

    status = "healthy" if store_health.get("status") == "healthy" else "unhealthy"
    body = HealthResponse(
        status=status, timestamp=_now(), version=settings.app.APP_VERSION, components=components
    )

    if status != "healthy":
        logger.warning("Readiness check failed", components=components)
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
