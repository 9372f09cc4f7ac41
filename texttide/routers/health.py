# texttide/routers/health.py
# Health check endpoints for monitoring and load balancers
# Provides liveness and readiness probes

import logging
import time
from typing import Any, Dict

from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel

from texttide.exceptions import StorageError
from texttide.observability.metrics import metrics_response
from texttide.repositories.clipboard_storage import ClipboardStorage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


class HealthStatus(BaseModel):
    """Health check response model."""
    status: str  # "healthy", "unhealthy"
    timestamp: float
    version: str = "1.0.0"
    checks: Dict[str, Dict[str, Any]] = {}


class ComponentHealth(BaseModel):
    """Individual component health."""
    status: str
    latency_ms: float = 0.0
    message: str = ""


async def check_storage_health(storage: ClipboardStorage) -> ComponentHealth:
    """Check that the clipboard store can be read."""
    start = time.time()
    try:
        records = await storage.load()
    except StorageError as e:
        logger.error(f"Storage health check failed: {e.message}")
        return ComponentHealth(
            status="unhealthy",
            latency_ms=(time.time() - start) * 1000,
            message=f"{storage.describe()}: {e.message}"
        )
    return ComponentHealth(
        status="healthy",
        latency_ms=(time.time() - start) * 1000,
        message=f"{storage.describe()}: {len(records)} item(s)"
    )


@router.get("/health", response_model=HealthStatus)
async def health_check(request: Request, response: Response):
    """
    Full health check endpoint.
    Returns status of all components.
    """
    storage_health = await check_storage_health(request.app.state.clipboard_service.storage)
    checks = {
        "storage": {
            "status": storage_health.status,
            "latency_ms": round(storage_health.latency_ms, 2),
            "message": storage_health.message
        }
    }

    overall_status = "healthy"
    if storage_health.status == "unhealthy":
        overall_status = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthStatus(status=overall_status, timestamp=time.time(), checks=checks)


@router.get("/health/live")
async def liveness_probe():
    """
    Liveness probe.
    Returns 200 if the application is running.
    Does NOT check the store.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_probe(request: Request, response: Response):
    """
    Readiness probe.
    Returns 200 only if the clipboard store can be read.
    """
    storage_health = await check_storage_health(request.app.state.clipboard_service.storage)

    if storage_health.status == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {
            "status": "not_ready",
            "reason": storage_health.message
        }

    return {"status": "ready"}


@router.get("/metrics", include_in_schema=False)
async def prometheus_metrics():
    """// expose /metrics"""
    return metrics_response()
