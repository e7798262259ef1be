"""
Health check endpoints.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(request: Request):
    """
    Health check endpoint.
    Returns overall system health status.
    """
    storage = getattr(request.app.state, "storage", None)
    health_status = {
        "status": "healthy",
        "api": "up",
        "storage": "unknown",
    }

    if storage is None:
        health_status["storage"] = "uninitialised"
        health_status["status"] = "degraded"
        return health_status

    try:
        await storage.ping()
        health_status["storage"] = f"{storage.backend_name}: up"
    except Exception:
        logger.exception("Storage health check failed backend=%s", storage.backend_name)
        health_status["storage"] = f"{storage.backend_name}: down"
        health_status["status"] = "degraded"

    return health_status


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Kubernetes-style readiness probe."""
    if getattr(request.app.state, "storage", None) is None:
        return JSONResponse(
            status_code=503,
            content={"ready": False, "missing": ["storage"]},
        )
    return {"ready": True}


@router.get("/health/live")
async def liveness_check():
    """Kubernetes-style liveness probe."""
    return {"alive": True}
