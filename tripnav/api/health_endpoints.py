"""
Health check and metrics endpoints.
"""

from fastapi import APIRouter, Request
from datetime import datetime
import time

from tripnav.config.settings import get_settings
from tripnav.core.error_handlers import error_handler
from tripnav.core.metrics import snapshot_metrics

router = APIRouter(tags=["health"])

# Application start time for uptime calculation
_app_start_time = time.time()


@router.get("/health")
async def health_check(request: Request):
    container = getattr(request.app.state, "service_container", None)
    settings = container.settings if container is not None else get_settings()
    healthy = container is not None and container.is_initialized
    return {
        "status": "healthy" if healthy else "unhealthy",
        "version": settings.app_version,
        "timestamp": datetime.utcnow().isoformat(),
        "uptime_seconds": round(time.time() - _app_start_time, 1),
        "active_sessions": len(container.get_registry()) if healthy else 0,
    }


@router.get("/metrics")
async def metrics():
    return {
        "status": "ok",
        "data": {
            **snapshot_metrics(),
            "errors": error_handler.get_error_statistics(),
        },
        "error": None,
    }
