"""Root page and health check endpoints.

Provides endpoints for:
- The HTML form page served at ``/``
- Basic health checks
- Kubernetes readiness/liveness probes
"""

import time
from pathlib import Path
from typing import Any, Dict

from fastapi import APIRouter, Request, status
from fastapi.responses import FileResponse, JSONResponse

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


def static_dir() -> Path:
    """Directory holding index.html and its assets."""
    if settings.STATIC_DIR:
        return Path(settings.STATIC_DIR)
    return Path(__file__).resolve().parent.parent / "static"


@router.get("/", include_in_schema=False)
async def root() -> FileResponse:
    """Serve the HTML form page."""
    return FileResponse(static_dir() / "index.html", media_type="text/html")


@router.get("/health")
async def health_check(request: Request) -> Dict[str, Any]:
    """
    Health check endpoint with database connectivity verification.

    Returns 200 if healthy, 503 if MongoDB does not answer a ping.
    """
    db_available = await request.app.state.mongo.test_connection(timeout=5.0)

    if not db_available:
        logger.warning("Health check failed: database unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "timestamp": time.time(),
                "version": settings.VERSION,
                "database": "unavailable",
            },
        )

    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "database": "connected",
    }


@router.get("/ready")
async def readiness_check(request: Request) -> Dict[str, Any]:
    """Readiness probe endpoint for Kubernetes."""
    db_available = await request.app.state.mongo.test_connection(timeout=5.0)

    if not db_available:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "ready": False,
                "reason": "Database not ready",
                "timestamp": time.time(),
            },
        )

    return {"ready": True, "timestamp": time.time()}


@router.get("/live")
async def liveness_check() -> Dict[str, Any]:
    """Liveness probe endpoint for Kubernetes."""
    return {"alive": True, "timestamp": time.time()}
