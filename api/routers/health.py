"""Health check endpoints."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """
    Health check endpoint.

    Returns status of all system components.
    """
    app_state = request.app.state.app_state

    components = app_state.get_health_status()

    is_healthy = components.get("initialized", False)
    provider = components.get("provider") or {}
    if is_healthy and provider.get("status") in ("degraded", "unhealthy"):
        is_healthy = False

    return {
        "status": "healthy" if is_healthy else "degraded",
        "timestamp": datetime.now().isoformat(),
        "components": components,
    }


@router.get("/health/ready")
async def readiness_check(request: Request) -> dict[str, Any]:
    """
    Readiness check.

    Returns ready=true once storage and the provider client are in place.
    """
    app_state = request.app.state.app_state

    return {
        "ready": app_state.is_initialized,
        "timestamp": datetime.now().isoformat(),
    }


@router.get("/health/live")
async def liveness_check() -> dict[str, Any]:
    """Liveness check; 200 whenever the process is serving."""
    return {
        "alive": True,
        "timestamp": datetime.now().isoformat(),
    }
