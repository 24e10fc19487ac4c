"""
Health Check Routes
===================

Kubernetes-compatible health and readiness endpoints.
"""

from fastapi import APIRouter, Request

from api import __version__
from api.schemas import HealthResponse, HealthStatus, ReadinessResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns the health status of the service",
)
async def health_check(request: Request) -> HealthResponse:
    """
    Health check endpoint for load balancers and monitoring.

    Returns:
        HealthResponse with current service status
    """
    playground = getattr(request.app.state, "playground", None)
    checks = {
        "api": True,
        "playground": playground is not None,
    }

    status = HealthStatus.HEALTHY if all(checks.values()) else HealthStatus.DEGRADED

    return HealthResponse(
        status=status,
        version=__version__,
        checks=checks,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Returns whether the service is ready to handle requests",
)
async def readiness_check(request: Request) -> ReadinessResponse:
    """
    Readiness check for Kubernetes.

    Used to determine if the pod should receive traffic.
    """
    checks = {
        "settings_loaded": getattr(request.app.state, "settings", None) is not None,
        "playground_ready": getattr(request.app.state, "playground", None) is not None,
    }

    return ReadinessResponse(
        ready=all(checks.values()),
        checks=checks,
    )


@router.get(
    "/live",
    summary="Liveness check",
    description="Simple liveness probe",
)
async def liveness_check() -> dict:
    """Simple endpoint to verify the process is running."""
    return {"status": "ok"}
