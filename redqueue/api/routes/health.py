"""
Health check routes.
"""

from datetime import UTC, datetime

from fastapi import APIRouter
from fastapi.responses import Response

from redqueue import __version__
from redqueue.api.dependencies import Client
from redqueue.observability.metrics import get_metrics
from redqueue.store.connection import STORE_ERRORS
from redqueue.types.api import HealthResponse

router = APIRouter(tags=["Health"])


async def _ping(client: Client) -> bool:
    try:
        return bool(await client.redis.ping())
    except STORE_ERRORS:
        return False


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health of the API and the Redis connection.",
)
async def health_check(client: Client) -> HealthResponse:
    """
    Perform a health check.

    Returns:
        HealthResponse with service status.
    """
    redis_status = "healthy" if await _ping(client) else "unhealthy"

    return HealthResponse(
        status="healthy" if redis_status == "healthy" else "degraded",
        version=__version__,
        redis=redis_status,
        timestamp=datetime.now(UTC),
    )


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the service is ready to receive traffic.",
)
async def readiness_check(client: Client) -> dict:
    """Kubernetes readiness probe endpoint."""
    return {"ready": await _ping(client)}


@router.get(
    "/live",
    summary="Liveness check",
    description="Check if the service is alive.",
)
async def liveness_check() -> dict:
    """Kubernetes liveness probe endpoint."""
    return {"alive": True}


@router.get(
    "/metrics",
    summary="Prometheus metrics",
    description="Expose Prometheus metrics.",
)
async def metrics() -> Response:
    """Expose Prometheus metrics."""
    metrics_collector = get_metrics()
    return Response(
        content=metrics_collector.get_metrics(),
        media_type=metrics_collector.get_content_type(),
    )
