"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter

from order_tracker.core.config import settings
from order_tracker.schemas.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Reports whether Shopify credentials are configured. The token itself is
    never included.
    """
    return HealthResponse(
        status="OK",
        version=settings.version,
        environment=settings.environment,
        shopify_configured=settings.shopify_configured,
        shopify_domain=settings.shopify_domain or None,
        api_version=settings.shopify_api_version,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """
    Liveness probe for container orchestration.

    Simple check that the service is running.
    """
    return {"status": "alive"}
