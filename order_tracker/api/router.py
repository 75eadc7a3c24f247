"""API router combining all route modules."""

from fastapi import APIRouter, Depends

from order_tracker.api import diagnostics, health, orders
from order_tracker.core.deps import require_diagnostics_enabled

api_router = APIRouter()

# Include health check routes (no prefix)
api_router.include_router(health.router)

# Customer order lookup (public, rate limited)
api_router.include_router(orders.router, tags=["orders"])

# Shopify connectivity checks (operator only, off by default)
api_router.include_router(
    diagnostics.router,
    prefix="/diagnostics",
    tags=["diagnostics"],
    dependencies=[Depends(require_diagnostics_enabled)],
)
