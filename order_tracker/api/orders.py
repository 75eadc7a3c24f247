"""Customer order lookup endpoints."""

from fastapi import APIRouter, Depends, Request

from order_tracker.core.config import settings
from order_tracker.core.deps import OrderServiceDep, require_status_updates_enabled
from order_tracker.core.rate_limit import limiter
from order_tracker.schemas.order import (
    OrderSearchRequest,
    OrderSearchResponse,
    OrderStatusUpdateRequest,
    OrderStatusUpdateResponse,
)

router = APIRouter()


@router.post("/search-order", response_model=OrderSearchResponse)
@limiter.limit(settings.search_rate_limit)
async def search_order(
    request: Request,  # noqa: ARG001
    data: OrderSearchRequest,
    service: OrderServiceDep,
) -> OrderSearchResponse:
    """Find a customer's order by order number and email.

    An unknown order is a normal outcome: it returns 200 with success=false.
    Missing fields return 400.
    """
    return await service.search(data.order_number, data.email)


@router.post(
    "/update-status",
    response_model=OrderStatusUpdateResponse,
    dependencies=[Depends(require_status_updates_enabled)],
)
@limiter.limit(settings.search_rate_limit)
async def update_status(
    request: Request,  # noqa: ARG001
    data: OrderStatusUpdateRequest,
    service: OrderServiceDep,
) -> OrderStatusUpdateResponse:
    """Mark an order as fulfilled. Disabled unless ENABLE_STATUS_UPDATES is set."""
    return await service.mark_fulfilled(data.order_id)
