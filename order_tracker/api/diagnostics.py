"""Operator diagnostics for Shopify connectivity.

These routes help find a wrong token, domain or API version without reading
server logs. They are disabled unless ENABLE_DIAGNOSTICS is set.
"""

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from order_tracker.core.config import ShopifyConfig
from order_tracker.core.deps import ShopifyClientDep, get_shopify_config
from order_tracker.core.exceptions import UpstreamRejectedError, UpstreamUnavailableError
from order_tracker.integrations.shopify.client import ShopifyClient
from order_tracker.schemas.diagnostics import (
    ApiVersionResult,
    ApiVersionsResponse,
    OrderListResponse,
    OrderSummary,
    TokenCheckResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

API_VERSIONS_TO_PROBE = ["2024-10", "2024-07", "2024-04", "2024-01", "2023-10", "2023-07"]
DEBUG_ORDERS_LIMIT = 10


@router.get("/token", response_model=TokenCheckResponse)
async def check_token(
    client: ShopifyClientDep,
    config: Annotated[ShopifyConfig, Depends(get_shopify_config)],
) -> TokenCheckResponse:
    """Call shop.json with the configured token.

    Upstream failures go through the standard error handlers, which attach a
    hint for 401/404/429.
    """
    shop = await client.get_shop()
    return TokenCheckResponse(
        success=True,
        message="Token is valid and has access to the shop.",
        shop=shop.get("name") or "Unknown",
        plan=shop.get("plan_name") or "Unknown",
        token_length=len(config.access_token.get_secret_value()),
    )


async def _probe_version(config: ShopifyConfig, version: str) -> ApiVersionResult:
    client = ShopifyClient(config.model_copy(update={"api_version": version}))
    try:
        shop = await client.get_shop()
    except UpstreamRejectedError as exc:
        logger.info("API version %s failed with HTTP %d", version, exc.status_code)
        return ApiVersionResult(status="FAILED", code=exc.status_code, error=exc.body)
    except UpstreamUnavailableError as exc:
        logger.info("API version %s unreachable: %s", version, exc)
        return ApiVersionResult(status="FAILED", code="unreachable", error=str(exc))
    return ApiVersionResult(status="OK", code=200, shop=shop.get("name"))


@router.get("/api-versions", response_model=ApiVersionsResponse)
async def probe_api_versions(
    config: Annotated[ShopifyConfig, Depends(get_shopify_config)],
) -> ApiVersionsResponse:
    """Check which Admin API versions the store accepts."""
    results = await asyncio.gather(
        *(_probe_version(config, version) for version in API_VERSIONS_TO_PROBE)
    )
    return ApiVersionsResponse(
        success=True,
        domain=config.domain,
        token_configured=bool(config.access_token.get_secret_value()),
        results=dict(zip(API_VERSIONS_TO_PROBE, results, strict=True)),
    )


@router.get("/orders/{email}", response_model=OrderListResponse)
async def list_orders_for_email(email: str, client: ShopifyClientDep) -> OrderListResponse:
    """List the orders Shopify has for an email, to compare names and numbers."""
    orders = await client.get_orders_by_email(email, limit=DEBUG_ORDERS_LIMIT)
    return OrderListResponse(
        success=True,
        count=len(orders),
        orders=[
            OrderSummary(
                id=o.get("id"),
                name=o.get("name"),
                order_number=o.get("order_number"),
                email=o.get("email"),
                created_at=o.get("created_at"),
                total_price=o.get("total_price"),
            )
            for o in orders
        ],
    )
