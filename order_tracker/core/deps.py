"""Dependency injection for FastAPI routes."""

from typing import Annotated

from fastapi import Depends, HTTPException, status

from order_tracker.core.config import ShopifyConfig, settings
from order_tracker.integrations.shopify.client import ShopifyClient
from order_tracker.services.order_service import OrderService


def get_shopify_config() -> ShopifyConfig:
    """Resolve Shopify credentials from settings.

    Raises ConfigurationError when they are missing. The app lifespan makes
    the same check at startup.
    """
    return settings.shopify_config()


def get_shopify_client(
    config: Annotated[ShopifyConfig, Depends(get_shopify_config)],
) -> ShopifyClient:
    return ShopifyClient(config)


def get_order_service(
    client: Annotated[ShopifyClient, Depends(get_shopify_client)],
) -> OrderService:
    return OrderService(client)


def require_diagnostics_enabled() -> None:
    """Hide diagnostics routes unless explicitly enabled."""
    if not settings.enable_diagnostics:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Not found")


def require_status_updates_enabled() -> None:
    """Hide the status update route unless explicitly enabled."""
    if not settings.enable_status_updates:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Not found")


ShopifyClientDep = Annotated[ShopifyClient, Depends(get_shopify_client)]
OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
