"""Shopify Admin API client using httpx."""

import logging
from typing import Any

import httpx

from order_tracker.core.config import ShopifyConfig
from order_tracker.core.exceptions import (
    OrderQueryValidationError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

# Page size when filtering by email only; matching by number happens locally
ORDERS_PAGE_SIZE = 50


class ShopifyClient:
    """Async client for the Shopify Admin REST API.

    The access token is only ever sent as the ``X-Shopify-Access-Token``
    header. It is never placed in query strings, request bodies or logs.
    """

    def __init__(self, config: ShopifyConfig) -> None:
        self.shop_domain = config.domain
        self.api_version = config.api_version
        self.base_url = config.base_url
        self.timeout = config.timeout
        self.headers = {
            "X-Shopify-Access-Token": config.access_token.get_secret_value(),
            "Content-Type": "application/json",
        }

    def __repr__(self) -> str:
        return f"ShopifyClient(shop_domain={self.shop_domain!r}, api_version={self.api_version!r})"

    async def get_orders_by_email(
        self, email: str, name: str | None = None, limit: int = ORDERS_PAGE_SIZE
    ) -> list[dict[str, Any]]:
        """Fetch orders placed with ``email``, including cancelled and archived ones.

        Args:
            email: Customer email. Lower-cased and trimmed before use.
            name: Optional exact order name (e.g. '#1001'). When given, Shopify
                filters by name server-side and only one order is requested.
            limit: Page size when filtering by email only.

        Returns:
            The ``orders`` array exactly as Shopify returned it.

        Raises:
            OrderQueryValidationError: If ``email`` is blank. Shopify ignores an
                empty email filter and would return every order in the store.
        """
        email = email.strip().lower()
        if not email:
            raise OrderQueryValidationError("Email is required.")

        params: dict[str, Any] = {
            "status": "any",
            "email": email,
            "limit": limit,
        }
        if name is not None:
            params["name"] = name
            params["limit"] = 1

        logger.info(
            "Fetching orders from %s (api %s, limit=%d, by_name=%s)",
            self.shop_domain,
            self.api_version,
            params["limit"],
            name is not None,
        )
        data = await self._request("GET", "/orders.json", params=params)
        orders: list[dict[str, Any]] = data.get("orders") or []
        logger.info("Shopify returned %d orders", len(orders))
        return orders

    async def get_shop(self) -> dict[str, Any]:
        """Fetch the shop record. Used to verify the token and API version."""
        data = await self._request("GET", "/shop.json")
        shop: dict[str, Any] = data.get("shop") or {}
        return shop

    async def mark_order_fulfilled(self, order_id: int | str) -> dict[str, Any]:
        """Set an order's fulfillment status to fulfilled."""
        logger.info("Marking order %s as fulfilled on %s", order_id, self.shop_domain)
        data = await self._request(
            "PUT",
            f"/orders/{order_id}.json",
            json={"order": {"id": order_id, "fulfillment_status": "fulfilled"}},
        )
        order: dict[str, Any] = data.get("order") or {}
        return order

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Issue one request and map transport/status failures to upstream errors."""
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(headers=self.headers, timeout=self.timeout) as client:
                response = await client.request(method, url, params=params, json=json)
        except httpx.TimeoutException as exc:
            raise UpstreamUnavailableError(
                f"Timed out after {self.timeout}s calling {self.shop_domain}"
            ) from exc
        except httpx.TransportError as exc:
            raise UpstreamUnavailableError(
                f"Could not connect to {self.shop_domain}: {exc.__class__.__name__}"
            ) from exc

        if not response.is_success:
            raise UpstreamRejectedError(response.status_code, self._error_body(response))

        try:
            data: dict[str, Any] = response.json()
        except ValueError as exc:
            raise UpstreamRejectedError(response.status_code, response.text) from exc
        return data

    def _error_body(self, response: httpx.Response) -> Any:
        """Decode an error response body, falling back to raw text."""
        try:
            return response.json()
        except ValueError:
            return response.text
