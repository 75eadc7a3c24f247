"""Tests for order lookup API endpoints.

Covers POST /api/search-order and POST /api/update-status: success,
not found, validation, upstream errors.
"""

from typing import Any
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from order_tracker.core.exceptions import UpstreamRejectedError, UpstreamUnavailableError
from order_tracker.services.order_service import NOT_FOUND_MESSAGE
from tests.conftest import SHOPIFY_TEST_TOKEN


class TestSearchOrderEndpoint:
    """Tests for POST /api/search-order."""

    async def test_success_returns_order(
        self,
        client: AsyncClient,
        mock_shopify_client: AsyncMock,
        sample_shopify_order: dict[str, Any],
    ) -> None:
        """Matching order returns 200 with success=True and the projected order."""
        mock_shopify_client.get_orders_by_email.return_value = [sample_shopify_order]

        response = await client.post(
            "/api/search-order",
            json={"orderNumber": "#1001", "email": "customer@example.com"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        order = data["order"]
        assert order["name"] == "#1001"
        assert order["orderNumber"] == 1001
        assert order["coordinadoraTracking"] == "COORD123"
        assert order["customer"] == {"name": "Jane Doe", "email": "customer@example.com"}
        assert order["totalPrice"] == "79.98"
        assert order["lineItems"][0]["totalPrice"] == "69.98"
        assert order["shippingLines"] == [{"title": "Coordinadora", "price": "10.00"}]
        assert order["fulfillments"][0]["trackingUrl"].endswith("COORD123")

    async def test_end_to_end_hash_and_trailing_space(
        self, client: AsyncClient, mock_shopify_client: AsyncMock
    ) -> None:
        mock_shopify_client.get_orders_by_email.return_value = [
            {
                "name": "#1002",
                "order_number": 1002,
                "fulfillments": [{"tracking_number": "COORD123"}],
            }
        ]

        response = await client.post(
            "/api/search-order",
            json={"orderNumber": "#1002 ", "email": "a@b.com"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["order"]["coordinadoraTracking"] == "COORD123"
        mock_shopify_client.get_orders_by_email.assert_awaited_once_with("a@b.com")

    async def test_numeric_order_number_accepted(
        self,
        client: AsyncClient,
        mock_shopify_client: AsyncMock,
        sample_shopify_order: dict[str, Any],
    ) -> None:
        mock_shopify_client.get_orders_by_email.return_value = [sample_shopify_order]

        response = await client.post(
            "/api/search-order",
            json={"orderNumber": 1001, "email": "customer@example.com"},
        )

        assert response.status_code == 200
        assert response.json()["success"] is True

    async def test_not_found_is_200(
        self, client: AsyncClient, mock_shopify_client: AsyncMock
    ) -> None:
        """No orders for the email returns 200 with success=False, not 404."""
        mock_shopify_client.get_orders_by_email.return_value = []

        response = await client.post(
            "/api/search-order",
            json={"orderNumber": "1001", "email": "nobody@example.com"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": False, "message": NOT_FOUND_MESSAGE}

    @pytest.mark.parametrize(
        "body",
        [
            {"email": "customer@example.com"},
            {"orderNumber": "1001"},
            {"orderNumber": "", "email": "customer@example.com"},
            {"orderNumber": "1001", "email": ""},
            {"orderNumber": "1001", "email": "   "},
            {"orderNumber": " # ", "email": "customer@example.com"},
            {},
        ],
    )
    async def test_missing_fields_return_400(
        self, client: AsyncClient, mock_shopify_client: AsyncMock, body: dict[str, Any]
    ) -> None:
        response = await client.post("/api/search-order", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "Order number and email are required."
        mock_shopify_client.get_orders_by_email.assert_not_called()

    async def test_malformed_body_returns_400(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/search-order",
            content="not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_upstream_rejected_passes_status_through(
        self, client: AsyncClient, mock_shopify_client: AsyncMock
    ) -> None:
        mock_shopify_client.get_orders_by_email.side_effect = UpstreamRejectedError(
            401, {"errors": "[API] Invalid API key or access token"}
        )

        response = await client.post(
            "/api/search-order",
            json={"orderNumber": "1001", "email": "customer@example.com"},
        )

        assert response.status_code == 401
        data = response.json()
        assert data["success"] is False
        assert data["error"]["upstreamStatus"] == 401
        assert "token" in data["error"]["hint"].lower()
        assert SHOPIFY_TEST_TOKEN not in response.text

    @pytest.mark.parametrize("status_code", [401, 404, 429])
    async def test_upstream_errors_share_shape(
        self, client: AsyncClient, mock_shopify_client: AsyncMock, status_code: int
    ) -> None:
        mock_shopify_client.get_orders_by_email.side_effect = UpstreamRejectedError(
            status_code, {"errors": "Not Found"}
        )

        response = await client.post(
            "/api/search-order",
            json={"orderNumber": "1001", "email": "customer@example.com"},
        )

        assert response.status_code == status_code
        data = response.json()
        assert set(data) == {"success", "message", "error"}
        assert set(data["error"]) == {"upstreamStatus", "upstreamError", "hint"}

    async def test_upstream_unavailable_returns_503(
        self, client: AsyncClient, mock_shopify_client: AsyncMock
    ) -> None:
        mock_shopify_client.get_orders_by_email.side_effect = UpstreamUnavailableError(
            "Timed out after 5.0s calling test-store.myshopify.com"
        )

        response = await client.post(
            "/api/search-order",
            json={"orderNumber": "1001", "email": "customer@example.com"},
        )

        assert response.status_code == 503
        data = response.json()
        assert data["success"] is False
        assert "Timed out" in data["error"]["reason"]

    @pytest.mark.parametrize("upstream_status", [200, 301, 302])
    async def test_non_error_upstream_status_maps_to_502(
        self, client: AsyncClient, mock_shopify_client: AsyncMock, upstream_status: int
    ) -> None:
        mock_shopify_client.get_orders_by_email.side_effect = UpstreamRejectedError(
            upstream_status, "<html>Redirecting</html>"
        )

        response = await client.post(
            "/api/search-order",
            json={"orderNumber": "1001", "email": "customer@example.com"},
        )

        assert response.status_code == 502
        assert "location" not in response.headers
        data = response.json()
        assert data["success"] is False
        assert data["error"]["upstreamStatus"] == upstream_status
        assert data["error"]["upstreamError"] == "<html>Redirecting</html>"
        assert data["error"]["hint"]

    async def test_request_id_header_echoed(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/search-order",
            json={"orderNumber": "1001", "email": "customer@example.com"},
            headers={"X-Request-ID": "abc123"},
        )

        assert response.headers["X-Request-ID"] == "abc123"


class TestUpdateStatusEndpoint:
    """Tests for POST /api/update-status."""

    async def test_disabled_by_default(
        self, client: AsyncClient, mock_shopify_client: AsyncMock
    ) -> None:
        response = await client.post("/api/update-status", json={"orderId": 42})

        assert response.status_code == 404
        assert response.json()["success"] is False
        mock_shopify_client.mark_order_fulfilled.assert_not_called()

    async def test_marks_order_fulfilled(
        self,
        client: AsyncClient,
        mock_shopify_client: AsyncMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr("order_tracker.core.config.settings.enable_status_updates", True)
        mock_shopify_client.mark_order_fulfilled.return_value = {
            "id": 42,
            "fulfillment_status": "fulfilled",
        }

        response = await client.post("/api/update-status", json={"orderId": 42})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["orderId"] == 42
        assert data["fulfillmentStatus"] == "fulfilled"

    async def test_missing_order_id_returns_400(
        self,
        client: AsyncClient,
        mock_shopify_client: AsyncMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr("order_tracker.core.config.settings.enable_status_updates", True)

        response = await client.post("/api/update-status", json={})

        assert response.status_code == 400
        assert response.json()["success"] is False
        mock_shopify_client.mark_order_fulfilled.assert_not_called()
