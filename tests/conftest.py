"""Pytest configuration and fixtures for the Order Tracker test suite.

Provides:
- Shopify settings pointed at a fake test store
- Disabled rate limiting
- A mocked ShopifyClient injected through FastAPI dependency overrides
- Mocked httpx.AsyncClient for ShopifyClient unit tests
- Sample Shopify order payloads
"""

from collections.abc import AsyncGenerator, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr

from order_tracker.core.config import ShopifyConfig
from order_tracker.core.deps import get_shopify_client
from order_tracker.core.rate_limit import limiter
from order_tracker.integrations.shopify.client import ShopifyClient
from order_tracker.main import app

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
SHOPIFY_TEST_SHOP = "test-store.myshopify.com"
SHOPIFY_TEST_TOKEN = "shpat_test_token_0123456789"
SHOPIFY_TEST_API_VERSION = "2024-10"

# ---------------------------------------------------------------------------
# Disable rate limiting globally for tests
# ---------------------------------------------------------------------------
limiter.enabled = False


@pytest.fixture(autouse=True)
def set_shopify_test_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure Shopify settings are set for all tests.

    This is autouse=True so all tests have consistent Shopify config.
    """
    monkeypatch.setattr("order_tracker.core.config.settings.shopify_domain", SHOPIFY_TEST_SHOP)
    monkeypatch.setattr(
        "order_tracker.core.config.settings.shopify_access_token", SecretStr(SHOPIFY_TEST_TOKEN)
    )
    monkeypatch.setattr(
        "order_tracker.core.config.settings.shopify_api_version", SHOPIFY_TEST_API_VERSION
    )
    monkeypatch.setattr("order_tracker.core.config.settings.enable_diagnostics", False)
    monkeypatch.setattr("order_tracker.core.config.settings.enable_status_updates", False)


@pytest.fixture
def shopify_config() -> ShopifyConfig:
    return ShopifyConfig(
        domain=SHOPIFY_TEST_SHOP,
        access_token=SecretStr(SHOPIFY_TEST_TOKEN),
        api_version=SHOPIFY_TEST_API_VERSION,
        timeout=5.0,
    )


# ---------------------------------------------------------------------------
# Shopify client mocks
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_shopify_client() -> AsyncMock:
    """A ShopifyClient stand-in; tests set return values per method."""
    client = AsyncMock(spec=ShopifyClient)
    client.get_orders_by_email.return_value = []
    return client


@pytest.fixture
def mock_shopify_http() -> Generator[AsyncMock, None, None]:
    """Mock httpx.AsyncClient for ShopifyClient unit tests.

    Provides fine-grained control over HTTP responses for testing the client.
    """
    with patch("order_tracker.integrations.shopify.client.httpx.AsyncClient") as mock_class:
        mock_client = AsyncMock()
        mock_class.return_value.__aenter__.return_value = mock_client

        mock_response = MagicMock()
        mock_response.is_success = True
        mock_response.status_code = 200
        mock_response.json.return_value = {"orders": []}
        mock_client.request.return_value = mock_response

        yield mock_client


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(mock_shopify_client: AsyncMock) -> AsyncGenerator[AsyncClient, None]:
    """Async test client with the Shopify client dependency overridden."""
    app.dependency_overrides[get_shopify_client] = lambda: mock_shopify_client

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def plain_client() -> AsyncGenerator[AsyncClient, None]:
    """Minimal async test client with NO dependency overrides."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ---------------------------------------------------------------------------
# Sample payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_shopify_order() -> dict[str, Any]:
    """A sample Shopify order JSON as returned by the Admin API orders.json endpoint."""
    return {
        "id": 5551234567890,
        "name": "#1001",
        "order_number": 1001,
        "email": "customer@example.com",
        "created_at": "2024-06-15T10:30:00-05:00",
        "total_price": "79.98",
        "subtotal_price": "69.98",
        "total_discounts": "0.00",
        "total_tax": "10.00",
        "currency": "COP",
        "financial_status": "paid",
        "fulfillment_status": "fulfilled",
        "customer": {
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "customer@example.com",
        },
        "shipping_address": {
            "address1": "Calle 10 # 43-12",
            "city": "Medellin",
            "province": "Antioquia",
            "country": "Colombia",
        },
        "line_items": [
            {
                "title": "Widget Pro",
                "quantity": 2,
                "price": "34.99",
            },
        ],
        "shipping_lines": [
            {"title": "Coordinadora", "price": "10.00", "code": "COORD", "source": "shopify"},
        ],
        "fulfillments": [
            {
                "id": 4401,
                "status": "success",
                "tracking_number": "COORD123",
                "tracking_url": "https://coordinadora.com/rastreo/?guia=COORD123",
                "tracking_company": "Coordinadora",
                "tracking_urls": ["https://coordinadora.com/rastreo/?guia=COORD123"],
            },
        ],
        "note": None,
        "note_attributes": [],
        "tags": "",
    }
