"""Schemas for the operator diagnostics endpoints."""

from typing import Any, Literal

from order_tracker.schemas.common import BaseSchema


class TokenCheckResponse(BaseSchema):
    """Result of calling shop.json with the configured token."""

    success: bool
    message: str
    shop: str
    plan: str
    token_length: int


class ApiVersionResult(BaseSchema):
    """Outcome of probing one Admin API version."""

    status: Literal["OK", "FAILED"]
    code: int | str | None = None
    shop: str | None = None
    error: Any | None = None


class ApiVersionsResponse(BaseSchema):
    success: bool
    domain: str
    token_configured: bool
    results: dict[str, ApiVersionResult]


class OrderSummary(BaseSchema):
    id: int | None = None
    name: str | None = None
    order_number: int | None = None
    email: str | None = None
    created_at: str | None = None
    total_price: str | None = None


class OrderListResponse(BaseSchema):
    """Orders on file for an email, trimmed to identifying fields."""

    success: bool
    count: int
    orders: list[OrderSummary]
