"""Order lookup request and response schemas."""

from typing import Any, Literal

from order_tracker.schemas.common import BaseSchema


class OrderSearchRequest(BaseSchema):
    """Customer lookup request.

    Both fields are optional at the schema level so that a missing field is
    reported through the 400 envelope instead of FastAPI's 422.
    """

    order_number: str | None = None
    email: str | None = None


class CustomerSummary(BaseSchema):
    """Customer name and email as shown to the customer."""

    name: str
    email: str


class OrderLineItem(BaseSchema):
    """A single line item from an order."""

    title: str
    quantity: int
    price: str
    total_price: str


class ShippingLine(BaseSchema):
    """A shipping method charged on the order."""

    title: str
    price: str


class FulfillmentInfo(BaseSchema):
    """Fulfillment/tracking information for an order."""

    tracking_number: str | None = None
    tracking_url: str | None = None
    tracking_company: str | None = None
    status: str | None = None


class ResolvedOrder(BaseSchema):
    """Public projection of a Shopify order."""

    id: int | None = None
    order_number: int | None = None
    name: str | None = None
    email: str | None = None
    created_at: str | None = None
    total_price: str | None = None
    currency: str | None = None
    financial_status: str | None = None
    fulfillment_status: str | None = None
    coordinadora_tracking: str | None = None
    customer: CustomerSummary
    shipping_address: dict[str, Any] | None = None
    line_items: list[OrderLineItem] = []
    subtotal_price: str = "0.00"
    total_discounts: str = "0.00"
    total_tax: str = "0.00"
    shipping_lines: list[ShippingLine] = []
    fulfillments: list[FulfillmentInfo] = []


class OrderFoundResponse(BaseSchema):
    """Lookup result when an order matched."""

    success: Literal[True] = True
    order: ResolvedOrder


class OrderNotFoundResponse(BaseSchema):
    """Lookup result when no order matched. Returned with HTTP 200."""

    success: Literal[False] = False
    message: str


OrderSearchResponse = OrderFoundResponse | OrderNotFoundResponse


class OrderStatusUpdateRequest(BaseSchema):
    """Request to mark an order as fulfilled."""

    order_id: int | None = None


class OrderStatusUpdateResponse(BaseSchema):
    """Result of a fulfillment status update."""

    success: bool
    order_id: int
    fulfillment_status: str | None = None
    message: str
