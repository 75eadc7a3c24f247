"""Order lookup: match a customer's order number and project the public view."""

import logging
import re
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from order_tracker.core.exceptions import OrderQueryValidationError
from order_tracker.integrations.shopify.client import ShopifyClient
from order_tracker.schemas.order import (
    CustomerSummary,
    FulfillmentInfo,
    OrderFoundResponse,
    OrderLineItem,
    OrderNotFoundResponse,
    OrderSearchResponse,
    OrderStatusUpdateResponse,
    ResolvedOrder,
    ShippingLine,
)

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "order not found for the given number and email"
MISSING_FIELDS_MESSAGE = "Order number and email are required."
UNAVAILABLE = "unavailable"

_NOISE = re.compile(r"[#\s]")
_CENTS = Decimal("0.01")


def normalize_order_number(value: str) -> str:
    """Strip every '#' and whitespace character, e.g. '# 1002 ' -> '1002'."""
    return _NOISE.sub("", value).strip()


def find_matching_order(
    candidates: Iterable[dict[str, Any]], requested_order_number: str
) -> dict[str, Any] | None:
    """Return the first candidate whose name or order_number matches.

    A candidate matches when its normalized ``name`` equals the normalized
    request, OR its numeric ``order_number`` rendered as a string does. Stores
    with custom name prefixes still match on the number. If several orders
    match, the first in upstream order wins.
    """
    target = normalize_order_number(requested_order_number)
    for order in candidates:
        name = normalize_order_number(order.get("name") or "")
        number = order.get("order_number")
        if name == target or (number is not None and str(number) == target):
            return order
    return None


def extract_tracking_number(fulfillments: Iterable[dict[str, Any]]) -> str | None:
    """Return the tracking number of the last fulfillment that has one."""
    tracking = None
    for fulfillment in fulfillments:
        if fulfillment.get("tracking_number"):
            tracking = fulfillment["tracking_number"]
    return tracking


def line_total(price: Any, quantity: int) -> str:
    """Unit price times quantity, rounded half-up to cents."""
    try:
        unit = Decimal(str(price))
    except InvalidOperation:
        return "0.00"
    return str((unit * quantity).quantize(_CENTS, rounding=ROUND_HALF_UP))


def build_resolved_order(order: dict[str, Any]) -> ResolvedOrder:
    """Project a raw Shopify order into the customer-facing shape."""
    fulfillments = order.get("fulfillments") or []

    customer = order.get("customer")
    if customer:
        full_name = f"{customer.get('first_name') or ''} {customer.get('last_name') or ''}".strip()
        customer_summary = CustomerSummary(
            name=full_name or UNAVAILABLE,
            email=customer.get("email") or UNAVAILABLE,
        )
    else:
        customer_summary = CustomerSummary(name=UNAVAILABLE, email=UNAVAILABLE)

    line_items = []
    for item in order.get("line_items") or []:
        quantity = int(item.get("quantity") or 0)
        price = item.get("price") or "0.00"
        line_items.append(
            OrderLineItem(
                title=item.get("title") or "",
                quantity=quantity,
                price=price,
                total_price=line_total(price, quantity),
            )
        )

    return ResolvedOrder(
        id=order.get("id"),
        order_number=order.get("order_number"),
        name=order.get("name"),
        email=order.get("email"),
        created_at=order.get("created_at"),
        total_price=order.get("total_price"),
        currency=order.get("currency"),
        financial_status=order.get("financial_status"),
        fulfillment_status=order.get("fulfillment_status"),
        coordinadora_tracking=extract_tracking_number(fulfillments),
        customer=customer_summary,
        shipping_address=order.get("shipping_address") or None,
        line_items=line_items,
        subtotal_price=order.get("subtotal_price") or "0.00",
        total_discounts=order.get("total_discounts") or "0.00",
        total_tax=order.get("total_tax") or "0.00",
        shipping_lines=[
            ShippingLine(title=line.get("title") or "Shipping", price=line.get("price") or "0.00")
            for line in order.get("shipping_lines") or []
        ],
        fulfillments=[
            FulfillmentInfo(
                tracking_number=f.get("tracking_number"),
                tracking_url=f.get("tracking_url"),
                tracking_company=f.get("tracking_company"),
                status=f.get("status"),
            )
            for f in fulfillments
        ],
    )


def resolve(
    candidates: Sequence[dict[str, Any]], requested_order_number: str
) -> OrderSearchResponse:
    """Match ``requested_order_number`` against candidates and project the hit."""
    order = find_matching_order(candidates, requested_order_number)
    if order is None:
        return OrderNotFoundResponse(message=NOT_FOUND_MESSAGE)
    return OrderFoundResponse(order=build_resolved_order(order))


class OrderService:
    """Customer order lookups against a single Shopify store."""

    def __init__(self, client: ShopifyClient) -> None:
        self.client = client

    async def search(self, order_number: str | None, email: str | None) -> OrderSearchResponse:
        """Look up a customer's order by number and email.

        Args:
            order_number: Order number as typed by the customer ('#1001', '1001').
            email: Email the order was placed with.

        Returns:
            OrderFoundResponse on a match, OrderNotFoundResponse otherwise.

        Raises:
            OrderQueryValidationError: If either field is missing or empty.
            UpstreamError: If Shopify could not be reached or rejected the call.
        """
        if not normalize_order_number(order_number or "") or not (email or "").strip():
            raise OrderQueryValidationError(MISSING_FIELDS_MESSAGE)

        candidates = await self.client.get_orders_by_email(email)
        result = resolve(candidates, order_number)

        if isinstance(result, OrderFoundResponse):
            logger.info("Order %s matched %s", order_number, result.order.name)
        else:
            logger.info(
                "Order %s not found among %d candidates (%s)",
                order_number,
                len(candidates),
                ", ".join(str(o.get("name")) for o in candidates) or "none",
            )
        return result

    async def mark_fulfilled(self, order_id: int | None) -> OrderStatusUpdateResponse:
        """Mark an order as fulfilled on Shopify."""
        if not order_id:
            raise OrderQueryValidationError("Order ID is required.")

        order = await self.client.mark_order_fulfilled(order_id)
        return OrderStatusUpdateResponse(
            success=True,
            order_id=order_id,
            fulfillment_status=order.get("fulfillment_status"),
            message="Order marked as fulfilled.",
        )
