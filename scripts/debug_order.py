"""Inspect a single Shopify order to find where its tracking number lives.

Fetches one order by exact name and email, prints its fulfillments, note,
note attributes, tags and shipping lines, flags anything that looks like a
Coordinadora tracking number, and saves the raw order JSON for manual review.

Usage:
    uv run python -m scripts.debug_order 4715ECOMM customer@example.com
    uv run python -m scripts.debug_order '#1001' customer@example.com --no-save
"""

import argparse
import asyncio
import json
import re
import sys
from pathlib import Path
from typing import Any

from order_tracker.core.config import ShopifyConfig, settings
from order_tracker.core.exceptions import (
    ConfigurationError,
    OrderQueryValidationError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)
from order_tracker.core.logging_config import mask_secret
from order_tracker.integrations.shopify.client import ShopifyClient

CARRIER = "coordinadora"
NOTE_TRACKING = re.compile(r"Seguimiento de Coordinadora:\s*(\d+)", re.IGNORECASE)
TAG_TRACKING = re.compile(r"coordinadora[:\s]*(\d+)", re.IGNORECASE)
ATTRIBUTE_KEYWORDS = ("coordinadora", "guia", "tracking")

RULE = "=" * 60
SUBRULE = "-" * 60


def find_note_tracking(note: str | None) -> str | None:
    """Tracking number written into the order note by the carrier app."""
    match = NOTE_TRACKING.search(note or "")
    return match.group(1) if match else None


def find_tag_tracking(tags: str | None) -> str | None:
    match = TAG_TRACKING.search(tags or "")
    return match.group(1) if match else None


def is_tracking_attribute(name: str | None) -> bool:
    lowered = (name or "").lower()
    return any(keyword in lowered for keyword in ATTRIBUTE_KEYWORDS)


def mentions_carrier(value: str | None) -> bool:
    return CARRIER in (value or "").lower()


def collect_tracking_numbers(order: dict[str, Any]) -> list[tuple[str, str]]:
    """Every tracking number found, as (source, number) pairs."""
    found = [
        ("fulfillments", f["tracking_number"])
        for f in order.get("fulfillments") or []
        if f.get("tracking_number")
    ]
    note_tracking = find_note_tracking(order.get("note"))
    if note_tracking:
        found.append(("note", note_tracking))
    return found


def print_report(order: dict[str, Any]) -> None:
    customer = order.get("customer") or {}
    print("ORDER FOUND\n")
    print(RULE)
    print(f"Order: {order.get('name')} (ID: {order.get('id')})")
    print(f"Customer: {customer.get('first_name') or ''} {customer.get('last_name') or ''}".rstrip())
    print(f"Email: {order.get('email')}")
    print(f"Status: {order.get('fulfillment_status') or 'unfulfilled'}")
    print(RULE + "\n")

    print("FULFILLMENTS:")
    print(SUBRULE)
    fulfillments = order.get("fulfillments") or []
    if not fulfillments:
        print("  No fulfillments")
    for index, f in enumerate(fulfillments, start=1):
        print(f"\nFulfillment #{index}:")
        print(f"  ID: {f.get('id')}")
        print(f"  Status: {f.get('status')}")
        print(f"  Tracking Number: {f.get('tracking_number') or 'N/A'}")
        print(f"  Tracking Company: {f.get('tracking_company') or 'N/A'}")
        print(f"  Tracking URL: {f.get('tracking_url') or 'N/A'}")
        print(f"  Tracking URLs: {json.dumps(f.get('tracking_urls'))}")
        if mentions_carrier(f.get("tracking_company")):
            print("  * Coordinadora detected")
    print("\n" + SUBRULE + "\n")

    print("ORDER NOTE:")
    print(SUBRULE)
    note = order.get("note")
    if note:
        print(note)
        note_tracking = find_note_tracking(note)
        if note_tracking:
            print(f"\n* Tracking number found in note: {note_tracking}")
    else:
        print("  No note")
    print("\n" + SUBRULE + "\n")

    print("NOTE ATTRIBUTES:")
    print(SUBRULE)
    attributes = order.get("note_attributes") or []
    if not attributes:
        print("  No note attributes")
    for index, attr in enumerate(attributes, start=1):
        print(f"  {index}. {attr.get('name')}: {attr.get('value')}")
        if is_tracking_attribute(attr.get("name")):
            print("     * Possible tracking number")
    print("\n" + SUBRULE + "\n")

    print("TAGS:")
    print(SUBRULE)
    tags = order.get("tags")
    if tags:
        print(f"  {tags}")
        tag_tracking = find_tag_tracking(tags)
        if tag_tracking:
            print(f"  * Tracking number found in tags: {tag_tracking}")
    else:
        print("  No tags")
    print("\n" + SUBRULE + "\n")

    print("SHIPPING LINES:")
    print(SUBRULE)
    shipping_lines = order.get("shipping_lines") or []
    if not shipping_lines:
        print("  No shipping lines")
    for index, line in enumerate(shipping_lines, start=1):
        print(f"\nShipping Line #{index}:")
        print(f"  Title: {line.get('title')}")
        print(f"  Code: {line.get('code') or 'N/A'}")
        print(f"  Source: {line.get('source') or 'N/A'}")
        print(f"  Price: {line.get('price')}")
        if mentions_carrier(line.get("title")):
            print("  * Coordinadora detected")
    print("\n" + SUBRULE + "\n")


def print_summary(order: dict[str, Any]) -> None:
    print(RULE)
    print("SEARCH SUMMARY:")
    print(RULE)
    found = collect_tracking_numbers(order)
    for source, number in found:
        print(f"Tracking found in {source}: {number}")
    if not found:
        print("No Coordinadora tracking number found")
        print("  Review the saved JSON to locate it manually")


def save_order(order: dict[str, Any], output_dir: Path) -> Path:
    path = output_dir / f"order-{order.get('order_number')}-debug.json"
    path.write_text(json.dumps(order, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


async def debug_order(
    config: ShopifyConfig,
    order_number: str,
    email: str,
    output_dir: Path | None,
) -> int:
    """Run the lookup and print the report. Returns a process exit code."""
    print(f"Looking up order {order_number} for {email}\n")
    client = ShopifyClient(config)
    try:
        orders = await client.get_orders_by_email(email, name=order_number)
    except UpstreamRejectedError as exc:
        print(f"ERROR: Shopify responded with HTTP {exc.status_code}", file=sys.stderr)
        print(f"  Hint: {exc.hint}", file=sys.stderr)
        print(f"  Body: {json.dumps(exc.body)}", file=sys.stderr)
        return 1
    except (OrderQueryValidationError, UpstreamUnavailableError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if not orders:
        print("Order not found")
        return 1

    order = orders[0]
    print_report(order)
    if output_dir is not None:
        path = save_order(order, output_dir)
        print(f"Full JSON saved to: {path}\n")
    print_summary(order)
    return 0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Inspect a Shopify order to locate its tracking number.",
    )
    parser.add_argument("order_number", help="Order name as shown in Shopify, e.g. 4715ECOMM")
    parser.add_argument("email", help="Email the order was placed with")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory for the saved order JSON (default: current directory)",
    )
    parser.add_argument("--no-save", action="store_true", help="Do not write the order JSON")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    print("Order debug: locate Coordinadora tracking number\n")
    print(f"Domain: {settings.shopify_domain or 'MISSING'}")
    print(f"API Version: {settings.shopify_api_version}")
    print(f"Token: {mask_secret(settings.shopify_access_token)}")
    print("\n" + RULE + "\n")

    try:
        config = settings.shopify_config()
    except ConfigurationError as exc:
        print(f"ERROR: {exc}. Set them in the environment or .env", file=sys.stderr)
        return 1

    output_dir = None if args.no_save else args.output_dir
    return asyncio.run(debug_order(config, args.order_number, args.email, output_dir))


if __name__ == "__main__":
    sys.exit(main())
