"""Exception types raised by the order lookup flow."""

from typing import Any

_STATUS_HINTS = {
    401: "Access token is invalid or expired. Regenerate it with read_orders scope.",
    403: "Access token lacks the required scopes (read_orders, read_customers).",
    404: "Endpoint not found. Check the store domain and API version.",
    429: "Shopify rate limit reached. Retry after a short delay.",
}


class OrderTrackerError(Exception):
    """Base class for all application errors."""


class ConfigurationError(OrderTrackerError):
    """Required configuration is missing or invalid."""


class OrderQueryValidationError(OrderTrackerError):
    """A lookup request is missing a required field."""


class UpstreamError(OrderTrackerError):
    """The Shopify Admin API call failed."""


class UpstreamUnavailableError(UpstreamError):
    """The Shopify Admin API could not be reached (timeout, connection refused)."""


class UpstreamRejectedError(UpstreamError):
    """The Shopify Admin API answered with an error status or an unreadable body."""

    def __init__(self, status_code: int, body: Any = None) -> None:
        super().__init__(f"Shopify responded with HTTP {status_code}")
        self.status_code = status_code
        self.body = body

    @property
    def response_status(self) -> int:
        """Status to answer the caller with: 4xx/5xx pass through, anything else is 502."""
        return self.status_code if self.status_code >= 400 else 502

    @property
    def hint(self) -> str:
        """Operator-facing explanation of the status code."""
        if self.status_code in _STATUS_HINTS:
            return _STATUS_HINTS[self.status_code]
        if self.status_code >= 500:
            return "Shopify returned a server error. Try again later."
        if 300 <= self.status_code < 400:
            return (
                "Shopify redirected the request. "
                "SHOPIFY_DOMAIN must be the *.myshopify.com domain."
            )
        if self.status_code < 300:
            return "Shopify returned a body that is not JSON. Check the store domain."
        return "Unexpected response from Shopify. Check the domain and token."
