"""Common Pydantic schemas used across the API."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with common configuration.

    Fields are snake_case in Python and camelCase on the wire, matching what
    the storefront widget sends and expects.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class HealthResponse(BaseSchema):
    """Health check response schema."""

    status: str
    version: str
    environment: str
    shopify_configured: bool
    shopify_domain: str | None = None
    api_version: str
    timestamp: str


class ErrorResponse(BaseSchema):
    """Error envelope returned for every failed request."""

    success: Literal[False] = False
    message: str
    error: Any | None = None
