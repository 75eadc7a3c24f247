"""Pydantic schemas for request/response validation."""

from order_tracker.schemas.common import ErrorResponse, HealthResponse

__all__ = [
    "HealthResponse",
    "ErrorResponse",
]
