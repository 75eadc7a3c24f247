"""Rate limiting configuration using slowapi."""

from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from starlette.requests import Request


def _get_real_client_ip(request: Request) -> str:
    """Extract the real client IP behind Cloudflare / Vercel / reverse proxy."""
    return (
        request.headers.get("CF-Connecting-IP")
        or request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
        or (request.client.host if request.client else "127.0.0.1")
    )


limiter = Limiter(key_func=_get_real_client_ip)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return the standard error envelope when a client exceeds its limit."""
    response = JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": "Too many lookups. Please wait a minute and try again.",
            "error": {"limit": exc.detail},
        },
    )
    return request.app.state.limiter._inject_headers(  # type: ignore[no-any-return]
        response, getattr(request.state, "view_rate_limit", None)
    )
