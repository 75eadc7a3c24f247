"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from order_tracker.api.router import api_router
from order_tracker.core.config import settings
from order_tracker.core.exceptions import (
    ConfigurationError,
    OrderQueryValidationError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)
from order_tracker.core.logging_config import (
    generate_request_id,
    mask_secret,
    request_id_var,
    setup_logging,
)
from order_tracker.core.rate_limit import limiter, rate_limit_exceeded_handler
from order_tracker.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def _envelope(status_code: int, message: str, error: Any = None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(by_alias=True, exclude_none=True)),
    )


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    setup_logging(debug=settings.debug)
    logger.info("Starting %s v%s", settings.project_name, settings.version)
    logger.info("Environment: %s", settings.environment)
    logger.info(
        "Shopify domain=%r api_version=%s token=%s",
        settings.shopify_domain,
        settings.shopify_api_version,
        mask_secret(settings.shopify_access_token),
    )
    # Fail fast: a missing credential is a deployment fault, not a per-request error
    settings.shopify_config()
    yield
    logger.info("Shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    # Sentry/GlitchTip init (before middleware)
    if settings.sentry_dsn:
        import sentry_sdk

        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,
        )

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        openapi_url=f"{settings.api_prefix}/openapi.json",
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        lifespan=lifespan,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]
    app.add_middleware(SlowAPIMiddleware)

    # CORS: the store's own domain and CORS_ORIGINS are listed explicitly;
    # storefront previews (*.myshopify.com) and Vercel deployments match the regex.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_origin_regex=settings.cors_origin_regex or None,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    # Request ID + request log middleware
    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next: Any) -> Response:
        rid = request.headers.get("X-Request-ID") or generate_request_id()
        request_id_var.set(rid)
        logger.info("%s %s", request.method, request.url.path)
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

    # Include API routes
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.exception_handler(OrderQueryValidationError)
    async def validation_error_handler(
        _request: Request, exc: OrderQueryValidationError
    ) -> JSONResponse:
        return _envelope(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed bodies get the same 400 envelope as missing fields."""
        details = [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]
        return _envelope(400, "Invalid request body.", error=details)

    @app.exception_handler(UpstreamUnavailableError)
    async def upstream_unavailable_handler(
        _request: Request, exc: UpstreamUnavailableError
    ) -> JSONResponse:
        logger.warning("Shopify unavailable: %s", exc)
        return _envelope(
            503,
            "The store is temporarily unreachable. Please try again later.",
            error={"reason": str(exc)},
        )

    @app.exception_handler(UpstreamRejectedError)
    async def upstream_rejected_handler(
        _request: Request, exc: UpstreamRejectedError
    ) -> JSONResponse:
        logger.warning(
            "Shopify rejected request: HTTP %d (%s) body=%s",
            exc.status_code,
            exc.hint,
            exc.body,
        )
        return _envelope(
            exc.response_status,
            "Error querying the order on Shopify.",
            error={
                "upstreamStatus": exc.status_code,
                "upstreamError": exc.body,
                "hint": exc.hint,
            },
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        _request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        logger.error("Configuration error: %s", exc)
        return _envelope(500, "Server configuration error.")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _envelope(exc.status_code, str(exc.detail))

    # Global exception handler to ensure CORS headers are present on 500 errors
    @app.exception_handler(Exception)
    async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
        """Handle unhandled exceptions with proper JSON response."""
        logger.exception("Unhandled exception: %s", exc)
        return _envelope(500, "Internal server error")

    # Redirect /docs to prefixed docs URL
    @app.get("/docs", include_in_schema=False)
    async def docs_redirect() -> RedirectResponse:
        return RedirectResponse(url=f"{settings.api_prefix}/docs")

    # Landing page with the lookup form
    @app.get("/", include_in_schema=False)
    async def root() -> FileResponse:
        return FileResponse(STATIC_DIR / "index.html")

    return app


app = create_app()
