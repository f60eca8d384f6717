"""FastAPI application factory."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from ganji_gateway.api.middleware.cors import setup_cors
from ganji_gateway.api.middleware.ratelimit import RateLimitMiddleware, SlidingWindowRateLimiter
from ganji_gateway.api.responses import error_response, utc_timestamp
from ganji_gateway.api.v1 import v1_router
from ganji_gateway.config.settings import AppConfig
from ganji_gateway.engine.client import GatewayEngine
from ganji_gateway.errors.gateway_errors import GatewayError
from ganji_gateway.logging_config import configure_logging
from ganji_gateway.metrics.collector import GatewayMetrics
from ganji_gateway.metrics.middleware import PrometheusMiddleware

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

_GENERIC_ERROR = "Internal Server Error"

# Bad request, missing API key, throttled; anything else surfaces as 500
_REJECTION_STATUSES = frozenset({400, 401, 429})


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle hooks.

    Connects the chain services on startup and closes them on exit.
    """
    config: AppConfig = app.state.config
    engine = GatewayEngine(config, metrics=app.state.metrics)

    if not config.auth.api_key:
        logger.warning("No API key configured; every /api/v1 request will be rejected")

    try:
        await engine.initialize()
        app.state.engine = engine
        logger.info("Gateway started (environment=%s)", config.environment)
        yield
    finally:
        await engine.close()
        app.state.engine = None
        logger.info("Gateway shut down")


def _install_error_handlers(app: FastAPI, config: AppConfig) -> None:
    @app.exception_handler(GatewayError)
    async def _gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        status = exc.status_code if exc.status_code in _REJECTION_STATUSES else 500
        if status == 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        message = _GENERIC_ERROR if status == 500 and config.is_production else exc.message
        return error_response(status, message, code=exc.code)

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.debug("Validation failed for %s: %s", request.url.path, exc.errors())
        return error_response(
            400,
            "Validation Error",
            code="validation-error",
            details=jsonable_encoder(exc.errors()),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = _GENERIC_ERROR if config.is_production else str(exc)
        return error_response(500, message)


def create_app(*, config: AppConfig | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        config: Optional AppConfig. If *None*, a default config is created
            from environment variables.
    """
    if config is None:
        config = AppConfig()
    configure_logging(config.log_level)

    app = FastAPI(
        title="ganji-gateway",
        version=config.version,
        description="Litecoin asset notarization and Solana license gateway",
        lifespan=_lifespan,
    )

    # Store config on app.state for lifespan access
    app.state.config = config
    app.state.started_at = time.monotonic()
    app.state.metrics = GatewayMetrics() if config.metrics.enabled else None
    app.state.rate_limiter = SlidingWindowRateLimiter(
        config.rate_limit.max_requests,
        config.rate_limit.window_seconds,
    )

    # -- Middleware (last added runs first) --
    if config.rate_limit.enabled:
        app.add_middleware(RateLimitMiddleware, limiter=app.state.rate_limiter)
    if app.state.metrics is not None:
        app.add_middleware(PrometheusMiddleware, registry=app.state.metrics.registry)
    setup_cors(app)

    _install_error_handlers(app, config)

    # -- Base routes --
    @app.get("/health", tags=["base"])
    async def health() -> dict[str, Any]:
        """Liveness plus per-chain client and signer status."""
        engine: GatewayEngine | None = getattr(app.state, "engine", None)
        services = (
            await engine.health_check() if engine is not None else {"engine": "not_initialized"}
        )
        return {
            "status": "ok",
            "uptime": time.monotonic() - app.state.started_at,
            "timestamp": utc_timestamp(),
            "version": config.version,
            "services": services,
        }

    @app.get("/metrics", tags=["base"], include_in_schema=False)
    async def metrics_endpoint() -> Response:
        """Prometheus metrics endpoint."""
        registry = app.state.metrics.registry if app.state.metrics is not None else None
        body = generate_latest(registry) if registry else generate_latest()
        return Response(
            content=body,
            media_type="text/plain; version=0.0.4; charset=utf-8",
        )

    # -- Mount v1 API --
    app.include_router(v1_router)

    return app
