"""FastAPI dependency injection helpers.

Provides ``Depends()``-compatible callables for engine access and
authentication in route handlers.

Usage in a route::

    @router.get("/network")
    async def get_network(
        engine: Annotated[GatewayEngine, Depends(get_engine)],
    ) -> ...:
        ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Header, Request

from ganji_gateway.api.middleware.auth import AUTH_HEADER_API_KEY, authenticate_api_key
from ganji_gateway.config.settings import AppConfig  # noqa: TC001
from ganji_gateway.engine.client import GatewayEngine  # noqa: TC001
from ganji_gateway.errors.definitions import ErrEngineNotReady

# ---------------------------------------------------------------------------
# Engine / config
# ---------------------------------------------------------------------------


def get_engine(request: Request) -> GatewayEngine:
    """Retrieve the engine from ``app.state``.

    The engine is stored on ``app.state.engine`` during lifespan startup.

    Raises:
        GatewayError: If the engine is not initialized.
    """
    engine: GatewayEngine | None = getattr(request.app.state, "engine", None)
    if engine is None:
        raise ErrEngineNotReady
    return engine


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


def require_api_key(
    request: Request,
    x_api_key: Annotated[str, Header(alias=AUTH_HEADER_API_KEY)] = "",
) -> None:
    """Dependency that requires a valid ``x-api-key`` header."""
    client = request.client.host if request.client else ""
    authenticate_api_key(get_config(request).auth, x_api_key, client=client)
