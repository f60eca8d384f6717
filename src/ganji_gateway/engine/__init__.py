"""Service registry owning the chain services."""

from ganji_gateway.engine.client import GatewayEngine

__all__ = ["GatewayEngine"]
