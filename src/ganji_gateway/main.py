"""Application entry point for the gateway server."""

from __future__ import annotations

import os

import uvicorn

from ganji_gateway.config.settings import AppConfig
from ganji_gateway.logging_config import configure_logging


def main() -> None:
    """Start the gateway server."""
    config = AppConfig()
    configure_logging(config.log_level)
    reload = os.getenv("GANJI_RELOAD", "false").lower() in ("1", "true", "yes")
    uvicorn.run(
        "ganji_gateway.api.app:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
        reload=reload,
        log_level=str(config.log_level).lower(),
    )


if __name__ == "__main__":
    main()
