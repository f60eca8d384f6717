"""GatewayEngine — central engine client owning the chain services."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ganji_gateway.config.settings import Network

if TYPE_CHECKING:
    from ganji_gateway.config.settings import AppConfig
    from ganji_gateway.litecoin.service import LitecoinService
    from ganji_gateway.metrics.collector import GatewayMetrics
    from ganji_gateway.solana.service import SolanaService

logger = logging.getLogger(__name__)

# Error messages
_ERR_NOT_INITIALIZED = "Engine not initialized. Call initialize() first."


class GatewayEngine:
    """Central engine that owns the Litecoin and Solana services.

    Provides lifecycle management and service registry pattern. Route
    handlers reach chain services through the accessors below; nothing
    else holds a reference to the RPC clients.
    """

    def __init__(self, config: AppConfig, *, metrics: GatewayMetrics | None = None) -> None:
        """Initialize engine with configuration.

        Args:
            config: Application configuration with chain settings.
            metrics: Optional metrics sink shared with the HTTP layer.
        """
        self._config = config
        self._metrics = metrics
        self._initialized = False

        self._litecoin: LitecoinService | None = None
        self._solana: SolanaService | None = None

    async def initialize(self) -> None:
        """Create RPC clients for both chains and load Solana signers.

        Raises:
            RuntimeError: If already initialized.
        """
        if self._initialized:
            msg = "Engine already initialized"
            raise RuntimeError(msg)

        # Import here to avoid circular deps
        from ganji_gateway.litecoin.service import LitecoinService
        from ganji_gateway.solana.service import SolanaService

        self._litecoin = LitecoinService(self._config.litecoin, metrics=self._metrics)
        await self._litecoin.connect()

        # Missing signers leave the service usable for read-only calls
        self._solana = SolanaService(self._config.solana)
        await self._solana.connect()

        self._initialized = True
        logger.info("Gateway engine initialized (environment=%s)", self._config.environment)

    async def close(self) -> None:
        """Gracefully shut down all services and connections.

        Can be called multiple times (idempotent).
        """
        if not self._initialized:
            return

        if self._solana is not None:
            await self._solana.close()
            self._solana = None

        if self._litecoin is not None:
            await self._litecoin.close()
            self._litecoin = None

        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        """Check if the engine is initialized."""
        return self._initialized

    @property
    def config(self) -> AppConfig:
        """Get the application configuration."""
        return self._config

    @property
    def metrics(self) -> GatewayMetrics | None:
        return self._metrics

    @property
    def litecoin(self) -> LitecoinService:
        """Get the Litecoin service."""
        if self._litecoin is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._litecoin

    @property
    def solana(self) -> SolanaService:
        """Get the Solana service."""
        if self._solana is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._solana

    async def health_check(self) -> dict[str, str]:
        """Report per-chain client status.

        Returns:
            Dictionary with component statuses ('ok', 'error', 'not_initialized').
        """
        status = {"engine": "ok" if self._initialized else "not_initialized"}
        if not self._initialized:
            return status

        status["litecoin"] = "ok" if self.litecoin.is_connected else "error"
        status["solana"] = "ok" if self.solana.is_connected else "error"
        for network in Network:
            signer = self.solana.signer_state(network)
            status[f"solana_signer_{network}"] = type(signer).__name__.lower()
        return status
