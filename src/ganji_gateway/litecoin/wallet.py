"""Managed wallet bootstrap — load-or-create on demand.

The node owns the wallet; this module only makes sure it is loaded before a
wallet-scoped call runs. Recovery happens at most once per call:

1. the call fails with ``-18`` (wallet not found / not loaded)
2. ``loadwallet`` — ``-35`` (already loaded) counts as success
3. if load fails with ``-18`` (no such wallet on disk) → ``createwallet``;
   ``-4`` (already exists) counts as success
4. the original call is retried once; a second failure propagates
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ganji_gateway.errors.chain_errors import RpcError

if TYPE_CHECKING:
    from ganji_gateway.litecoin.rpc import LitecoinRPCClient
    from ganji_gateway.metrics.collector import GatewayMetrics

logger = logging.getLogger(__name__)

RPC_WALLET_ERROR = -4
RPC_WALLET_NOT_FOUND = -18
RPC_WALLET_ALREADY_LOADED = -35


class WalletBootstrap:
    """Runs wallet-scoped RPC calls, loading or creating the wallet on demand."""

    def __init__(self, rpc: LitecoinRPCClient, *, metrics: GatewayMetrics | None = None) -> None:
        self._rpc = rpc
        self._metrics = metrics
        self._ready = False

    @property
    def wallet_name(self) -> str:
        return self._rpc.wallet_name

    @property
    def is_ready(self) -> bool:
        """Warm-cache hint; the node remains the source of truth."""
        return self._ready

    async def call_with_wallet(self, method: str, params: list[Any] | None = None) -> Any:
        """Invoke a wallet-scoped method, recovering a missing wallet once."""
        try:
            result = await self._rpc.call(method, params, wallet_scope=True)
        except RpcError as exc:
            if exc.rpc_code != RPC_WALLET_NOT_FOUND:
                raise
            self._ready = False
            logger.warning(
                "Wallet %r not loaded on %s node (%s); recovering",
                self.wallet_name,
                self._rpc.network,
                exc.rpc_message,
            )
            await self._load_or_create()
            result = await self._rpc.call(method, params, wallet_scope=True)
        self._ready = True
        return result

    async def ensure_wallet_loaded(self) -> None:
        """Make sure the managed wallet is loaded, creating it if necessary."""
        await self.call_with_wallet("getwalletinfo")

    async def _load_or_create(self) -> None:
        if self._metrics is not None:
            self._metrics.inc_wallet_recovery(str(self._rpc.network))

        name = self.wallet_name
        try:
            await self._rpc.call("loadwallet", [name])
        except RpcError as exc:
            if exc.rpc_code == RPC_WALLET_ALREADY_LOADED:
                return
            if exc.rpc_code != RPC_WALLET_NOT_FOUND:
                raise
        else:
            logger.info("Loaded wallet %r", name)
            return

        try:
            await self._rpc.call("createwallet", [name])
        except RpcError as exc:
            if exc.rpc_code != RPC_WALLET_ERROR:
                raise
            logger.info("Wallet %r already exists: %s", name, exc.rpc_message)
        else:
            logger.info("Created wallet %r", name)
