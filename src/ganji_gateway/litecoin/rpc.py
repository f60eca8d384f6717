"""Litecoin JSON-RPC client.

Issues ``{"jsonrpc": "1.0", ...}`` POSTs to a Litecoin Core node with HTTP
Basic auth. Wallet-scoped calls go to ``/wallet/<name>`` so the node knows
which loaded wallet the method applies to; everything else goes to ``/``.

Litecoin Core reports RPC failures with a non-2xx status *and* a JSON body
carrying the ``error`` object; those are surfaced as :class:`RpcError` so the
node's code survives. Only bodies without a JSON-RPC error become
:class:`TransportError`.
"""

from __future__ import annotations

import itertools
import json
import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from ganji_gateway.errors.chain_errors import RpcError, TransportError
from ganji_gateway.errors.gateway_errors import ServiceNotConfiguredError

if TYPE_CHECKING:
    from ganji_gateway.config.settings import LitecoinNodeConfig, Network
    from ganji_gateway.metrics.collector import GatewayMetrics

logger = logging.getLogger(__name__)

_JSONRPC_VERSION = "1.0"
_ID_PREFIX = "ganji"


def _default(value: Any) -> Any:
    if isinstance(value, Decimal):
        # Quantized amounts round-trip exactly through float repr
        return float(value)
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def _decode(response: httpx.Response) -> dict[str, Any] | None:
    try:
        body = json.loads(response.text, parse_float=Decimal)
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


class LitecoinRPCClient:
    """Async JSON-RPC client for one Litecoin node.

    Usage::

        rpc = LitecoinRPCClient(config.litecoin.testnet, Network.TESTNET)
        await rpc.connect()
        try:
            info = await rpc.call("getnetworkinfo")
            utxos = await rpc.call("listunspent", [1, 9999999], wallet_scope=True)
        finally:
            await rpc.close()
    """

    def __init__(
        self,
        config: LitecoinNodeConfig,
        network: Network,
        *,
        metrics: GatewayMetrics | None = None,
    ) -> None:
        """Initialize the RPC client.

        Args:
            config: Node URL, credentials, and managed wallet name.
            network: Which network this node serves.
            metrics: Optional metrics sink for call durations.
        """
        self._config = config
        self._network = network
        self._metrics = metrics
        self._client: httpx.AsyncClient | None = None
        self._ids = itertools.count(1)

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self._config.url.rstrip("/"),
            auth=(self._config.username, self._config.password),
            headers={"Content-Type": "text/plain"},
            timeout=self._config.timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    @property
    def network(self) -> Network:
        return self._network

    @property
    def wallet_name(self) -> str:
        return self._config.wallet_name

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def call(
        self,
        method: str,
        params: list[Any] | None = None,
        *,
        wallet_scope: bool = False,
    ) -> Any:
        """Invoke a JSON-RPC method and return its ``result``.

        Args:
            method: Node RPC method name.
            params: Positional arguments for the method.
            wallet_scope: Target the managed wallet's endpoint.

        Returns:
            The ``result`` field of the response.

        Raises:
            TransportError: Network failure or non-2xx without an RPC error body.
            RpcError: The node returned a JSON-RPC ``error`` object.
        """
        if self._metrics is None:
            return await self._call(method, params or [], wallet_scope)
        with self._metrics.track_rpc_call("litecoin", method):
            return await self._call(method, params or [], wallet_scope)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _call(self, method: str, params: list[Any], wallet_scope: bool) -> Any:
        client = self._ensure_connected()
        path = f"/wallet/{quote(self._config.wallet_name, safe='')}" if wallet_scope else "/"
        payload = {
            "jsonrpc": _JSONRPC_VERSION,
            "id": f"{_ID_PREFIX}-{next(self._ids)}",
            "method": method,
            "params": params,
        }
        logger.debug("RPC %s %s (%s)", self._network, method, path)

        try:
            response = await client.post(path, content=json.dumps(payload, default=_default))
        except httpx.HTTPError as exc:
            logger.error("RPC transport failure calling %s: %s", method, exc)
            msg = f"RPC request failed: {exc}"
            raise TransportError(msg) from exc

        body = _decode(response)
        error = body.get("error") if body is not None else None
        if error:
            if not isinstance(error, dict):
                error = {"message": error}
            code = int(error.get("code", 0))
            message = str(error.get("message", error))
            logger.debug("RPC %s returned error %d: %s", method, code, message)
            raise RpcError(code, message, method=method)

        if response.is_error or body is None:
            logger.error(
                "RPC request failed: status=%d body=%s", response.status_code, response.text
            )
            msg = f"RPC request failed: {response.status_code} {response.reason_phrase}"
            raise TransportError(msg, http_status=response.status_code, body=response.text)

        return body.get("result")

    def _ensure_connected(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = f"Litecoin {self._network} RPC client not connected. Call connect() first."
            raise ServiceNotConfiguredError(msg)
        return self._client
