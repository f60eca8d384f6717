"""Litecoin JSON-RPC client, wallet bootstrap, and asset notarization."""

from ganji_gateway.litecoin.rpc import LitecoinRPCClient
from ganji_gateway.litecoin.service import LitecoinService
from ganji_gateway.litecoin.wallet import WalletBootstrap

__all__ = ["LitecoinRPCClient", "LitecoinService", "WalletBootstrap"]
