"""Chain-related errors: node transport, JSON-RPC, registration and verification."""

from __future__ import annotations

from ganji_gateway.errors.gateway_errors import GatewayError

# -- Transport / RPC --------------------------------------------------------


class TransportError(GatewayError):
    """The HTTP layer to the node failed (network error or non-2xx status)."""

    def __init__(
        self,
        message: str,
        *,
        http_status: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(message, code="transport-error")
        self.http_status = http_status
        self.body = body


class RpcError(GatewayError):
    """The node answered with a JSON-RPC ``error`` object."""

    def __init__(self, rpc_code: int, rpc_message: str, *, method: str = "") -> None:
        super().__init__(
            f"RPC error: {rpc_message} (code: {rpc_code})",
            code="rpc-error",
        )
        self.rpc_code = rpc_code
        self.rpc_message = rpc_message
        self.method = method


class SolanaRPCError(GatewayError):
    """Error from a Solana RPC endpoint."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="solana-rpc-error")


# -- Asset registration -----------------------------------------------------


class PayloadTooLargeError(GatewayError):
    """Null-data payload exceeds the 80-byte relay limit."""

    def __init__(self, length: int, limit: int) -> None:
        super().__init__(
            f"Data exceeds OP_RETURN limit of {limit // 2} bytes ({length} hex chars)",
            code="payload-too-large",
        )
        self.length = length
        self.limit = limit


class NoFundsAvailableError(GatewayError):
    """The managed wallet has no confirmed unspent outputs."""

    def __init__(self) -> None:
        super().__init__(
            "No unspent outputs available to fund transaction",
            code="no-funds-available",
        )


class InsufficientUtxoError(GatewayError):
    """No single unspent output covers the registration fee."""

    def __init__(self, fee: object) -> None:
        super().__init__(
            f"No UTXO with sufficient balance for transaction fee ({fee})",
            code="insufficient-utxo",
        )


class IncompleteSignatureError(GatewayError):
    """Wallet signing did not produce a complete transaction."""

    def __init__(self) -> None:
        super().__init__(
            "Transaction signing incomplete",
            code="incomplete-signature",
        )


# -- Verification -----------------------------------------------------------


class NoEmbeddedDataError(GatewayError):
    """The transaction carries no parseable null-data output."""

    def __init__(self, txid: str, reason: str = "No OP_RETURN data found in transaction") -> None:
        super().__init__(f"{reason}: {txid}", code="no-embedded-data")
        self.txid = txid


class LicenseNotFoundError(GatewayError):
    """No license account exists at the derived address."""

    def __init__(self, address: str) -> None:
        super().__init__(
            f"License account not found: {address}",
            code="license-not-found",
        )
