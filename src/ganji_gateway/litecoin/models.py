"""Litecoin data models — unspent outputs, raw transactions, service results.

Data classes built from node JSON-RPC responses. Amounts are ``Decimal``
quantized to the chain's native 8 decimal places.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import ROUND_DOWN, Decimal
from typing import Any

# 1 litoshi
COIN_PRECISION = Decimal("0.00000001")


def to_amount(value: Any) -> Decimal:
    """Convert a node-reported amount to an 8-decimal ``Decimal``."""
    if isinstance(value, float):
        value = repr(value)
    return Decimal(value).quantize(COIN_PRECISION, rounding=ROUND_DOWN)


# ---------------------------------------------------------------------------
# Wallet inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UnspentOutput:
    """A spendable coin known to the managed wallet (``listunspent`` entry)."""

    txid: str
    vout: int
    address: str
    amount: Decimal
    confirmations: int = 0
    script_pub_key: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UnspentOutput:
        return cls(
            txid=data["txid"],
            vout=int(data["vout"]),
            address=data.get("address", ""),
            amount=to_amount(data.get("amount", 0)),
            confirmations=int(data.get("confirmations", 0)),
            script_pub_key=data.get("scriptPubKey", ""),
        )


@dataclass(frozen=True)
class RawTransactionDraft:
    """Inputs and outputs for ``createrawtransaction``.

    ``outputs`` maps ``"data"`` to the null-data payload and, optionally,
    the funding address to its change amount.
    """

    inputs: list[dict[str, Any]]
    outputs: dict[str, Decimal | str]

    @property
    def has_change(self) -> bool:
        return any(key != "data" for key in self.outputs)

    def to_params(self) -> list[Any]:
        return [self.inputs, self.outputs]


@dataclass(frozen=True)
class SignedTransaction:
    """Result of ``signrawtransactionwithwallet``."""

    hex: str
    complete: bool
    errors: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SignedTransaction:
        return cls(
            hex=data.get("hex", ""),
            complete=bool(data.get("complete", False)),
            errors=data.get("errors", []),
        )


# ---------------------------------------------------------------------------
# Fetched transactions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TxOutput:
    """A single decoded output of a verbose ``getrawtransaction``."""

    value: Decimal
    n: int
    script_type: str
    script_hex: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TxOutput:
        script = data.get("scriptPubKey", {})
        return cls(
            value=to_amount(data.get("value", 0)),
            n=int(data.get("n", 0)),
            script_type=script.get("type", ""),
            script_hex=script.get("hex", ""),
        )


@dataclass(frozen=True)
class RawTransactionRecord:
    """Verbose transaction as reported by the node."""

    txid: str
    confirmations: int
    time: int | None
    blocktime: int | None
    outputs: list[TxOutput]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RawTransactionRecord:
        return cls(
            txid=data.get("txid", ""),
            # Mempool transactions omit the confirmations field entirely
            confirmations=int(data.get("confirmations", 0)),
            time=data.get("time"),
            blocktime=data.get("blocktime"),
            outputs=[TxOutput.from_dict(o) for o in data.get("vout", [])],
        )

    @property
    def is_confirmed(self) -> bool:
        return self.confirmations >= 1

    def nulldata_output(self) -> TxOutput | None:
        """Return the first null-data output, if any."""
        return next((o for o in self.outputs if o.script_type == "nulldata"), None)

    def timestamp(self) -> str:
        """ISO-8601 UTC time: block time, else node-seen time, else now."""
        seconds = self.blocktime or self.time
        moment = (
            datetime.fromtimestamp(seconds, tz=UTC) if seconds else datetime.now(tz=UTC)
        )
        return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Service results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RegisterAssetResult:
    """Broadcast registration; the txid doubles as the asset id."""

    tx_id: str

    @property
    def asset_id(self) -> str:
        return self.tx_id

    def to_dict(self) -> dict[str, str]:
        return {"txId": self.tx_id, "assetId": self.asset_id}


@dataclass(frozen=True)
class VerifyAssetResult:
    valid: bool
    timestamp: str
    data: str
    confirmations: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "timestamp": self.timestamp,
            "data": self.data,
            "confirmations": self.confirmations,
        }


@dataclass(frozen=True)
class LitecoinBalance:
    address: str
    balance: Decimal
    unconfirmed_balance: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "balance": float(self.balance),
            "unconfirmedBalance": float(self.unconfirmed_balance),
        }


@dataclass(frozen=True)
class LitecoinTransferResult:
    tx_id: str
    amount: Decimal
    fee: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"txId": self.tx_id, "amount": float(self.amount), "fee": float(self.fee)}


@dataclass(frozen=True)
class LitecoinWallet:
    """A freshly generated address and its WIF private key."""

    address: str
    private_key: str

    def to_dict(self) -> dict[str, str]:
        return {"address": self.address, "privateKey": self.private_key}


@dataclass(frozen=True)
class NetworkInfo:
    version: int
    subversion: str
    connections: int
    network: str

    @classmethod
    def from_dict(cls, data: dict[str, Any], network: str) -> NetworkInfo:
        return cls(
            version=int(data.get("version", 0)),
            subversion=data.get("subversion", ""),
            connections=int(data.get("connections", 0)),
            network=network,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "subversion": self.subversion,
            "connections": self.connections,
            "network": self.network,
        }
