"""V1 API request Pydantic schemas.

These are the *API-layer* schemas that define the HTTP contract. Field names
are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from decimal import Decimal  # noqa: TC003 - Pydantic needs this at runtime

from pydantic import AnyUrl, BaseModel, Field

_MODEL_CONFIG = {"populate_by_name": True}


# ---------------------------------------------------------------------------
# Litecoin
# ---------------------------------------------------------------------------


class NetworkSelection(BaseModel):
    """Body carrying only the network flag."""

    use_testnet: bool = Field(False, alias="useTestnet")

    model_config = _MODEL_CONFIG


class LitecoinSendRequest(NetworkSelection):
    """POST /api/v1/litecoin/send."""

    destination_address: str = Field(alias="destinationAddress", min_length=26, max_length=90)
    amount: Decimal = Field(gt=0)


class LitecoinVerifyRequest(NetworkSelection):
    """POST /api/v1/litecoin/verify."""

    tx_id: str = Field(alias="txId", min_length=1)
    address: str = ""


class RegisterAssetRequest(NetworkSelection):
    """POST /api/v1/litecoin/register-asset.

    Only emptiness is checked here; hex shape and the 80-byte limit are
    enforced by the service before any RPC call.
    """

    data: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Solana
# ---------------------------------------------------------------------------


class SolanaTransferRequest(NetworkSelection):
    """POST /api/v1/solana/transfer."""

    to_address: str = Field(alias="toAddress", min_length=32, max_length=44)
    amount: Decimal = Field(gt=0)


class CreateLicenseRequest(NetworkSelection):
    """POST /api/v1/solana/create-license."""

    recipient_address: str = Field(alias="recipientAddress", min_length=32, max_length=44)
    name: str = Field(min_length=1, max_length=32)
    uri: AnyUrl


class RenewLicenseRequest(NetworkSelection):
    """POST /api/v1/solana/renew-license."""

    recipient_address: str = Field(alias="recipientAddress", min_length=32, max_length=44)
    name: str = Field(min_length=1, max_length=32)
    duration_seconds: int = Field(alias="durationSeconds", gt=0)


class RevokeLicenseRequest(NetworkSelection):
    """POST /api/v1/solana/revoke-license.

    ``mintAddress`` is the license account returned by create-license.
    """

    mint_address: str = Field(alias="mintAddress", min_length=32, max_length=44)
