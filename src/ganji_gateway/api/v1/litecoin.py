"""V1 Litecoin endpoints.

Wallet operations against the node-managed wallet plus asset registration
and verification through null-data outputs.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from ganji_gateway.api.dependencies import get_engine
from ganji_gateway.api.responses import envelope
from ganji_gateway.api.v1.schemas import (
    LitecoinSendRequest,
    LitecoinVerifyRequest,
    NetworkSelection,
    RegisterAssetRequest,
)
from ganji_gateway.config.settings import Network
from ganji_gateway.engine.client import GatewayEngine  # noqa: TC001

router = APIRouter(prefix="/litecoin", tags=["litecoin"])

UseTestnet = Annotated[bool, Query(alias="useTestnet")]


# ---------------------------------------------------------------------------
# Wallet
# ---------------------------------------------------------------------------


@router.get("/balance/{address}")
async def get_balance(
    address: str,
    engine: Annotated[GatewayEngine, Depends(get_engine)],
    use_testnet: UseTestnet = False,
) -> dict[str, Any]:
    """Confirmed and unconfirmed amounts received by a wallet address."""
    balance = await engine.litecoin.get_balance(address, Network.from_flag(use_testnet))
    return envelope(balance.to_dict())


@router.get("/network")
async def get_network(
    engine: Annotated[GatewayEngine, Depends(get_engine)],
    use_testnet: UseTestnet = False,
) -> dict[str, Any]:
    info = await engine.litecoin.get_network_info(Network.from_flag(use_testnet))
    return envelope(info.to_dict())


@router.post("/create-wallet")
async def create_wallet(
    engine: Annotated[GatewayEngine, Depends(get_engine)],
    body: NetworkSelection | None = None,
) -> dict[str, Any]:
    """Generate a new address and return it with its private key."""
    use_testnet = body.use_testnet if body is not None else False
    wallet = await engine.litecoin.create_wallet(Network.from_flag(use_testnet))
    return envelope(wallet.to_dict())


@router.post("/send")
async def send(
    body: LitecoinSendRequest,
    engine: Annotated[GatewayEngine, Depends(get_engine)],
) -> dict[str, Any]:
    result = await engine.litecoin.send(
        body.destination_address,
        body.amount,
        Network.from_flag(body.use_testnet),
    )
    return envelope(result.to_dict())


@router.post("/verify")
async def verify(
    body: LitecoinVerifyRequest,
    engine: Annotated[GatewayEngine, Depends(get_engine)],
) -> dict[str, Any]:
    """Report whether a transaction has at least one confirmation."""
    valid = await engine.litecoin.verify_transaction(body.tx_id, Network.from_flag(body.use_testnet))
    return envelope({"valid": valid})


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------


@router.post("/register-asset")
async def register_asset(
    body: RegisterAssetRequest,
    engine: Annotated[GatewayEngine, Depends(get_engine)],
) -> dict[str, Any]:
    result = await engine.litecoin.register_asset(body.data, Network.from_flag(body.use_testnet))
    return envelope(result.to_dict())


@router.get("/verify-asset/{tx_id}")
async def verify_asset(
    tx_id: str,
    engine: Annotated[GatewayEngine, Depends(get_engine)],
    use_testnet: UseTestnet = False,
) -> dict[str, Any]:
    result = await engine.litecoin.verify_asset(tx_id, Network.from_flag(use_testnet))
    return envelope(result.to_dict())
