"""V1 Solana endpoints.

Balance lookups, SOL transfers from the master wallet, and license
issuance, renewal and revocation through the license program.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from ganji_gateway.api.dependencies import get_engine
from ganji_gateway.api.responses import envelope
from ganji_gateway.api.v1.schemas import (
    CreateLicenseRequest,
    RenewLicenseRequest,
    RevokeLicenseRequest,
    SolanaTransferRequest,
)
from ganji_gateway.config.settings import Network
from ganji_gateway.engine.client import GatewayEngine  # noqa: TC001

router = APIRouter(prefix="/solana", tags=["solana"])

UseTestnet = Annotated[bool, Query(alias="useTestnet")]


@router.get("/balance/{address}")
async def get_balance(
    address: str,
    engine: Annotated[GatewayEngine, Depends(get_engine)],
    use_testnet: UseTestnet = False,
) -> dict[str, Any]:
    balance = await engine.solana.get_balance(address, Network.from_flag(use_testnet))
    return envelope(balance)


@router.post("/transfer")
async def transfer(
    body: SolanaTransferRequest,
    engine: Annotated[GatewayEngine, Depends(get_engine)],
) -> dict[str, Any]:
    result = await engine.solana.transfer(
        body.to_address,
        body.amount,
        Network.from_flag(body.use_testnet),
    )
    return envelope(result)


# ---------------------------------------------------------------------------
# Licenses
# ---------------------------------------------------------------------------


@router.post("/create-license")
async def create_license(
    body: CreateLicenseRequest,
    engine: Annotated[GatewayEngine, Depends(get_engine)],
) -> dict[str, Any]:
    """Issue a license PDA for the recipient."""
    result = await engine.solana.create_license(
        body.recipient_address,
        body.name,
        str(body.uri),
        Network.from_flag(body.use_testnet),
    )
    return envelope(result)


@router.get("/license/{recipient_address}")
async def get_license(
    recipient_address: str,
    name: Annotated[str, Query(min_length=1, max_length=32)],
    engine: Annotated[GatewayEngine, Depends(get_engine)],
    use_testnet: UseTestnet = False,
) -> dict[str, Any]:
    state = await engine.solana.get_license_state(
        recipient_address, name, Network.from_flag(use_testnet)
    )
    return envelope(state.to_dict())


@router.post("/renew-license")
async def renew_license(
    body: RenewLicenseRequest,
    engine: Annotated[GatewayEngine, Depends(get_engine)],
) -> dict[str, Any]:
    result = await engine.solana.renew_license(
        body.recipient_address,
        body.name,
        body.duration_seconds,
        Network.from_flag(body.use_testnet),
    )
    return envelope(result)


@router.post("/revoke-license")
async def revoke_license(
    body: RevokeLicenseRequest,
    engine: Annotated[GatewayEngine, Depends(get_engine)],
) -> dict[str, Any]:
    """Deactivate a license through ``set_active_status(false)``."""
    result = await engine.solana.set_license_status(
        body.mint_address,
        False,
        Network.from_flag(body.use_testnet),
    )
    return envelope({"signature": result["signature"], "status": result["status"]})
