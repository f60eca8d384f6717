"""Solana service — balances, SOL transfers, license issuance and revocation.

One ``AsyncClient`` per network. The master signer for each network is
loaded once from a keyfile (JSON array of 64 secret-key bytes) and held as
an explicit :class:`Ready` / :class:`Uninitialized` state, so signing
operations fail with a typed "not configured" error instead of ad hoc
``None`` checks.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import TYPE_CHECKING, Any

from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solana.rpc.core import RPCException, UnconfirmedTxError
from solana.rpc.types import TxOpts
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction

from ganji_gateway.config.settings import Network
from ganji_gateway.errors.chain_errors import LicenseNotFoundError, SolanaRPCError
from ganji_gateway.errors.gateway_errors import ServiceNotConfiguredError, ValidationError
from ganji_gateway.solana.license import (
    LicenseState,
    build_issue_license_instruction,
    build_renew_license_instruction,
    build_set_active_status_instruction,
    find_license_address,
    software_id_for,
)

if TYPE_CHECKING:
    from solders.instruction import Instruction

    from ganji_gateway.config.settings import SolanaConfig, SolanaNetworkConfig

logger = logging.getLogger(__name__)

LAMPORTS_PER_SOL = 1_000_000_000

_RPC_ERRORS = (SolanaRpcException, RPCException, UnconfirmedTxError)


# ---------------------------------------------------------------------------
# Signer state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Uninitialized:
    """No signer is available; ``reason`` says why."""

    reason: str


@dataclass(frozen=True)
class Ready:
    """A loaded master keypair."""

    keypair: Keypair


SignerState = Uninitialized | Ready


def load_signer(path: str | Path) -> SignerState:
    """Load a keypair file, returning :class:`Uninitialized` on any problem."""
    p = Path(path)
    if not p.exists():
        return Uninitialized(f"keypair file not found: {p}")
    try:
        secret = json.loads(p.read_text(encoding="utf-8"))
        keypair = Keypair.from_bytes(bytes(secret))
    except (OSError, TypeError, ValueError) as exc:
        return Uninitialized(f"invalid keypair file {p}: {exc}")
    return Ready(keypair)


def parse_pubkey(address: str, field: str = "address") -> Pubkey:
    try:
        return Pubkey.from_string(address)
    except ValueError as exc:
        msg = f"invalid Solana {field}: {address}"
        raise ValidationError(msg) from exc


def sol_to_lamports(amount: Decimal | float) -> int:
    return int(Decimal(str(amount)) * LAMPORTS_PER_SOL)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class SolanaService:
    """Solana operations over a testnet (devnet) and a mainnet cluster.

    Usage::

        sol = SolanaService(config.solana)
        await sol.connect()
        try:
            balance = await sol.get_balance("9xQe...", Network.TESTNET)
        finally:
            await sol.close()
    """

    def __init__(self, config: SolanaConfig) -> None:
        self._config = config
        self._clients: dict[Network, AsyncClient | None] = dict.fromkeys(Network)
        self._signers: dict[Network, SignerState] = {
            network: Uninitialized("signer not loaded") for network in Network
        }

    async def connect(self) -> None:
        """Create RPC clients and load master signers for both networks."""
        for network in Network:
            cfg = self._config.for_network(network)
            self._clients[network] = AsyncClient(cfg.rpc_url, commitment=Commitment(cfg.commitment))
            state = load_signer(cfg.wallet_path)
            self._signers[network] = state
            if isinstance(state, Ready):
                logger.info("Solana %s master wallet loaded: %s", network, state.keypair.pubkey())
            else:
                logger.warning(
                    "Solana %s signer unavailable (%s); signing operations will fail",
                    network,
                    state.reason,
                )

    async def close(self) -> None:
        for network, client in self._clients.items():
            if client is not None:
                await client.close()
                self._clients[network] = None

    @property
    def is_connected(self) -> bool:
        return all(client is not None for client in self._clients.values())

    def signer_state(self, network: Network) -> SignerState:
        return self._signers[network]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_balance(self, address: str, network: Network) -> dict[str, Any]:
        """Native balance of *address* in SOL and lamports."""
        pubkey = parse_pubkey(address)
        client = self._ensure_client(network)
        try:
            resp = await client.get_balance(pubkey)
        except _RPC_ERRORS as exc:
            msg = f"Failed to get balance: {exc}"
            raise SolanaRPCError(msg) from exc
        lamports = int(resp.value)
        return {
            "address": address,
            "balance": lamports / LAMPORTS_PER_SOL,
            "lamports": lamports,
        }

    async def transfer(self, to_address: str, amount: Decimal, network: Network) -> dict[str, Any]:
        """Send *amount* SOL from the master wallet to *to_address*."""
        keypair = self._ensure_signer(network)
        to_pubkey = parse_pubkey(to_address, "toAddress")
        ix = transfer(
            TransferParams(
                from_pubkey=keypair.pubkey(),
                to_pubkey=to_pubkey,
                lamports=sol_to_lamports(amount),
            )
        )
        logger.debug("Solana %s transfer of %s SOL to %s", network, amount, to_address)
        signature, slot = await self._send([ix], keypair, network)
        return {
            "signature": signature,
            "from": str(keypair.pubkey()),
            "to": to_address,
            "amount": float(amount),
            "slot": slot,
        }

    async def create_license(
        self,
        recipient: str,
        name: str,
        uri: str,
        network: Network,
    ) -> dict[str, Any]:
        """Issue a license for *recipient* through the license program.

        Returns:
            Dict with ``mintAddress`` (the license PDA) and ``signature``.
        """
        keypair = self._ensure_signer(network)
        owner = parse_pubkey(recipient, "recipientAddress")
        program_id = self._program_id(network)
        software_id = software_id_for(name)
        ix, license_account = build_issue_license_instruction(
            program_id,
            keypair.pubkey(),
            owner,
            software_id,
            self._config.license_duration_seconds,
        )
        signature, _ = await self._send([ix], keypair, network)
        logger.info(
            "License %r (%s) issued to %s on %s at %s: %s",
            name,
            uri,
            recipient,
            network,
            license_account,
            signature,
        )
        return {"mintAddress": str(license_account), "signature": signature}

    async def get_license_state(self, recipient: str, name: str, network: Network) -> LicenseState:
        owner = parse_pubkey(recipient, "recipientAddress")
        address, _ = find_license_address(owner, software_id_for(name), self._program_id(network))
        client = self._ensure_client(network)
        try:
            resp = await client.get_account_info(address)
        except _RPC_ERRORS as exc:
            msg = f"Failed to fetch license account: {exc}"
            raise SolanaRPCError(msg) from exc
        if resp.value is None:
            raise LicenseNotFoundError(str(address))
        try:
            return LicenseState.from_account_data(address, bytes(resp.value.data))
        except ValueError as exc:
            raise LicenseNotFoundError(str(address)) from exc

    async def renew_license(
        self,
        recipient: str,
        name: str,
        duration_seconds: int,
        network: Network,
    ) -> dict[str, Any]:
        """Extend an existing license by *duration_seconds*."""
        keypair = self._ensure_signer(network)
        owner = parse_pubkey(recipient, "recipientAddress")
        program_id = self._program_id(network)
        license_account, _ = find_license_address(owner, software_id_for(name), program_id)
        ix = build_renew_license_instruction(
            program_id, keypair.pubkey(), license_account, duration_seconds
        )
        signature, _ = await self._send([ix], keypair, network)
        logger.info("License %s renewed by %ds: %s", license_account, duration_seconds, signature)
        return {"licenseAddress": str(license_account), "signature": signature}

    async def set_license_status(
        self,
        license_address: str,
        active: bool,
        network: Network,
    ) -> dict[str, Any]:
        """Activate or revoke the license account at *license_address*.

        Returns:
            Dict with ``licenseAddress``, ``signature`` and ``status``
            (``"active"`` or ``"revoked"``).
        """
        keypair = self._ensure_signer(network)
        license_account = parse_pubkey(license_address, "mintAddress")
        ix = build_set_active_status_instruction(
            self._program_id(network), keypair.pubkey(), license_account, active
        )
        signature, _ = await self._send([ix], keypair, network)
        status = "active" if active else "revoked"
        logger.info("License %s set to %s: %s", license_account, status, signature)
        return {"licenseAddress": license_address, "signature": signature, "status": status}

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _send(
        self,
        instructions: list[Instruction],
        keypair: Keypair,
        network: Network,
    ) -> tuple[str, int]:
        """Sign with *keypair*, submit, and wait for confirmation."""
        client = self._ensure_client(network)
        commitment = Commitment(self._network_config(network).commitment)
        try:
            blockhash = (await client.get_latest_blockhash()).value.blockhash
            tx = Transaction.new_signed_with_payer(
                instructions, keypair.pubkey(), [keypair], blockhash
            )
            resp = await client.send_raw_transaction(
                bytes(tx), opts=TxOpts(preflight_commitment=commitment)
            )
            signature = resp.value
            statuses = await client.confirm_transaction(signature, commitment)
        except _RPC_ERRORS as exc:
            logger.error("Solana %s transaction failed: %s", network, exc)
            msg = f"Transaction failed: {exc}"
            raise SolanaRPCError(msg) from exc

        status = statuses.value[0] if statuses.value else None
        slot = status.slot if status is not None else 0
        return str(signature), slot

    def _network_config(self, network: Network) -> SolanaNetworkConfig:
        return self._config.for_network(network)

    def _program_id(self, network: Network) -> Pubkey:
        program_id = self._network_config(network).program_id
        if not program_id:
            msg = f"license program id not configured for {network}"
            raise ServiceNotConfiguredError(msg)
        return Pubkey.from_string(program_id)

    def _ensure_client(self, network: Network) -> AsyncClient:
        client = self._clients[network]
        if client is None:
            msg = f"Solana {network} client not connected. Call connect() first."
            raise ServiceNotConfiguredError(msg)
        return client

    def _ensure_signer(self, network: Network) -> Keypair:
        state = self._signers[network]
        if isinstance(state, Uninitialized):
            msg = f"Master wallet not loaded for {network}: {state.reason}"
            raise ServiceNotConfiguredError(msg)
        return state.keypair
