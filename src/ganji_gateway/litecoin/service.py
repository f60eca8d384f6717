"""Litecoin service — balance, send, asset registration and verification.

Asset registration embeds opaque hex data in a null-data output funded from
the node-managed wallet::

    listunspent → select first UTXO ≥ fee → createrawtransaction
      → signrawtransactionwithwallet → sendrawtransaction

The broadcast txid is the asset id. Verification fetches the transaction and
parses the payload back out of its null-data output.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from ganji_gateway.config.settings import Network
from ganji_gateway.errors.chain_errors import (
    IncompleteSignatureError,
    InsufficientUtxoError,
    NoEmbeddedDataError,
    NoFundsAvailableError,
    PayloadTooLargeError,
    TransportError,
)
from ganji_gateway.errors.gateway_errors import GatewayError, ValidationError
from ganji_gateway.litecoin.models import (
    COIN_PRECISION,
    LitecoinBalance,
    LitecoinTransferResult,
    LitecoinWallet,
    NetworkInfo,
    RawTransactionDraft,
    RawTransactionRecord,
    RegisterAssetResult,
    SignedTransaction,
    UnspentOutput,
    VerifyAssetResult,
    to_amount,
)
from ganji_gateway.litecoin.rpc import LitecoinRPCClient
from ganji_gateway.litecoin.script import ScriptParseError, extract_nulldata
from ganji_gateway.litecoin.wallet import WalletBootstrap

if TYPE_CHECKING:
    from ganji_gateway.config.settings import LitecoinConfig
    from ganji_gateway.metrics.collector import GatewayMetrics

logger = logging.getLogger(__name__)

# 80 bytes of payload, hex encoded
MAX_DATA_HEX_LENGTH = 160
REGISTRATION_FEE = Decimal("0.0001")
DUST_THRESHOLD = Decimal("0.00001")
DEFAULT_SEND_FEE = Decimal("0.0001")
MIN_CONFIRMATIONS = 1
MAX_CONFIRMATIONS = 9999999
NEW_ADDRESS_LABEL = "ganji-wallet"

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


def validate_asset_data(data: str) -> None:
    """Check a registration payload before any RPC call is made.

    Raises:
        PayloadTooLargeError: More than 160 hex characters.
        ValidationError: Empty, odd-length, or non-hex data.
    """
    if len(data) > MAX_DATA_HEX_LENGTH:
        raise PayloadTooLargeError(len(data), MAX_DATA_HEX_LENGTH)
    if not data:
        raise ValidationError("data must not be empty")
    if len(data) % 2 or not _HEX_RE.match(data):
        raise ValidationError("data must be an even-length hex string")


def select_funding_utxo(unspent: list[UnspentOutput]) -> UnspentOutput:
    """Pick the first output (node order) that covers the registration fee."""
    if not unspent:
        raise NoFundsAvailableError
    utxo = next((u for u in unspent if u.amount >= REGISTRATION_FEE), None)
    if utxo is None:
        raise InsufficientUtxoError(REGISTRATION_FEE)
    return utxo


def build_registration_outputs(utxo: UnspentOutput, data: str) -> RawTransactionDraft:
    """Build the draft spending *utxo* into a null-data output plus change.

    Change at or below the dust threshold is left to the fee rather than
    creating an unspendable output.
    """
    change = (utxo.amount - REGISTRATION_FEE).quantize(COIN_PRECISION)
    outputs: dict[str, Decimal | str] = {"data": data}
    if change > DUST_THRESHOLD:
        outputs[utxo.address] = change
    return RawTransactionDraft(
        inputs=[{"txid": utxo.txid, "vout": utxo.vout}],
        outputs=outputs,
    )


class LitecoinService:
    """Litecoin operations over a testnet and a mainnet node.

    Usage::

        ltc = LitecoinService(config.litecoin)
        await ltc.connect()
        try:
            result = await ltc.register_asset("deadbeef", Network.TESTNET)
        finally:
            await ltc.close()
    """

    def __init__(
        self,
        config: LitecoinConfig,
        *,
        metrics: GatewayMetrics | None = None,
    ) -> None:
        self._metrics = metrics
        self._rpc: dict[Network, LitecoinRPCClient] = {
            network: LitecoinRPCClient(config.for_network(network), network, metrics=metrics)
            for network in Network
        }
        self._wallets: dict[Network, WalletBootstrap] = {
            network: WalletBootstrap(rpc, metrics=metrics) for network, rpc in self._rpc.items()
        }

    async def connect(self) -> None:
        """Create the HTTP clients for both networks."""
        for rpc in self._rpc.values():
            await rpc.connect()

    async def close(self) -> None:
        """Close the HTTP clients for both networks."""
        for rpc in self._rpc.values():
            await rpc.close()

    @property
    def is_connected(self) -> bool:
        return all(rpc.is_connected for rpc in self._rpc.values())

    def rpc(self, network: Network) -> LitecoinRPCClient:
        """Direct access to a network's RPC client."""
        return self._rpc[network]

    def wallet(self, network: Network) -> WalletBootstrap:
        """Direct access to a network's wallet bootstrap."""
        return self._wallets[network]

    # ------------------------------------------------------------------
    # Wallet operations
    # ------------------------------------------------------------------

    async def get_balance(self, address: str, network: Network) -> LitecoinBalance:
        """Received amount for a wallet address, split into confirmed/unconfirmed."""
        wallet = self._wallets[network]
        confirmed = to_amount(await wallet.call_with_wallet("getreceivedbyaddress", [address, 1]))
        total = to_amount(await wallet.call_with_wallet("getreceivedbyaddress", [address, 0]))
        return LitecoinBalance(
            address=address,
            balance=confirmed,
            unconfirmed_balance=total - confirmed,
        )

    async def create_wallet(self, network: Network) -> LitecoinWallet:
        """Generate a new address in the managed wallet and export its key."""
        wallet = self._wallets[network]
        address = await wallet.call_with_wallet("getnewaddress", [NEW_ADDRESS_LABEL])
        private_key = await wallet.call_with_wallet("dumpprivkey", [address])
        logger.info("Generated %s address %s", network, address)
        return LitecoinWallet(address=address, private_key=private_key)

    async def send(
        self,
        destination: str,
        amount: Decimal,
        network: Network,
    ) -> LitecoinTransferResult:
        """Send *amount* LTC from the managed wallet to *destination*."""
        wallet = self._wallets[network]
        amount = to_amount(amount)
        tx_id = await wallet.call_with_wallet("sendtoaddress", [destination, amount])
        info: dict[str, Any] = await wallet.call_with_wallet("gettransaction", [tx_id])
        raw_fee = info.get("fee")
        fee = abs(to_amount(raw_fee)) if raw_fee else DEFAULT_SEND_FEE
        logger.info("Sent %s LTC to %s on %s: %s", amount, destination, network, tx_id)
        return LitecoinTransferResult(tx_id=tx_id, amount=amount, fee=fee)

    async def get_network_info(self, network: Network) -> NetworkInfo:
        info = await self._rpc[network].call("getnetworkinfo")
        return NetworkInfo.from_dict(info, str(network))

    # ------------------------------------------------------------------
    # Asset registration
    # ------------------------------------------------------------------

    async def register_asset(self, data: str, network: Network) -> RegisterAssetResult:
        """Embed *data* in a null-data output and broadcast it.

        Args:
            data: Hex payload, at most 80 bytes.
            network: Target network.

        Returns:
            RegisterAssetResult whose ``asset_id`` equals its ``tx_id``.

        Raises:
            PayloadTooLargeError: *data* exceeds 160 hex characters.
            NoFundsAvailableError: The wallet has no confirmed outputs.
            InsufficientUtxoError: No single output covers the fee.
            IncompleteSignatureError: The wallet could not sign every input.
        """
        validate_asset_data(data)
        wallet = self._wallets[network]

        raw_unspent = await wallet.call_with_wallet(
            "listunspent", [MIN_CONFIRMATIONS, MAX_CONFIRMATIONS]
        )
        utxo = select_funding_utxo([UnspentOutput.from_dict(u) for u in raw_unspent])
        draft = build_registration_outputs(utxo, data)

        raw_tx = await wallet.call_with_wallet("createrawtransaction", draft.to_params())
        signed = SignedTransaction.from_dict(
            await wallet.call_with_wallet("signrawtransactionwithwallet", [raw_tx])
        )
        if not signed.complete:
            logger.error("Signing incomplete for %s:%d: %s", utxo.txid, utxo.vout, signed.errors)
            raise IncompleteSignatureError

        # Broadcast is the commit point; nothing before it touches wallet state.
        tx_id = await wallet.call_with_wallet("sendrawtransaction", [signed.hex])

        if self._metrics is not None:
            self._metrics.inc_asset_registered(str(network))
        logger.info(
            "Asset registered on Litecoin %s: txid=%s data_length=%d change=%s",
            network,
            tx_id,
            len(data),
            draft.has_change,
        )
        return RegisterAssetResult(tx_id=tx_id)

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    async def get_transaction(self, tx_id: str, network: Network) -> RawTransactionRecord:
        raw = await self._rpc[network].call("getrawtransaction", [tx_id, True])
        if not isinstance(raw, dict):
            msg = f"Unexpected getrawtransaction result for {tx_id}"
            raise TransportError(msg)
        return RawTransactionRecord.from_dict(raw)

    async def verify_transaction(self, tx_id: str, network: Network) -> bool:
        """Return True if *tx_id* has at least one confirmation.

        Never raises: lookup failures report ``False``.
        """
        try:
            record = await self.get_transaction(tx_id, network)
        except GatewayError as exc:
            logger.debug("verify_transaction %s on %s failed: %s", tx_id, network, exc)
            return False
        return record.is_confirmed

    async def verify_asset(self, tx_id: str, network: Network) -> VerifyAssetResult:
        """Fetch *tx_id* and return the data embedded in its null-data output.

        ``valid`` reflects confirmation (≥ 1); data is returned for mempool
        transactions too.

        Raises:
            NoEmbeddedDataError: No null-data output, or it cannot be parsed.
        """
        record = await self.get_transaction(tx_id, network)
        output = record.nulldata_output()
        if output is None:
            raise NoEmbeddedDataError(tx_id)

        try:
            payload = extract_nulldata(output.script_hex)
        except ScriptParseError as exc:
            raise NoEmbeddedDataError(tx_id, f"Malformed OP_RETURN script ({exc})") from exc

        return VerifyAssetResult(
            valid=record.is_confirmed,
            timestamp=record.timestamp(),
            data=payload.hex(),
            confirmations=record.confirmations,
        )
