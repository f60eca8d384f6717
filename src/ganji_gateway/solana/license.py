"""License program helpers — PDA derivation, instructions, account layout.

Mirrors the external ``license_checker`` Anchor program:

* PDA seeds: ``[b"license", owner, software_id.to_le_bytes()]``
* ``issue_license(software_id: u64, duration_seconds: i64)``
* ``renew_license(duration_seconds: i64)``
* ``set_active_status(status: bool)``
* ``LicenseAccount``: owner, authority, software_id, purchase_timestamp,
  expiration_timestamp, is_active, bump
"""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYS_PROGRAM_ID

LICENSE_SEED = b"license"


def _discriminator(namespace: str, name: str) -> bytes:
    # Anchor: first 8 bytes of sha256("<namespace>:<name>")
    return hashlib.sha256(f"{namespace}:{name}".encode()).digest()[:8]


ISSUE_LICENSE_DISCRIMINATOR = _discriminator("global", "issue_license")
RENEW_LICENSE_DISCRIMINATOR = _discriminator("global", "renew_license")
SET_ACTIVE_STATUS_DISCRIMINATOR = _discriminator("global", "set_active_status")
LICENSE_ACCOUNT_DISCRIMINATOR = _discriminator("account", "LicenseAccount")

# discriminator + owner + authority + software_id + purchase + expiration + is_active + bump
_ACCOUNT_LAYOUT = struct.Struct("<8s32s32sQqq?B")
LICENSE_ACCOUNT_SIZE = _ACCOUNT_LAYOUT.size


def software_id_for(name: str) -> int:
    """Derive a stable u64 software id from a license name."""
    digest = hashlib.sha256(name.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "little")


def find_license_address(owner: Pubkey, software_id: int, program_id: Pubkey) -> tuple[Pubkey, int]:
    """Derive the license PDA and bump for *owner* and *software_id*."""
    seeds = [LICENSE_SEED, bytes(owner), struct.pack("<Q", software_id)]
    return Pubkey.find_program_address(seeds, program_id)


def build_issue_license_instruction(
    program_id: Pubkey,
    authority: Pubkey,
    owner: Pubkey,
    software_id: int,
    duration_seconds: int,
) -> tuple[Instruction, Pubkey]:
    """Build ``issue_license``. Returns (Instruction, license_account_pubkey)."""
    license_account, _ = find_license_address(owner, software_id, program_id)
    data = ISSUE_LICENSE_DISCRIMINATOR + struct.pack("<Qq", software_id, duration_seconds)
    accounts = [
        AccountMeta(pubkey=license_account, is_signer=False, is_writable=True),
        AccountMeta(pubkey=owner, is_signer=False, is_writable=False),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=True),
        AccountMeta(pubkey=SYS_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(program_id=program_id, data=data, accounts=accounts), license_account


def build_renew_license_instruction(
    program_id: Pubkey,
    authority: Pubkey,
    license_account: Pubkey,
    duration_seconds: int,
) -> Instruction:
    """Build ``renew_license`` for an existing license account."""
    data = RENEW_LICENSE_DISCRIMINATOR + struct.pack("<q", duration_seconds)
    accounts = [
        AccountMeta(pubkey=license_account, is_signer=False, is_writable=True),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
    ]
    return Instruction(program_id=program_id, data=data, accounts=accounts)


def build_set_active_status_instruction(
    program_id: Pubkey,
    authority: Pubkey,
    license_account: Pubkey,
    status: bool,
) -> Instruction:
    """Build ``set_active_status``; ``status=False`` revokes the license."""
    data = SET_ACTIVE_STATUS_DISCRIMINATOR + struct.pack("<?", status)
    accounts = [
        AccountMeta(pubkey=license_account, is_signer=False, is_writable=True),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
    ]
    return Instruction(program_id=program_id, data=data, accounts=accounts)


@dataclass(frozen=True)
class LicenseState:
    """Decoded ``LicenseAccount``."""

    address: str
    owner: str
    authority: str
    software_id: int
    purchase_timestamp: int
    expiration_timestamp: int
    is_active: bool
    bump: int

    @classmethod
    def from_account_data(cls, address: Pubkey, data: bytes) -> LicenseState:
        """Parse raw account bytes.

        Raises:
            ValueError: If the data is too short or has the wrong discriminator.
        """
        if len(data) < LICENSE_ACCOUNT_SIZE:
            msg = f"license account data too short: {len(data)} < {LICENSE_ACCOUNT_SIZE}"
            raise ValueError(msg)
        (
            discriminator,
            owner,
            authority,
            software_id,
            purchase,
            expiration,
            is_active,
            bump,
        ) = _ACCOUNT_LAYOUT.unpack_from(data)
        if discriminator != LICENSE_ACCOUNT_DISCRIMINATOR:
            msg = "account is not a LicenseAccount"
            raise ValueError(msg)
        return cls(
            address=str(address),
            owner=str(Pubkey.from_bytes(owner)),
            authority=str(Pubkey.from_bytes(authority)),
            software_id=software_id,
            purchase_timestamp=purchase,
            expiration_timestamp=expiration,
            is_active=is_active,
            bump=bump,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "address": self.address,
            "owner": self.owner,
            "authority": self.authority,
            "softwareId": str(self.software_id),
            "purchaseTimestamp": self.purchase_timestamp,
            "expirationTimestamp": self.expiration_timestamp,
            "isActive": self.is_active,
        }
