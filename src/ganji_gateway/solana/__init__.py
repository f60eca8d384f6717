"""Solana balances, transfers and license program access."""

from ganji_gateway.solana.license import LicenseState
from ganji_gateway.solana.service import Ready, SolanaService, Uninitialized

__all__ = ["LicenseState", "Ready", "SolanaService", "Uninitialized"]
