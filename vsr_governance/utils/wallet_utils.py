"""Wallet validation utilities."""

from __future__ import annotations

from solders.pubkey import Pubkey

from vsr_governance.core.exceptions import InvalidWalletError


def is_valid_wallet(w: str) -> bool:
    """Return True if w is a valid Solana wallet (Pubkey) address."""
    try:
        Pubkey.from_string(w.strip())
        return True
    except Exception:
        return False


def to_pubkey(wallet: str | Pubkey) -> Pubkey:
    """Return wallet as a Pubkey; raise InvalidWalletError for anything else."""
    if isinstance(wallet, Pubkey):
        return wallet
    if not isinstance(wallet, str) or not wallet.strip():
        raise InvalidWalletError("wallet must be a non-empty base58 string")
    try:
        return Pubkey.from_string(wallet.strip())
    except Exception as e:
        raise InvalidWalletError(f"Invalid Solana wallet: {wallet}") from e
