"""
Application-level exceptions.

Decode problems inside a single buffer never raise; these cover the failures
that leave a scan: the account source itself, and bad caller input.
"""

from __future__ import annotations


class VsrGovernanceError(Exception):
    """Base class for resolver errors."""


class AccountSourceError(VsrGovernanceError):
    """Raised when the account source (RPC) cannot serve a request."""

    def __init__(self, message: str, method: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.method = method
        self.status_code = status_code


class InvalidWalletError(VsrGovernanceError, ValueError):
    """Raised when a wallet string is not a valid Solana address."""
