"""
Core utilities shared by the account source, decoders and policy.
"""

from vsr_governance.core.exceptions import (
    AccountSourceError,
    InvalidWalletError,
    VsrGovernanceError,
)

__all__ = ["AccountSourceError", "InvalidWalletError", "VsrGovernanceError"]
