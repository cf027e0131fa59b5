"""
Account source package.

Fetches raw program accounts from the ledger (Solana JSON-RPC) and hands them
to the decoders as RawAccount buffers.
"""

from vsr_governance.account_source.base import AccountSource, get_token_owner_record_address
from vsr_governance.account_source.models import MemcmpFilter, RawAccount
from vsr_governance.account_source.rpc import SolanaAccountSource

__all__ = [
    "AccountSource",
    "MemcmpFilter",
    "RawAccount",
    "SolanaAccountSource",
    "get_token_owner_record_address",
]
