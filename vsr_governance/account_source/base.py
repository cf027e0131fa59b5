"""
Account source contract.

The resolver needs three things from the ledger: a filtered program scan, a
single account fetch, and Token Owner Record address derivation. Anything that
provides them (the RPC client, an in-memory fixture) can back a resolution.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from solders.pubkey import Pubkey

from vsr_governance.account_source.models import MemcmpFilter, RawAccount

TOKEN_OWNER_RECORD_SEED = b"governance"


def get_token_owner_record_address(
    program_id: Pubkey,
    realm: Pubkey,
    mint: Pubkey,
    owner: Pubkey,
) -> Pubkey:
    """SPL Governance TokenOwnerRecord PDA: ["governance", realm, mint, owner]."""
    seeds = [TOKEN_OWNER_RECORD_SEED, bytes(realm), bytes(mint), bytes(owner)]
    address, _ = Pubkey.find_program_address(seeds, program_id)
    return address


class AccountSource(Protocol):
    """Read-only access to program accounts. Failures raise AccountSourceError."""

    async def get_program_accounts(
        self,
        program_id: Pubkey,
        *,
        data_size: int | None = None,
        memcmp: Sequence[MemcmpFilter] = (),
    ) -> list[RawAccount]:
        """Return every account of program_id matching all given filters."""
        ...

    async def get_account(self, address: Pubkey) -> RawAccount | None:
        """Return the account at address, or None when it does not exist."""
        ...

    def derive_record_address(
        self,
        program_id: Pubkey,
        realm: Pubkey,
        mint: Pubkey,
        owner: Pubkey,
    ) -> Pubkey:
        ...
