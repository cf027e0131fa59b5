"""
Pytest fixtures for vsr_governance tests.

In-memory account source honouring dataSize / memcmp filters, fixed settings,
and builders for voter and Token Owner Record buffers.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Sequence

import pytest
from solders.pubkey import Pubkey

from vsr_governance.account_source import MemcmpFilter, RawAccount, get_token_owner_record_address
from vsr_governance.config import GovernanceSettings
from vsr_governance.core.exceptions import AccountSourceError
from vsr_governance.vsr.layout import AUTHORITY_OFFSET, VOTER_ACCOUNT_SIZE

VALID_WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"
VALID_WALLET_2 = "7F1WzVNQ1Qpurqxxdyv3UrFQR3uoNepULVW9A4bAJ5nZ"

# 2025-06-15T15:06:40Z
NOW = 1_750_000_000
DAY = 86400

TOKEN_OWNER_RECORD_SIZE = 404


class FakeAccountSource:
    """AccountSource over a fixed snapshot of accounts, grouped by program."""

    def __init__(self) -> None:
        self.programs: dict[Pubkey, list[RawAccount]] = defaultdict(list)
        self.failing_programs: set[Pubkey] = set()
        self.calls: list[tuple] = []

    def add(self, program_id: Pubkey, data: bytes, address: Pubkey | None = None) -> Pubkey:
        address = address or Pubkey.new_unique()
        self.programs[program_id].append(RawAccount(address=address, data=bytes(data)))
        return address

    def fail(self, program_id: Pubkey) -> None:
        self.failing_programs.add(program_id)

    async def get_program_accounts(
        self,
        program_id: Pubkey,
        *,
        data_size: int | None = None,
        memcmp: Sequence[MemcmpFilter] = (),
    ) -> list[RawAccount]:
        self.calls.append(("getProgramAccounts", program_id, data_size, tuple(memcmp)))
        if program_id in self.failing_programs:
            raise AccountSourceError("RPC unavailable", method="getProgramAccounts")
        return [
            account
            for account in self.programs[program_id]
            if (data_size is None or len(account.data) == data_size)
            and all(f.matches(account.data) for f in memcmp)
        ]

    async def get_account(self, address: Pubkey) -> RawAccount | None:
        self.calls.append(("getAccountInfo", address))
        for accounts in self.programs.values():
            for account in accounts:
                if account.address == address:
                    return account
        return None

    def derive_record_address(self, program_id, realm, mint, owner) -> Pubkey:
        return get_token_owner_record_address(program_id, realm, mint, owner)


class VoterBuffer:
    """Builds a synthetic VSR voter account (2728 bytes by default)."""

    def __init__(self, authority: Pubkey | str = VALID_WALLET, size: int = VOTER_ACCOUNT_SIZE) -> None:
        if isinstance(authority, str):
            authority = Pubkey.from_string(authority)
        self.data = bytearray(size)
        if size >= AUTHORITY_OFFSET + 32:
            self.data[AUTHORITY_OFFSET:AUTHORITY_OFFSET + 32] = bytes(authority)

    def u64(self, offset: int, value: int) -> "VoterBuffer":
        self.data[offset:offset + 8] = value.to_bytes(8, "little")
        return self

    def amount(self, offset: int, tokens: float) -> "VoterBuffer":
        raw = int(round(tokens * 1_000_000))
        # the byte after the low byte doubles as a stale-flag position
        assert raw.to_bytes(8, "little")[1] != 1, "amount would trip the stale flag check"
        return self.u64(offset, raw)

    def lockup(self, start_offset: int, kind: int, start_ts: int, end_ts: int) -> "VoterBuffer":
        self.u64(start_offset, start_ts)
        self.u64(start_offset + 8, end_ts)
        self.data[start_offset + 16] = kind
        return self

    def byte(self, offset: int, value: int) -> "VoterBuffer":
        self.data[offset] = value
        return self

    def build(self) -> bytes:
        return bytes(self.data)


def token_owner_record_buffer(
    realm: Pubkey,
    mint: Pubkey,
    owner: Pubkey,
    raw_amount: int,
    delegate: Pubkey | None = None,
    size: int = TOKEN_OWNER_RECORD_SIZE,
) -> bytes:
    data = bytearray(size)
    data[0:32] = bytes(realm)
    data[32:64] = bytes(mint)
    data[64:96] = bytes(owner)
    data[96:104] = raw_amount.to_bytes(8, "little")
    if delegate is not None:
        data[104] = 1
        data[105:137] = bytes(delegate)
    return bytes(data)


def delegation_record_buffer(delegate: Pubkey, raw_amount: int, size: int = TOKEN_OWNER_RECORD_SIZE) -> bytes:
    """Record as the delegation scan reads it: amount at 33, delegate at 105."""
    data = bytearray(size)
    data[33:41] = raw_amount.to_bytes(8, "little")
    data[104] = 1
    data[105:137] = bytes(delegate)
    return bytes(data)


@pytest.fixture
def settings() -> GovernanceSettings:
    """Fixed IslandDAO settings; no env lookups, no retry delays."""
    return GovernanceSettings(
        solana_rpc_url="http://rpc.test",
        vsr_program_id=Pubkey.from_string("vsr2nfGVNHmSY8uxoBGqq8AQbwz3JwaEaHqGbsTPXqQ"),
        governance_program_id=Pubkey.from_string("GovER5Lthms3bLBqWub97yVrMmEogzX7xNjdXpPPCVZw"),
        realm=Pubkey.from_string("F9VL4wo49aUe8FufjMbU6uhdfyDRqKY54WpzdpncUSk9"),
        registrar=Pubkey.from_string("5sGLEKcJ35UGdbHtSWMtGbhLqRycQJSCaUAyEpnz6TA2"),
        governance_mint=Pubkey.from_string("Ds52CDgqdWbTWsua1hgT3AuSSy4FNx2Ezge1br3jQ14a"),
        rpc_timeout_sec=5.0,
        rpc_max_retries=3,
        rpc_retry_backoff_sec=0.0,
        rpc_commitment="confirmed",
    )


@pytest.fixture
def wallet() -> Pubkey:
    return Pubkey.from_string(VALID_WALLET)


@pytest.fixture
def source() -> FakeAccountSource:
    return FakeAccountSource()
