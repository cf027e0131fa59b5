"""
Data models for decoded VSR state and resolution results.

Every record here is derived from raw buffers per request and never persisted.
to_dict() gives the JSON shape returned to callers (camelCase keys).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any

from solders.pubkey import Pubkey

# Timestamps outside this window are treated as garbage, not as lockups
MIN_SANE_TS = 1577836800  # 2020-01-01
MAX_SANE_TS = 1893456000  # 2030-01-01


class LockupKind(IntEnum):
    NONE = 0
    CLIFF = 1
    CONSTANT = 2
    VESTING = 3
    MONTHLY = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()


class DepositClassification(str, Enum):
    UNLOCKED = "unlocked"
    ACTIVE_LOCKUP = "active_lockup"
    EXPIRED_LOCKUP = "expired_lockup"


class PowerSource(str, Enum):
    VSR_SDK = "vsr_sdk"
    TOKEN_OWNER_RECORD = "token_owner_record"
    NONE = "none"
    ERROR = "error"


@dataclass(frozen=True)
class Lockup:
    kind: LockupKind
    start_ts: int
    end_ts: int

    def is_sane(self) -> bool:
        """Kind is a real lockup, start precedes end, both inside the calendar window."""
        return (
            LockupKind.CLIFF <= self.kind <= LockupKind.MONTHLY
            and MIN_SANE_TS < self.start_ts < self.end_ts < MAX_SANE_TS
        )


@dataclass(frozen=True)
class LockupDetails:
    """Human-readable view of the lockup applied to a deposit."""

    type: str
    is_active: bool
    start_date: str
    """ISO date (YYYY-MM-DD, UTC)."""
    end_date: str
    remaining_days: int
    total_duration_days: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "isActive": self.is_active,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "remainingDays": self.remaining_days,
            "totalDurationDays": self.total_duration_days,
        }


@dataclass(frozen=True)
class DepositRecord:
    amount: float
    """Token units (raw / 1e6)."""
    multiplier: float
    power: float
    is_locked: bool
    classification: DepositClassification
    lockup_details: LockupDetails | None
    source_offset: int
    """Byte offset of the amount field in the voter account."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "amount": self.amount,
            "multiplier": self.multiplier,
            "power": self.power,
            "isLocked": self.is_locked,
            "classification": self.classification.value,
            "lockupDetails": self.lockup_details.to_dict() if self.lockup_details else None,
            "offset": self.source_offset,
        }


@dataclass(frozen=True)
class ShadowRecord:
    """Deposit-shaped delegation/bookkeeping value; never counted as power."""

    amount: float
    source_offset: int
    note: str
    kind: str = "delegation_marker"

    def to_dict(self) -> dict[str, Any]:
        return {
            "amount": self.amount,
            "type": self.kind,
            "offset": self.source_offset,
            "note": self.note,
        }


@dataclass(frozen=True)
class ExtractionResult:
    deposits: tuple[DepositRecord, ...] = ()
    shadows: tuple[ShadowRecord, ...] = ()


@dataclass(frozen=True)
class NativePowerResult:
    total_power: float = 0.0
    locked_power: float = 0.0
    unlocked_power: float = 0.0
    deposits: tuple[DepositRecord, ...] = ()
    shadows: tuple[ShadowRecord, ...] = ()


@dataclass(frozen=True)
class TokenOwnerRecord:
    governing_token_deposit_amount: int = 0
    """Raw u64 as stored on chain (not scaled by mint decimals)."""
    governance_delegate: Pubkey | None = None
    address: Pubkey | None = None
    realm: Pubkey | None = None
    governing_token_mint: Pubkey | None = None
    governing_token_owner: Pubkey | None = None

    @property
    def deposit_amount_tokens(self) -> float:
        """Deposit in token units, assuming 6 mint decimals."""
        return self.governing_token_deposit_amount / 1_000_000


@dataclass(frozen=True)
class CanonicalPowerResult:
    wallet: str
    native_governance_power: float
    delegated_governance_power: float
    total_governance_power: float
    source: PowerSource
    deposits: tuple[DepositRecord, ...] | None = None
    details: dict[str, Any] | None = None
    error: str | None = None
    shadows: tuple[ShadowRecord, ...] = field(default=(), repr=False)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "wallet": self.wallet,
            "nativeGovernancePower": self.native_governance_power,
            "delegatedGovernancePower": self.delegated_governance_power,
            "totalGovernancePower": self.total_governance_power,
            "source": self.source.value,
        }
        if self.deposits:
            out["deposits"] = [d.to_dict() for d in self.deposits]
        if self.details is not None:
            out["details"] = self.details
        if self.error is not None:
            out["error"] = self.error
        return out
