"""
VSR deposit extractor — one raw voter account buffer to deposit records.

Voter accounts hold more deposit-shaped values than real deposits: delegation
markers, stale (withdrawn) slots and a phantom copy of the first direct amount.
Slots are walked in layout order and each value goes through the same filters:

    bounds -> dedup -> range -> phantom overlap -> delegation marker -> stale flag

Order matters: dedup and phantom decisions depend on earlier slots, so the
first slot to claim an amount owns it.
"""

from __future__ import annotations

import math
import time
from datetime import datetime, timezone

from vsr_governance.vsr.layout import (
    DELEGATION_MARKER_AMOUNTS,
    MAX_DEPOSIT_AMOUNT,
    MIN_DIRECT_SLOT_AMOUNT,
    MIN_LOCKUP_SLOT_AMOUNT,
    STALE_FLAG_VALUE,
    VSR_LAYOUT_V1,
    LockupMetaOffsets,
    LockupSlot,
    VsrLayout,
    read_token_amount,
    read_u64_le,
    read_u8,
)
from vsr_governance.vsr.models import (
    DepositClassification,
    DepositRecord,
    ExtractionResult,
    Lockup,
    LockupDetails,
    LockupKind,
    ShadowRecord,
)
from vsr_governance.vsr.multiplier import calculate_vsr_multiplier, round_half_up
from vsr_governance.vsr_logging import get_logger

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400


def amount_key(amount: float) -> int:
    """Dedup key: amount rounded to 3 decimals, as an integer."""
    return int(round_half_up(amount * 1000))


def is_delegation_marker(amount: float) -> bool:
    return int(round_half_up(amount)) in DELEGATION_MARKER_AMOUNTS


def has_stale_flag(data: bytes, offset: int, layout: VsrLayout = VSR_LAYOUT_V1) -> bool:
    """True when any byte next to the amount field is a used/withdrawn flag (== 1)."""
    # TODO: confirm the flag semantics against the VSR program's DepositEntry.is_used
    for delta in layout.stale_flag_deltas:
        if read_u8(data, offset + delta) == STALE_FLAG_VALUE:
            return True
    return False


def read_lockup(data: bytes, meta: LockupMetaOffsets) -> Lockup | None:
    """Decode one candidate lockup; None when out of bounds or not a sane lockup."""
    start_ts = read_u64_le(data, meta.start)
    end_ts = read_u64_le(data, meta.end)
    kind = read_u8(data, meta.kind)
    if start_ts is None or end_ts is None or kind is None:
        return None
    if not LockupKind.CLIFF <= kind <= LockupKind.MONTHLY:
        return None
    lockup = Lockup(kind=LockupKind(kind), start_ts=start_ts, end_ts=end_ts)
    return lockup if lockup.is_sane() else None


def best_lockup(data: bytes, slot: LockupSlot, now: int) -> tuple[Lockup | None, float]:
    """
    Pick the candidate lockup with the highest multiplier for an amount slot.

    A lockup only applies when its multiplier beats the unlocked 1.0; ties keep
    the first candidate found.
    """
    chosen: Lockup | None = None
    chosen_multiplier = 1.0
    for meta in slot.metadata:
        lockup = read_lockup(data, meta)
        if lockup is None:
            continue
        multiplier = calculate_vsr_multiplier(lockup, now)
        if multiplier > chosen_multiplier:
            chosen, chosen_multiplier = lockup, multiplier
    return chosen, chosen_multiplier


def _iso_date(ts: int) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).date().isoformat()


def lockup_details(lockup: Lockup, now: int) -> LockupDetails:
    remaining = max(lockup.end_ts - now, 0)
    duration = lockup.end_ts - lockup.start_ts
    return LockupDetails(
        type=lockup.kind.label,
        is_active=lockup.end_ts > now,
        start_date=_iso_date(lockup.start_ts),
        end_date=_iso_date(lockup.end_ts),
        remaining_days=math.ceil(remaining / SECONDS_PER_DAY),
        total_duration_days=math.ceil(duration / SECONDS_PER_DAY),
    )


class _BufferDecode:
    """State for decoding a single buffer; never shared across accounts."""

    def __init__(self, data: bytes, now: int, layout: VsrLayout) -> None:
        self.data = data
        self.now = now
        self.layout = layout
        self.claimed: set[int] = set()
        self.deposits: list[DepositRecord] = []
        self.shadows: list[ShadowRecord] = []

    def candidate_amount(self, offset: int, minimum: float) -> float | None:
        """
        Run the filters shared by every slot. Returns the amount when the slot
        should become a deposit, None when it was skipped or recorded as shadow.
        """
        amount = read_token_amount(self.data, offset)
        if amount is None:
            return None
        key = amount_key(amount)
        if key in self.claimed:
            return None
        if not minimum <= amount <= MAX_DEPOSIT_AMOUNT:
            return None

        parent = self.layout.phantom_parent(offset)
        if parent is not None:
            parent_amount = read_token_amount(self.data, parent)
            if parent_amount is not None and parent_amount >= MIN_DIRECT_SLOT_AMOUNT:
                logger.debug("deposit_filtered", reason="phantom_overlap", offset=offset, amount=amount)
                return None

        if is_delegation_marker(amount):
            rounded = int(round_half_up(amount))
            self.shadows.append(
                ShadowRecord(
                    amount=amount,
                    source_offset=offset,
                    note=f"{rounded} token delegation/shadow marker",
                )
            )
            self.claimed.add(key)
            logger.debug("deposit_filtered", reason="delegation_marker", offset=offset, amount=amount)
            return None

        # stale amounts are deliberately left unclaimed
        if has_stale_flag(self.data, offset, self.layout):
            logger.debug("deposit_filtered", reason="stale", offset=offset, amount=amount)
            return None
        return amount

    def lockup_slot(self, slot: LockupSlot) -> None:
        amount = self.candidate_amount(slot.amount_offset, MIN_LOCKUP_SLOT_AMOUNT)
        if amount is None:
            return
        lockup, multiplier = best_lockup(self.data, slot, self.now)
        self.emit(amount, slot.amount_offset, lockup, multiplier)

    def direct_slot(self, offset: int) -> None:
        amount = self.candidate_amount(offset, MIN_DIRECT_SLOT_AMOUNT)
        if amount is None:
            return
        self.emit(amount, offset, None, 1.0)

    def emit(self, amount: float, offset: int, lockup: Lockup | None, multiplier: float) -> None:
        self.claimed.add(amount_key(amount))
        if lockup is None:
            classification = DepositClassification.UNLOCKED
            details = None
        else:
            if lockup.end_ts > self.now:
                classification = DepositClassification.ACTIVE_LOCKUP
            else:
                classification = DepositClassification.EXPIRED_LOCKUP
            details = lockup_details(lockup, self.now)
        self.deposits.append(
            DepositRecord(
                amount=amount,
                multiplier=multiplier,
                power=amount * multiplier,
                is_locked=multiplier > 1.0,
                classification=classification,
                lockup_details=details,
                source_offset=offset,
            )
        )


def parse_vsr_deposits(
    data: bytes,
    now: int | None = None,
    layout: VsrLayout = VSR_LAYOUT_V1,
) -> ExtractionResult:
    """Decode deposits and shadow markers from one voter account buffer."""
    if now is None:
        now = int(time.time())
    decode = _BufferDecode(bytes(data), now, layout)
    for slot in layout.lockup_slots:
        decode.lockup_slot(slot)
    for offset in layout.direct_offsets:
        decode.direct_slot(offset)
    return ExtractionResult(deposits=tuple(decode.deposits), shadows=tuple(decode.shadows))
