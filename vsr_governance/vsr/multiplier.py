"""
VSR lockup multiplier.

multiplier = (BASE + MAX_EXTRA * ratio) / BASE, scaled by an empirical 0.985
and rounded to 3 decimals. ratio saturates at one year of remaining lock.
The tuning factor and saturation window were calibrated against voting power
shown for known wallets; do not change them without new reference data.
"""

from __future__ import annotations

import math
import time

from vsr_governance.vsr.models import Lockup, LockupKind

BASE = 1_000_000_000
MAX_EXTRA = 3_000_000_000
SATURATION_SECS = 31_536_000  # 365 days
TUNING_FACTOR = 0.985


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves away from zero for positive values (not banker's rounding)."""
    scale = 10 ** ndigits
    return math.floor(value * scale + 0.5) / scale


def lockup_ratio(lockup: Lockup, now: int) -> float:
    """Fraction of the maximum bonus earned by this lockup at ``now`` (0..1)."""
    duration = max(lockup.end_ts - lockup.start_ts, 1)
    remaining = max(lockup.end_ts - now, 0)

    if lockup.kind in (LockupKind.CLIFF, LockupKind.MONTHLY):
        return min(1.0, remaining / SATURATION_SECS)
    if lockup.kind in (LockupKind.CONSTANT, LockupKind.VESTING):
        unlocked_ratio = min(1.0, max(0.0, (now - lockup.start_ts) / duration))
        locked_ratio = 1 - unlocked_ratio
        return min(1.0, (locked_ratio * duration) / SATURATION_SECS)
    return 0.0


def calculate_vsr_multiplier(lockup: Lockup, now: int | None = None) -> float:
    """Return the voting power multiplier for a lockup; 1.0 exactly for NONE."""
    if lockup.kind == LockupKind.NONE:
        return 1.0
    if now is None:
        now = int(time.time())

    bonus = MAX_EXTRA * lockup_ratio(lockup, now)
    raw_multiplier = (BASE + bonus) / 1e9
    return round_half_up(raw_multiplier * TUNING_FACTOR, 3)
