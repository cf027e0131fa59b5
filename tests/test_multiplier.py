"""
Tests for the VSR lockup multiplier (calculate_vsr_multiplier).
"""

from __future__ import annotations

import pytest

from conftest import DAY, NOW
from vsr_governance.vsr.models import Lockup, LockupKind
from vsr_governance.vsr.multiplier import (
    SATURATION_SECS,
    calculate_vsr_multiplier,
    round_half_up,
)


def test_none_lockup_is_exactly_one():
    """kind NONE returns 1.0 untouched by tuning or rounding, whatever the timestamps."""
    assert calculate_vsr_multiplier(Lockup(LockupKind.NONE, 0, 0), NOW) == 1.0
    assert calculate_vsr_multiplier(Lockup(LockupKind.NONE, NOW, NOW + 400 * DAY), NOW) == 1.0


@pytest.mark.parametrize("kind", [LockupKind.CLIFF, LockupKind.MONTHLY])
def test_cliff_and_monthly_saturate_at_one_year(kind):
    """remaining == 365 days: ratio 1, raw 4.0, tuned 4.0 * 0.985 = 3.94."""
    lockup = Lockup(kind, NOW - 30 * DAY, NOW + SATURATION_SECS)
    assert calculate_vsr_multiplier(lockup, NOW) == 3.94


@pytest.mark.parametrize("kind", [LockupKind.CLIFF, LockupKind.MONTHLY])
def test_cliff_and_monthly_beyond_one_year_are_capped(kind):
    lockup = Lockup(kind, NOW - DAY, NOW + 3 * SATURATION_SECS)
    assert calculate_vsr_multiplier(lockup, NOW) == 3.94


@pytest.mark.parametrize("kind", [LockupKind.CLIFF, LockupKind.MONTHLY])
def test_elapsed_cliff_is_tuning_factor_only(kind):
    """No remaining lock: bonus 0, raw 1.0, tuned 0.985 (below the unlocked 1.0)."""
    assert calculate_vsr_multiplier(Lockup(kind, NOW - 100 * DAY, NOW), NOW) == 0.985
    assert calculate_vsr_multiplier(Lockup(kind, NOW - 100 * DAY, NOW - DAY), NOW) == 0.985


def test_cliff_partial_decay():
    """73 days remaining = 0.2 of a year: raw 1.6, tuned 1.576."""
    lockup = Lockup(LockupKind.CLIFF, NOW - 10 * DAY, NOW + 73 * DAY)
    assert calculate_vsr_multiplier(lockup, NOW) == 1.576


def test_vesting_uses_locked_share_of_duration():
    """Half vested over 146 days leaves 73 locked days: ratio 0.2 -> 1.576."""
    lockup = Lockup(LockupKind.VESTING, NOW - 73 * DAY, NOW + 73 * DAY)
    assert calculate_vsr_multiplier(lockup, NOW) == 1.576


def test_constant_not_started_counts_full_duration():
    """now before start: nothing unlocked, two-year duration saturates."""
    lockup = Lockup(LockupKind.CONSTANT, NOW + 10 * DAY, NOW + 740 * DAY)
    assert calculate_vsr_multiplier(lockup, NOW) == 3.94


def test_constant_fully_elapsed():
    lockup = Lockup(LockupKind.CONSTANT, NOW - 200 * DAY, NOW - 10 * DAY)
    assert calculate_vsr_multiplier(lockup, NOW) == 0.985


def test_zero_duration_does_not_divide_by_zero():
    lockup = Lockup(LockupKind.VESTING, NOW, NOW)
    assert calculate_vsr_multiplier(lockup, NOW) == 0.985


def test_multiplier_defaults_to_wall_clock():
    """Without now, a lockup ending far in the future is still saturated."""
    lockup = Lockup(LockupKind.CLIFF, 1_600_000_000, 1_890_000_000)
    assert calculate_vsr_multiplier(lockup) == 3.94


def test_multiplier_result_has_three_decimals():
    lockup = Lockup(LockupKind.CLIFF, NOW - DAY, NOW + 100 * DAY)
    value = calculate_vsr_multiplier(lockup, NOW)
    assert 1.0 < value < 3.94
    assert value == round(value, 3)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(999.5) == 1000
    assert round_half_up(999.499) == 999
    assert round_half_up(3.94 * 1000) == 3940
