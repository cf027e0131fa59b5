"""
Canonical governance power for a wallet.

Precedence:
    1. VSR: native deposit power + delegated power, when their sum is positive
    2. Token Owner Record deposit, when positive
    3. none (all zeros)
Any failure along the way yields source "error" with zero totals; this
function never raises to its caller and never retries.
"""

from __future__ import annotations

import asyncio
import time

from solders.pubkey import Pubkey

from vsr_governance.account_source import AccountSource, SolanaAccountSource
from vsr_governance.config import GovernanceSettings, get_settings
from vsr_governance.utils.wallet_utils import to_pubkey
from vsr_governance.vsr.delegation import calculate_delegated_governance_power
from vsr_governance.vsr.models import CanonicalPowerResult, NativePowerResult, PowerSource
from vsr_governance.vsr.native import calculate_native_governance_power
from vsr_governance.vsr.token_owner_record import get_token_owner_record
from vsr_governance.vsr_logging import bind_wallet


def _zero_result(wallet_id: str, source: PowerSource, error: str | None = None) -> CanonicalPowerResult:
    return CanonicalPowerResult(
        wallet=wallet_id,
        native_governance_power=0.0,
        delegated_governance_power=0.0,
        total_governance_power=0.0,
        source=source,
        error=error,
    )


async def _scan_vsr(
    source: AccountSource,
    wallet: Pubkey,
    settings: GovernanceSettings,
    now: int,
) -> tuple[NativePowerResult, float]:
    """Run the native and delegated scans concurrently and join them."""
    native, delegated = await asyncio.gather(
        calculate_native_governance_power(source, wallet, settings=settings, now=now),
        calculate_delegated_governance_power(source, wallet, settings=settings),
        return_exceptions=True,
    )
    # both branches finish before either failure is surfaced
    for branch in (native, delegated):
        if isinstance(branch, BaseException):
            raise branch
    return native, delegated


async def _resolve(
    source: AccountSource,
    wallet: Pubkey,
    settings: GovernanceSettings,
    now: int,
) -> CanonicalPowerResult:
    wallet_id = str(wallet)
    log = bind_wallet(wallet_id)
    log.info(
        "governance_power_start",
        vsr_program_id=str(settings.vsr_program_id),
        registrar=str(settings.registrar),
    )

    native, delegated = await _scan_vsr(source, wallet, settings, now)
    total = native.total_power + delegated
    if total > 0:
        log.info(
            "governance_power_resolved",
            source=PowerSource.VSR_SDK.value,
            native_power=native.total_power,
            delegated_power=delegated,
        )
        return CanonicalPowerResult(
            wallet=wallet_id,
            native_governance_power=native.total_power,
            delegated_governance_power=delegated,
            total_governance_power=total,
            source=PowerSource.VSR_SDK,
            deposits=native.deposits or None,
            details={
                "lockedPower": native.locked_power,
                "unlockedPower": native.unlocked_power,
            },
            shadows=native.shadows,
        )

    record = await get_token_owner_record(source, wallet, settings=settings)
    amount = record.governing_token_deposit_amount
    if amount > 0:
        log.info(
            "governance_power_resolved",
            source=PowerSource.TOKEN_OWNER_RECORD.value,
            native_power=amount,
        )
        mint = record.governing_token_mint or settings.governance_mint
        return CanonicalPowerResult(
            wallet=wallet_id,
            native_governance_power=amount,
            delegated_governance_power=0.0,
            total_governance_power=amount,
            source=PowerSource.TOKEN_OWNER_RECORD,
            details={
                "depositAmount": amount,
                "depositAmountTokens": record.deposit_amount_tokens,
                "mint": str(mint),
            },
        )

    log.info("governance_power_resolved", source=PowerSource.NONE.value)
    return _zero_result(wallet_id, PowerSource.NONE)


async def resolve_governance_power(
    wallet: str | Pubkey,
    source: AccountSource | None = None,
    *,
    settings: GovernanceSettings | None = None,
    now: int | None = None,
) -> CanonicalPowerResult:
    """
    Resolve a wallet's canonical governance power.

    When ``source`` is None an RPC account source is opened from settings and
    closed afterwards. ``now`` pins the clock (unix seconds) for lockup decay.
    """
    wallet_id = str(wallet)
    try:
        settings = settings or get_settings()
        wallet_pubkey = to_pubkey(wallet)
        if now is None:
            now = int(time.time())
        if source is None:
            async with SolanaAccountSource.from_settings(settings) as rpc_source:
                return await _resolve(rpc_source, wallet_pubkey, settings, now)
        return await _resolve(source, wallet_pubkey, settings, now)
    except Exception as e:
        bind_wallet(wallet_id).exception("governance_power_error", error=str(e))
        return _zero_result(wallet_id, PowerSource.ERROR, error=f"{type(e).__name__}: {e}")


def get_canonical_governance_power(
    wallet: str | Pubkey,
    source: AccountSource | None = None,
    *,
    settings: GovernanceSettings | None = None,
    now: int | None = None,
) -> CanonicalPowerResult:
    """Blocking wrapper around resolve_governance_power for scripts."""
    return asyncio.run(resolve_governance_power(wallet, source, settings=settings, now=now))
