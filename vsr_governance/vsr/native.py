"""
Native governance power: deposits in the voter accounts a wallet controls.
"""

from __future__ import annotations

import time

from solders.pubkey import Pubkey

from vsr_governance.account_source import AccountSource, MemcmpFilter
from vsr_governance.config import GovernanceSettings, get_settings
from vsr_governance.vsr.extractor import is_delegation_marker, parse_vsr_deposits
from vsr_governance.vsr.layout import AUTHORITY_OFFSET, VSR_LAYOUT_V1, VsrLayout, read_pubkey_bytes
from vsr_governance.vsr.models import DepositRecord, NativePowerResult, ShadowRecord
from vsr_governance.vsr_logging import get_logger

logger = get_logger(__name__)


async def calculate_native_governance_power(
    source: AccountSource,
    wallet: Pubkey,
    *,
    settings: GovernanceSettings | None = None,
    now: int | None = None,
    layout: VsrLayout = VSR_LAYOUT_V1,
) -> NativePowerResult:
    """
    Sum deposit power over every voter account whose authority is ``wallet``.

    One account failing to decode is logged and skipped. Account source errors
    propagate. A wallet whose total rounds to a delegation marker amount is
    reported as zero: a marker split across accounts slips past the
    per-deposit filter.
    """
    settings = settings or get_settings()
    if now is None:
        now = int(time.time())
    wallet_id = str(wallet)

    accounts = await source.get_program_accounts(
        settings.vsr_program_id,
        data_size=layout.account_size,
        memcmp=[MemcmpFilter.for_pubkey(AUTHORITY_OFFSET, wallet)],
    )
    logger.info("native_power_scan", wallet_id=wallet_id, account_count=len(accounts))

    total_power = 0.0
    locked_power = 0.0
    unlocked_power = 0.0
    deposits: list[DepositRecord] = []
    shadows: list[ShadowRecord] = []

    for account in accounts:
        if read_pubkey_bytes(account.data, AUTHORITY_OFFSET) != bytes(wallet):
            continue
        try:
            extracted = parse_vsr_deposits(account.data, now, layout)
        except Exception as e:
            logger.warning(
                "voter_account_decode_failed",
                wallet_id=wallet_id,
                account=str(account.address),
                error=str(e),
            )
            continue

        logger.info(
            "voter_account_found",
            wallet_id=wallet_id,
            account=str(account.address),
            deposit_count=len(extracted.deposits),
            shadow_count=len(extracted.shadows),
        )
        for deposit in extracted.deposits:
            total_power += deposit.power
            if deposit.is_locked:
                locked_power += deposit.power
            else:
                unlocked_power += deposit.power
            logger.debug(
                "deposit_counted",
                wallet_id=wallet_id,
                amount=round(deposit.amount, 6),
                multiplier=deposit.multiplier,
                power=round(deposit.power, 6),
                offset=deposit.source_offset,
            )
        deposits.extend(extracted.deposits)
        shadows.extend(extracted.shadows)

    if is_delegation_marker(total_power):
        logger.info("native_power_filtered_marker", wallet_id=wallet_id, total_power=total_power)
        return NativePowerResult(shadows=tuple(shadows))

    logger.info(
        "native_power_total",
        wallet_id=wallet_id,
        total_power=total_power,
        locked_power=locked_power,
        unlocked_power=unlocked_power,
    )
    return NativePowerResult(
        total_power=total_power,
        locked_power=locked_power,
        unlocked_power=unlocked_power,
        deposits=tuple(deposits),
        shadows=tuple(shadows),
    )
