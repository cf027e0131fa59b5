"""
Delegated governance power: Token Owner Records that name the wallet as
governance delegate. Delegated deposits count at face value (no multiplier).
"""

from __future__ import annotations

from solders.pubkey import Pubkey

from vsr_governance.account_source import AccountSource, MemcmpFilter
from vsr_governance.config import GovernanceSettings, get_settings
from vsr_governance.vsr.layout import read_token_amount
from vsr_governance.vsr_logging import get_logger

logger = get_logger(__name__)

# Offsets used when scanning for delegations; they differ from the
# Token Owner Record fallback layout and are kept as observed.
DELEGATE_OFFSET = 105
DELEGATED_AMOUNT_OFFSET = 33


async def calculate_delegated_governance_power(
    source: AccountSource,
    wallet: Pubkey,
    *,
    settings: GovernanceSettings | None = None,
) -> float:
    """Sum deposit amounts (token units) of records delegated to ``wallet``."""
    settings = settings or get_settings()
    wallet_id = str(wallet)

    records = await source.get_program_accounts(
        settings.governance_program_id,
        memcmp=[MemcmpFilter.for_pubkey(DELEGATE_OFFSET, wallet)],
    )
    logger.info("delegation_scan", wallet_id=wallet_id, record_count=len(records))

    total = 0.0
    for record in records:
        amount = read_token_amount(record.data, DELEGATED_AMOUNT_OFFSET)
        if amount is None:
            logger.warning(
                "delegation_record_unparseable",
                wallet_id=wallet_id,
                account=str(record.address),
                data_len=len(record.data),
            )
            continue
        if amount > 0:
            total += amount
            logger.debug(
                "delegation_counted",
                wallet_id=wallet_id,
                account=str(record.address),
                amount=amount,
            )

    logger.info("delegated_power_total", wallet_id=wallet_id, delegated_power=total)
    return total
