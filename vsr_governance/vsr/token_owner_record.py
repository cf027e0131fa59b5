"""
SPL Governance Token Owner Record fallback.

Used when a wallet has no VSR power: the record's governing token deposit,
as the raw on-chain integer, is its voting weight. Located by PDA first,
then by a scan of all records.

Layout:
    0..32    realm
    32..64   governing_token_mint
    64..96   governing_token_owner
    96..104  governing_token_deposit_amount (u64)
    104      has_governance_delegate (bool)
    105..137 governance_delegate (optional)
"""

from __future__ import annotations

from solders.pubkey import Pubkey

from vsr_governance.account_source import AccountSource
from vsr_governance.config import GovernanceSettings, get_settings
from vsr_governance.vsr.layout import read_pubkey_bytes, read_u64_le, read_u8
from vsr_governance.vsr.models import TokenOwnerRecord
from vsr_governance.vsr_logging import get_logger

logger = get_logger(__name__)

TOKEN_OWNER_RECORD_SIZE = 404
REALM_OFFSET = 0
MINT_OFFSET = 32
OWNER_OFFSET = 64
DEPOSIT_AMOUNT_OFFSET = 96
HAS_DELEGATE_OFFSET = 104
DELEGATE_OFFSET = 105

EMPTY_RECORD = TokenOwnerRecord()


def _pubkey_at(data: bytes, offset: int) -> Pubkey:
    raw = read_pubkey_bytes(data, offset)
    if raw is None:
        raise ValueError(f"pubkey at {offset} out of bounds (len={len(data)})")
    return Pubkey.from_bytes(raw)


def parse_token_owner_record(data: bytes, address: Pubkey | None = None) -> TokenOwnerRecord:
    """Decode a Token Owner Record; a zero-amount, no-delegate record if it cannot be decoded."""
    try:
        realm = _pubkey_at(data, REALM_OFFSET)
        mint = _pubkey_at(data, MINT_OFFSET)
        owner = _pubkey_at(data, OWNER_OFFSET)
        raw_amount = read_u64_le(data, DEPOSIT_AMOUNT_OFFSET)
        if raw_amount is None:
            raise ValueError(f"deposit amount out of bounds (len={len(data)})")
        delegate = None
        if read_u8(data, HAS_DELEGATE_OFFSET) == 1:
            delegate_bytes = read_pubkey_bytes(data, DELEGATE_OFFSET)
            if delegate_bytes is not None:
                delegate = Pubkey.from_bytes(delegate_bytes)
    except ValueError as e:
        logger.warning(
            "token_owner_record_parse_failed",
            account=str(address) if address else None,
            error=str(e),
        )
        return EMPTY_RECORD

    record = TokenOwnerRecord(
        governing_token_deposit_amount=raw_amount,
        governance_delegate=delegate,
        address=address,
        realm=realm,
        governing_token_mint=mint,
        governing_token_owner=owner,
    )
    logger.info(
        "token_owner_record_parsed",
        account=str(address) if address else None,
        deposit_amount=record.governing_token_deposit_amount,
        governance_delegate=str(delegate) if delegate else None,
    )
    return record


def _matches(data: bytes, realm: Pubkey, mint: Pubkey, owner: Pubkey) -> bool:
    return (
        read_pubkey_bytes(data, REALM_OFFSET) == bytes(realm)
        and read_pubkey_bytes(data, MINT_OFFSET) == bytes(mint)
        and read_pubkey_bytes(data, OWNER_OFFSET) == bytes(owner)
    )


async def get_token_owner_record(
    source: AccountSource,
    wallet: Pubkey,
    *,
    settings: GovernanceSettings | None = None,
) -> TokenOwnerRecord:
    """Find and decode the wallet's Token Owner Record for the configured realm and mint."""
    settings = settings or get_settings()
    wallet_id = str(wallet)
    program_id = settings.governance_program_id

    pda = source.derive_record_address(program_id, settings.realm, settings.governance_mint, wallet)
    logger.info("token_owner_record_pda", wallet_id=wallet_id, pda=str(pda))
    account = await source.get_account(pda)
    if account is not None:
        return parse_token_owner_record(account.data, pda)

    logger.info("token_owner_record_scan", wallet_id=wallet_id)
    records = await source.get_program_accounts(program_id, data_size=TOKEN_OWNER_RECORD_SIZE)
    for record in records:
        if _matches(record.data, settings.realm, settings.governance_mint, wallet):
            logger.info("token_owner_record_found", wallet_id=wallet_id, account=str(record.address))
            return parse_token_owner_record(record.data, record.address)

    logger.info("token_owner_record_missing", wallet_id=wallet_id, scanned=len(records))
    return EMPTY_RECORD
