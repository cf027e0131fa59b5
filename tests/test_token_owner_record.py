"""
Tests for the Token Owner Record fallback (PDA lookup, scan, parsing).
"""

from __future__ import annotations

import asyncio

import pytest
from solders.pubkey import Pubkey

from conftest import VALID_WALLET_2, token_owner_record_buffer
from vsr_governance.account_source import get_token_owner_record_address
from vsr_governance.core.exceptions import AccountSourceError
from vsr_governance.vsr.token_owner_record import (
    EMPTY_RECORD,
    TOKEN_OWNER_RECORD_SIZE,
    get_token_owner_record,
    parse_token_owner_record,
)


def _run(source, wallet, settings):
    return asyncio.run(get_token_owner_record(source, wallet, settings=settings))


def test_parse_record_with_delegate(settings, wallet):
    delegate = Pubkey.from_string(VALID_WALLET_2)
    data = token_owner_record_buffer(
        settings.realm, settings.governance_mint, wallet, 250_500_000, delegate=delegate
    )
    record = parse_token_owner_record(data)
    assert record.governing_token_deposit_amount == 250_500_000
    assert record.deposit_amount_tokens == 250.5
    assert record.governance_delegate == delegate
    assert record.realm == settings.realm
    assert record.governing_token_mint == settings.governance_mint
    assert record.governing_token_owner == wallet


def test_parse_record_without_delegate(settings, wallet):
    data = token_owner_record_buffer(settings.realm, settings.governance_mint, wallet, 1_000_000)
    record = parse_token_owner_record(data)
    assert record.governing_token_deposit_amount == 1_000_000
    assert record.governance_delegate is None


def test_parse_truncated_record_returns_empty(settings, wallet):
    data = token_owner_record_buffer(settings.realm, settings.governance_mint, wallet, 1_000_000)
    assert parse_token_owner_record(data[:100]) == EMPTY_RECORD
    assert parse_token_owner_record(b"") == EMPTY_RECORD
    assert EMPTY_RECORD.governing_token_deposit_amount == 0
    assert EMPTY_RECORD.governance_delegate is None


def test_found_by_pda(source, wallet, settings):
    program = settings.governance_program_id
    pda = get_token_owner_record_address(program, settings.realm, settings.governance_mint, wallet)
    data = token_owner_record_buffer(settings.realm, settings.governance_mint, wallet, 5_000_000_000)
    source.add(program, data, address=pda)

    record = _run(source, wallet, settings)

    assert record.address == pda
    assert record.governing_token_deposit_amount == 5_000_000_000
    assert ("getAccountInfo", pda) in source.calls
    assert not any(call[0] == "getProgramAccounts" for call in source.calls)


def test_pda_matches_spl_governance_seeds(settings, wallet):
    expected, _ = Pubkey.find_program_address(
        [b"governance", bytes(settings.realm), bytes(settings.governance_mint), bytes(wallet)],
        settings.governance_program_id,
    )
    assert (
        get_token_owner_record_address(
            settings.governance_program_id, settings.realm, settings.governance_mint, wallet
        )
        == expected
    )


def test_found_by_scan_when_pda_missing(source, wallet, settings):
    program = settings.governance_program_id
    other_owner = Pubkey.from_string(VALID_WALLET_2)
    source.add(program, token_owner_record_buffer(settings.realm, settings.governance_mint, other_owner, 9_000_000))
    source.add(program, token_owner_record_buffer(Pubkey.new_unique(), settings.governance_mint, wallet, 8_000_000))
    target = source.add(
        program, token_owner_record_buffer(settings.realm, settings.governance_mint, wallet, 7_000_000)
    )

    record = _run(source, wallet, settings)

    assert record.address == target
    assert record.governing_token_deposit_amount == 7_000_000
    scan = [call for call in source.calls if call[0] == "getProgramAccounts"][0]
    assert scan[2] == TOKEN_OWNER_RECORD_SIZE


def test_missing_everywhere_returns_empty(source, wallet, settings):
    assert _run(source, wallet, settings) == EMPTY_RECORD


def test_source_failure_propagates(source, wallet, settings):
    source.fail(settings.governance_program_id)
    with pytest.raises(AccountSourceError):
        _run(source, wallet, settings)


def test_empty_pda_account_is_parsed_without_scan(source, wallet, settings):
    program = settings.governance_program_id
    pda = get_token_owner_record_address(program, settings.realm, settings.governance_mint, wallet)
    source.add(program, b"", address=pda)
    source.add(program, token_owner_record_buffer(settings.realm, settings.governance_mint, wallet, 7_000_000))

    record = _run(source, wallet, settings)

    assert record == EMPTY_RECORD
    assert not any(call[0] == "getProgramAccounts" for call in source.calls)
