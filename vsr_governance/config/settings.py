"""
Resolver settings.

Typed view over config.env: RPC endpoint and retry policy for the account
source, plus the program ids and DAO accounts every scan is keyed on.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field

from solders.pubkey import Pubkey

from vsr_governance.config import env


def _pubkey_factory(getter):
    return lambda: Pubkey.from_string(getter())


@dataclass(frozen=True)
class GovernanceSettings:
    """Settings for one DAO deployment (env or explicit)."""

    solana_rpc_url: str = field(default_factory=env.get_solana_rpc_url)
    vsr_program_id: Pubkey = field(default_factory=_pubkey_factory(env.get_vsr_program_id))
    governance_program_id: Pubkey = field(
        default_factory=_pubkey_factory(env.get_spl_governance_program_id)
    )
    realm: Pubkey = field(default_factory=_pubkey_factory(env.get_realm))
    registrar: Pubkey = field(default_factory=_pubkey_factory(env.get_registrar))
    governance_mint: Pubkey = field(default_factory=_pubkey_factory(env.get_governance_mint))
    rpc_timeout_sec: float = field(default_factory=env.get_rpc_timeout_sec)
    rpc_max_retries: int = field(default_factory=env.get_rpc_max_retries)
    rpc_retry_backoff_sec: float = field(default_factory=env.get_rpc_retry_backoff_sec)
    rpc_commitment: str = field(default_factory=env.get_rpc_commitment)


@functools.lru_cache(maxsize=1)
def get_settings() -> GovernanceSettings:
    """
    Return the current settings, built from the environment on first call.

    Tests that change env vars should call get_settings.cache_clear().
    """
    return GovernanceSettings()
