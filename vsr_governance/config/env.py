"""
Environment variable loading for the VSR governance resolver.

- SOLANA_RPC_URL: RPC endpoint (read from .env)
- HELIUS_API_KEY: Helius API key (fallback for RPC URL)
- VSR_PROGRAM_ID / SPL_GOVERNANCE_PROGRAM_ID: program ids
- VSR_REALM / VSR_REGISTRAR / VSR_GOVERNANCE_MINT: DAO accounts
- RPC_TIMEOUT_SECONDS / RPC_MAX_RETRIES / RPC_RETRY_BACKOFF_SECONDS / RPC_COMMITMENT
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is vsr_governance/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

# IslandDAO deployment
DEFAULT_VSR_PROGRAM_ID = "vsr2nfGVNHmSY8uxoBGqq8AQbwz3JwaEaHqGbsTPXqQ"
DEFAULT_SPL_GOVERNANCE_PROGRAM_ID = "GovER5Lthms3bLBqWub97yVrMmEogzX7xNjdXpPPCVZw"
DEFAULT_REALM = "F9VL4wo49aUe8FufjMbU6uhdfyDRqKY54WpzdpncUSk9"
DEFAULT_REGISTRAR = "5sGLEKcJ35UGdbHtSWMtGbhLqRycQJSCaUAyEpnz6TA2"
DEFAULT_GOVERNANCE_MINT = "Ds52CDgqdWbTWsua1hgT3AuSSy4FNx2Ezge1br3jQ14a"

MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
HELIUS_MAINNET_URL_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={key}"

DEFAULT_RPC_TIMEOUT_SEC = 30.0
DEFAULT_RPC_MAX_RETRIES = 3
DEFAULT_RPC_RETRY_BACKOFF_SEC = 1.0
DEFAULT_RPC_COMMITMENT = "confirmed"


def load_vsr_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides set vars."""
    load_dotenv(_ENV_PATH)


def _env_str(name: str, default: str) -> str:
    load_vsr_env()
    return (os.getenv(name) or "").strip() or default


def get_solana_rpc_url() -> str:
    """
    Resolve Solana RPC URL from env.
    Order: SOLANA_RPC_URL > HELIUS_API_KEY > public mainnet.
    """
    load_vsr_env()
    url = (os.getenv("SOLANA_RPC_URL") or "").strip()
    if url:
        return url
    key = (os.getenv("HELIUS_API_KEY") or "").strip()
    if key:
        return HELIUS_MAINNET_URL_TEMPLATE.format(key=key)
    return MAINNET_RPC_URL


def get_vsr_program_id() -> str:
    return _env_str("VSR_PROGRAM_ID", DEFAULT_VSR_PROGRAM_ID)


def get_spl_governance_program_id() -> str:
    return _env_str("SPL_GOVERNANCE_PROGRAM_ID", DEFAULT_SPL_GOVERNANCE_PROGRAM_ID)


def get_realm() -> str:
    return _env_str("VSR_REALM", DEFAULT_REALM)


def get_registrar() -> str:
    return _env_str("VSR_REGISTRAR", DEFAULT_REGISTRAR)


def get_governance_mint() -> str:
    return _env_str("VSR_GOVERNANCE_MINT", DEFAULT_GOVERNANCE_MINT)


def get_rpc_timeout_sec() -> float:
    return float(_env_str("RPC_TIMEOUT_SECONDS", str(DEFAULT_RPC_TIMEOUT_SEC)))


def get_rpc_max_retries() -> int:
    """Attempts per RPC call (at least 1)."""
    return max(1, int(_env_str("RPC_MAX_RETRIES", str(DEFAULT_RPC_MAX_RETRIES))))


def get_rpc_retry_backoff_sec() -> float:
    return float(_env_str("RPC_RETRY_BACKOFF_SECONDS", str(DEFAULT_RPC_RETRY_BACKOFF_SEC)))


def get_rpc_commitment() -> str:
    return _env_str("RPC_COMMITMENT", DEFAULT_RPC_COMMITMENT)
