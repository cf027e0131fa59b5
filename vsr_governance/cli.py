"""
Print a wallet's canonical governance power as JSON.

How to run:
    vsr-power <WALLET> [--rpc-url URL] [--now UNIX_TS] [--pretty] [--verbose]
    py -m vsr_governance <WALLET>

Env (or .env): SOLANA_RPC_URL / HELIUS_API_KEY, VSR_PROGRAM_ID, VSR_REALM, ...
Logs go to stderr; stdout carries only the result.

Exit codes: 0 resolved (including source "none"), 1 invalid wallet, 2 source "error".
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys

from vsr_governance.config import get_settings
from vsr_governance.utils.wallet_utils import is_valid_wallet
from vsr_governance.vsr.models import PowerSource
from vsr_governance.vsr.policy import get_canonical_governance_power
from vsr_governance.vsr_logging import configure_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vsr-power",
        description="Resolve VSR governance voting power for a wallet",
    )
    parser.add_argument("wallet", help="Wallet address (base58)")
    parser.add_argument("--rpc-url", default=None, help="Solana RPC URL (default: SOLANA_RPC_URL)")
    parser.add_argument("--now", type=int, default=None, help="Unix timestamp to evaluate lockups at")
    parser.add_argument("--pretty", action="store_true", help="Indent JSON output")
    parser.add_argument("--verbose", action="store_true", help="Debug logging (per-deposit decisions)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        configure_logging(level="DEBUG")
    wallet = args.wallet.strip()
    if not is_valid_wallet(wallet):
        logger.error("cli_invalid_wallet", wallet=wallet)
        print(f"Invalid wallet address: {wallet}", file=sys.stderr)
        return 1

    settings = get_settings()
    if args.rpc_url:
        settings = dataclasses.replace(settings, solana_rpc_url=args.rpc_url)

    result = get_canonical_governance_power(wallet, settings=settings, now=args.now)
    print(json.dumps(result.to_dict(), indent=2 if args.pretty else None))
    return 2 if result.source == PowerSource.ERROR else 0


if __name__ == "__main__":
    sys.exit(main())
