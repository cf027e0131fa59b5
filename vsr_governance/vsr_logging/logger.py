"""
Structured logging for the VSR governance power resolver.

Every record carries an ISO timestamp, the level, the emitting module and an
event_type (voter_account_found, deposit_filtered, rpc_retry, ...). Pubkeys in
the event context are rendered as base58 so callers can log them as-is.

Env:
    LOG_LEVEL   DEBUG / INFO (default) / WARNING / ERROR
    LOG_FORMAT  json (default) or console

Output goes to stderr; stdout is reserved for CLI results.
No vsr_governance imports here to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from solders.pubkey import Pubkey

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "json"


def _pubkeys_to_str(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    for key, value in event_dict.items():
        if isinstance(value, Pubkey):
            event_dict[key] = str(value)
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    """Bind to the current sys.stderr each time, not the one seen at configure time."""
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """
    (Re)configure structlog. Arguments override LOG_LEVEL / LOG_FORMAT.

    Loggers returned by get_logger are lazy, so reconfiguring (e.g. the CLI's
    --verbose) also affects module-level loggers created at import.
    """
    level_name = (level or os.getenv("LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    level_value = getattr(logging, level_name, logging.INFO)
    fmt = (fmt or os.getenv("LOG_FORMAT") or DEFAULT_LOG_FORMAT).strip().lower()

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        _pubkeys_to_str,
    ]
    if fmt == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    else:
        processors.extend([_normalize_event, structlog.processors.JSONRenderer()])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> Any:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("voter_account_found", wallet_id=addr, account=pubkey, deposit_count=2)
    """
    return structlog.get_logger(logger_name=name)


def bind_wallet(wallet_id: str) -> Any:
    """Return a logger with wallet_id bound to all subsequent log calls."""
    return structlog.get_logger(logger_name="vsr_governance", wallet_id=wallet_id)
