"""
Structured logging for vsr_governance.

JSON logs on stderr with timestamp, level, wallet_id and event_type.
Use get_logger() in every module.
"""

from vsr_governance.vsr_logging.logger import bind_wallet, configure_logging, get_logger

__all__ = ["bind_wallet", "configure_logging", "get_logger"]
