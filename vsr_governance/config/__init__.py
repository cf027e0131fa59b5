"""
Configuration for the VSR governance resolver.

Loads settings from environment variables (and .env). Exposes a single
source of truth for RPC and program configuration.
"""

from vsr_governance.config.settings import GovernanceSettings, get_settings  # noqa: F401

__all__ = ["GovernanceSettings", "get_settings"]
