"""
VSR governance power: voter account decoding, lockup multipliers and the
native / delegated / Token Owner Record resolution policy.
"""

from vsr_governance.vsr.extractor import parse_vsr_deposits
from vsr_governance.vsr.models import (
    CanonicalPowerResult,
    DepositClassification,
    DepositRecord,
    Lockup,
    LockupKind,
    NativePowerResult,
    PowerSource,
    ShadowRecord,
)
from vsr_governance.vsr.multiplier import calculate_vsr_multiplier
from vsr_governance.vsr.policy import get_canonical_governance_power, resolve_governance_power

__all__ = [
    "CanonicalPowerResult",
    "DepositClassification",
    "DepositRecord",
    "Lockup",
    "LockupKind",
    "NativePowerResult",
    "PowerSource",
    "ShadowRecord",
    "calculate_vsr_multiplier",
    "get_canonical_governance_power",
    "parse_vsr_deposits",
    "resolve_governance_power",
]
