"""
vsr_governance — governance voting power for VSR (Voter-Stake-Registry) DAOs.

Decodes raw voter accounts into stake deposits, applies lockup multipliers,
adds delegated power and falls back to the SPL Governance Token Owner Record
when no VSR power is found.
"""

__version__ = "0.1.0"
