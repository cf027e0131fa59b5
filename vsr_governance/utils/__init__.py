from vsr_governance.utils.wallet_utils import is_valid_wallet, to_pubkey

__all__ = ["is_valid_wallet", "to_pubkey"]
