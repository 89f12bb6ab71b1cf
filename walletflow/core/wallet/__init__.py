"""
Wallet Reconciliation

Derives one authoritative wallet state from the wallet service's change
stream, a manual retrying reload, and the provisioning timeout.
"""

from .controller import WalletReconciliationController
from .models import WalletFailed, WalletLoaded, WalletLoading, WalletState

__all__ = [
    "WalletReconciliationController",
    "WalletState",
    "WalletLoading",
    "WalletLoaded",
    "WalletFailed",
]
