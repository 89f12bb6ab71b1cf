from dataclasses import dataclass

from ..errors import ErrorCategory


class WalletState:
    """Base class for wallet reconciliation states."""


@dataclass(frozen=True)
class WalletLoading(WalletState):
    pass


@dataclass(frozen=True)
class WalletLoaded(WalletState):
    address: str
    network: str          # e.g. "Sepolia (Chain ID: 11155111)"
    balance_eth: str      # plain decimal string, never scientific notation


@dataclass(frozen=True)
class WalletFailed(WalletState):
    message: str
    category: ErrorCategory = ErrorCategory.UNKNOWN
