from .transaction import TransactionRequest
from .wallet import WalletRecord

__all__ = [
    "TransactionRequest",
    "WalletRecord",
]
