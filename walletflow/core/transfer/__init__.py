"""
Transaction Submission

Validates a recipient and ETH amount, prices gas and hands a native
transfer to the wallet service for signing and broadcast.
"""

from .controller import TransactionSubmissionController, validate_transfer
from .models import SendFailed, SendIdle, SendLoading, SendState, SendSuccess

__all__ = [
    "TransactionSubmissionController",
    "validate_transfer",
    "SendState",
    "SendIdle",
    "SendLoading",
    "SendSuccess",
    "SendFailed",
]
