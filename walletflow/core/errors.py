"""
Error Classification

Error categories carried by controller Error states, the exceptions raised
by the adapters, and the substring classifiers that turn raw collaborator
failures into user-facing messages.
"""

from enum import Enum
from typing import Any, Optional, Tuple

from .messages import message


class ErrorCategory(str, Enum):
    """Categories of errors surfaced through controller state."""

    VALIDATION = "validation"                     # User-correctable input error
    RATE_LIMIT = "rate_limit"                     # OTP send throttled
    AUTHENTICATION = "authentication"             # OTP send/verify/resend failure
    TIMEOUT = "timeout"                           # Wallet provisioning timed out
    NETWORK = "network"                           # Mainnet RPC / fetch failure
    TRANSACTION_NETWORK = "transaction_network"   # Broadcast failed in transit
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INVALID_RECIPIENT = "invalid_recipient"
    UNKNOWN = "unknown"


class WalletFlowError(Exception):
    """Base exception for walletflow errors."""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN):
        super().__init__(message)
        self.message = message
        self.category = category


class RpcError(WalletFlowError):
    """JSON-RPC call returned an error object or an unusable result."""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        super().__init__(message, category=ErrorCategory.NETWORK)
        self.code = code
        self.data = data


def error_text(error: BaseException) -> str:
    """Message of an exception, falling back to its repr when empty."""
    text = str(error)
    return text if text else repr(error)


def classify_otp_send_error(error: BaseException) -> Tuple[ErrorCategory, str]:
    if "rate_limit" in error_text(error).lower():
        return ErrorCategory.RATE_LIMIT, message("error_rate_limit")
    return ErrorCategory.AUTHENTICATION, message("error_send_otp")


def classify_otp_verify_error(error: BaseException) -> Tuple[ErrorCategory, str]:
    text = error_text(error).lower()
    if "invalid_code" in text:
        return ErrorCategory.AUTHENTICATION, message("error_invalid_code")
    if "expired" in text:
        return ErrorCategory.AUTHENTICATION, message("error_code_expired")
    return ErrorCategory.AUTHENTICATION, message("error_verification_failed")


MAX_RAW_ERROR_LENGTH = 200


def classify_send_error(error: BaseException) -> Tuple[ErrorCategory, str]:
    """Map a transaction submission failure to a category and message.

    Matching is case-sensitive and ordered; the first hit wins. Short
    unrecognised messages are passed through verbatim.
    """
    text = error_text(error)

    if "eth.llamarpc.com" in text or "Failed to fetch" in text:
        return ErrorCategory.NETWORK, message("error_network_mainnet")
    if "TransactionExecutionError" in text or "HTTP request failed" in text:
        return ErrorCategory.TRANSACTION_NETWORK, message("error_transaction_network")
    if "insufficient funds" in text or "balance" in text:
        return ErrorCategory.INSUFFICIENT_FUNDS, message("error_insufficient_balance")
    if "invalid address" in text or "address" in text:
        return ErrorCategory.INVALID_RECIPIENT, message("error_invalid_recipient")
    if len(text) > MAX_RAW_ERROR_LENGTH:
        return ErrorCategory.UNKNOWN, message("error_transaction_failed_generic")
    return ErrorCategory.UNKNOWN, text
