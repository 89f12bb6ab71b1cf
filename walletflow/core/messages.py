"""User-facing strings, keyed by message id."""

from typing import Dict


MESSAGES: Dict[str, str] = {
    # Auth
    "error_invalid_email": "Please enter a valid email address",
    "error_rate_limit": "Too many attempts. Please wait a moment and try again",
    "error_send_otp": "Failed to send the verification code. Please try again",
    "error_enter_6_digits": "Please enter the 6-digit code",
    "error_invalid_code": "Invalid verification code",
    "error_code_expired": "The verification code has expired. Request a new one",
    "error_verification_failed": "Verification failed. Please try again",
    "error_resend_failed": "Failed to resend the code. Please try again",
    # Wallet
    "error_wallet_creation_timeout": "Wallet creation timed out. Pull to refresh to try again",
    "error_failed_load_wallet": "Failed to load wallet",
    "wallet_address_clipboard_label": "Wallet address",
    # Transfer
    "error_enter_recipient": "Enter recipient address",
    "error_invalid_ethereum_address": "Invalid Ethereum address",
    "error_enter_amount": "Enter amount",
    "error_valid_amount": "Enter a valid amount",
    "error_no_evm_wallet_send": "No EVM wallet found",
    "error_network_mainnet": "Network error: the wallet tried to reach mainnet RPC. Check the selected network",
    "error_transaction_network": "Network error while sending the transaction. Please try again",
    "error_insufficient_balance": "Insufficient funds for amount plus gas",
    "error_invalid_recipient": "Invalid recipient address",
    "error_transaction_failed_generic": "Transaction failed. Please try again",
    "tx_hash_unknown": "unknown",
}


def message(key: str, **kwargs) -> str:
    """Look up a message by id, formatting it with ``kwargs`` when given."""
    text = MESSAGES[key]
    return text.format(**kwargs) if kwargs else text
