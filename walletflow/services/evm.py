"""Utilities for working with EVM wallets, addresses and ETH amounts."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Set

from eth_utils import from_wei, to_wei

from ..types import WalletRecord

# Chain classifications the wallet service uses for EVM-compatible wallets.
EVM_CHAIN_NAMES: Set[str] = {"EVM", "ETH", "ETHEREUM"}

ETH_DECIMALS = 18
EVM_ADDRESS_LENGTH = 42


def is_evm_chain(chain: Optional[str]) -> bool:
    """Return ``True`` if the wallet service chain label denotes an EVM wallet."""

    return (chain or "").upper() in EVM_CHAIN_NAMES


def first_evm_wallet(wallets: Optional[Iterable[WalletRecord]]) -> Optional[WalletRecord]:
    """First EVM wallet in ``wallets``, whether or not its address exists yet."""

    for wallet in wallets or ():
        if is_evm_chain(wallet.chain):
            return wallet
    return None


def is_valid_recipient(address: str) -> bool:
    """Shape check used before a transfer: ``0x`` prefix and 42 characters."""

    return address.startswith("0x") and len(address) == EVM_ADDRESS_LENGTH


def parse_eth_amount(amount: str) -> Optional[Decimal]:
    """Parse a positive ETH amount representable in wei, else ``None``."""

    try:
        value = Decimal(amount.strip())
    except (InvalidOperation, AttributeError):
        return None
    if not value.is_finite() or value <= 0:
        return None
    _, digits, exponent = value.as_tuple()
    extra = -exponent - ETH_DECIMALS
    # Digits past 18 places must all be zero to be representable in wei
    if extra > 0 and any(digits[-extra:]):
        return None
    return value


def eth_to_wei(amount: str | Decimal) -> int:
    """Convert an ETH amount to wei using exact decimal arithmetic."""

    value = amount if isinstance(amount, Decimal) else Decimal(amount)
    return to_wei(value, "ether")


def wei_to_eth(wei: int) -> Decimal:
    """Convert wei to ETH as an exact Decimal."""

    return Decimal(from_wei(wei, "ether"))


def format_eth(value: Decimal) -> str:
    """Plain (non-scientific) decimal string without redundant trailing zeros."""

    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


__all__ = [
    "EVM_CHAIN_NAMES",
    "ETH_DECIMALS",
    "is_evm_chain",
    "first_evm_wallet",
    "is_valid_recipient",
    "parse_eth_amount",
    "eth_to_wei",
    "wei_to_eth",
    "format_eth",
]
