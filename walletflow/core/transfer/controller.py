"""
Transaction Submission Controller

One-shot native ETH transfer: synchronous validation, then gas pricing and
submission through the wallet service. Failures end in SendFailed with a
classified message; the user resubmits explicitly.
"""

import logging
from typing import Optional

from structlog.contextvars import bound_contextvars

from ...config import Settings, settings
from ...providers.base import RpcProvider, WalletSessionProvider
from ...services.evm import eth_to_wei, first_evm_wallet, is_valid_recipient, parse_eth_amount
from ..errors import ErrorCategory, classify_send_error
from ..messages import message
from ..state import StateStore
from .builder import build_native_transfer
from .models import SendFailed, SendIdle, SendLoading, SendState, SendSuccess


def validate_transfer(recipient: str, amount: str) -> Optional[str]:
    """Return the message for the first failing check, or ``None``."""
    if not recipient.strip():
        return message("error_enter_recipient")
    if not is_valid_recipient(recipient):
        return message("error_invalid_ethereum_address")
    if not amount.strip():
        return message("error_enter_amount")
    if parse_eth_amount(amount) is None:
        return message("error_valid_amount")
    return None


def filter_amount(value: str) -> str:
    """Keep digits and the first decimal point."""
    chars = []
    seen_point = False
    for ch in value:
        if ch.isascii() and ch.isdigit():
            chars.append(ch)
        elif ch == "." and not seen_point:
            seen_point = True
            chars.append(ch)
    return "".join(chars)


class TransactionSubmissionController:
    """Send form state machine: Idle -> Loading -> Success | Failed."""

    def __init__(
        self,
        session: WalletSessionProvider,
        rpc: RpcProvider,
        *,
        config: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.session = session
        self.rpc = rpc
        self.config = config or settings
        self.logger = logger or logging.getLogger(__name__)

        self.state: StateStore[SendState] = StateStore(SendIdle(), name="send", logger=self.logger)
        self.recipient: StateStore[str] = StateStore("", name="recipient", logger=self.logger)
        self.amount: StateStore[str] = StateStore("", name="amount", logger=self.logger)

    @property
    def current_state(self) -> SendState:
        return self.state.value

    def _clear_error(self) -> None:
        if isinstance(self.state.value, SendFailed):
            self.state.set(SendIdle())

    def set_recipient(self, value: str) -> None:
        self.recipient.set(value.strip())
        self._clear_error()

    def set_amount(self, value: str) -> None:
        self.amount.set(filter_amount(value))
        self._clear_error()

    def reset(self) -> None:
        self.state.set(SendIdle())

    async def submit(self) -> None:
        to_address = self.recipient.value
        amount = self.amount.value

        error = validate_transfer(to_address, amount)
        if error is not None:
            self.state.set(SendFailed(error, ErrorCategory.VALIDATION))
            return

        self.state.set(SendLoading())
        with bound_contextvars(flow="transfer", operation="submit"):
            try:
                wallet = first_evm_wallet(self.session.user_wallets)
                if wallet is None:
                    self.state.set(SendFailed(message("error_no_evm_wallet_send"), ErrorCategory.VALIDATION))
                    return

                gas_price = await self.rpc.get_gas_price()
                request = build_native_transfer(
                    chain_id=self.config.sepolia_chain_id,
                    from_address=wallet.address or "",
                    to_address=to_address,
                    amount_wei=eth_to_wei(amount),
                    gas_price_wei=gas_price,
                    gas_limit=self.config.transfer_gas_limit,
                    max_fee_multiplier=self.config.max_fee_multiplier,
                )
                self.logger.info(
                    f"Submitting transfer of {amount} ETH to {to_address} "
                    f"(maxFeePerGas={request.max_fee_per_gas}, "
                    f"maxPriorityFeePerGas={request.max_priority_fee_per_gas})"
                )

                tx_hash = await self.session.send_transaction(request, wallet)
            except Exception as e:
                category, text = classify_send_error(e)
                self.logger.warning(f"Transfer failed ({category.value}): {e}")
                self.state.set(SendFailed(text, category))
                return

            self.logger.info(f"Transfer submitted: {tx_hash}")
        self.state.set(SendSuccess(tx_hash or message("tx_hash_unknown")))
