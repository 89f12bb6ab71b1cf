"""
Tests for the Transaction Submission Controller
"""

import pytest

from conftest import EVM_ADDRESS, OTHER_ADDRESS, evm_wallet, kinds, states_of
from walletflow.core.errors import ErrorCategory
from walletflow.core.messages import message
from walletflow.core.transfer import (
    SendFailed,
    SendIdle,
    SendSuccess,
    TransactionSubmissionController,
    validate_transfer,
)
from walletflow.core.transfer.builder import build_native_transfer, fee_caps
from walletflow.core.transfer.controller import filter_amount
from walletflow.types import WalletRecord


@pytest.fixture
def controller(session, rpc) -> TransactionSubmissionController:
    session.push([WalletRecord(chain="SOL", address="So1111"), evm_wallet()])
    return TransactionSubmissionController(session, rpc)


def fill(controller, recipient=OTHER_ADDRESS, amount="2.0"):
    controller.set_recipient(recipient)
    controller.set_amount(amount)


# =============================================================================
# Validation
# =============================================================================

class TestValidation:

    @pytest.mark.parametrize("recipient, amount, key", [
        ("", "1", "error_enter_recipient"),
        ("   ", "1", "error_enter_recipient"),
        ("0x1234", "1", "error_invalid_ethereum_address"),
        ("1x" + "a" * 40, "1", "error_invalid_ethereum_address"),
        ("0x" + "a" * 41, "1", "error_invalid_ethereum_address"),
        (OTHER_ADDRESS, "", "error_enter_amount"),
        (OTHER_ADDRESS, "0", "error_valid_amount"),
        (OTHER_ADDRESS, "-1", "error_valid_amount"),
        (OTHER_ADDRESS, "0.0", "error_valid_amount"),
        (OTHER_ADDRESS, "1.2.3", "error_valid_amount"),
        (OTHER_ADDRESS, ".", "error_valid_amount"),
        (OTHER_ADDRESS, "0.0000000000000000001", "error_valid_amount"),
    ])
    def test_first_failure_wins(self, recipient, amount, key):
        assert validate_transfer(recipient, amount) == message(key)

    @pytest.mark.parametrize("amount", ["1", "1.5", ".5", "0.000000000000000001", "10."])
    def test_accepts_positive_amounts(self, amount):
        assert validate_transfer(OTHER_ADDRESS, amount) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("recipient, amount, key", [
        ("", "1", "error_enter_recipient"),
        ("0x1234", "1", "error_invalid_ethereum_address"),
        (OTHER_ADDRESS, "", "error_enter_amount"),
        (OTHER_ADDRESS, "0", "error_valid_amount"),
    ])
    async def test_submit_never_reaches_network(self, controller, session, rpc, recipient, amount, key):
        seen = states_of(controller.state)
        fill(controller, recipient, amount)

        await controller.submit()

        assert controller.current_state == SendFailed(message(key), ErrorCategory.VALIDATION)
        assert kinds(seen) == ["SendFailed"]
        assert rpc.gas_price_calls == 0
        assert session.sent == []


@pytest.mark.parametrize("raw, expected", [
    ("1.5", "1.5"),
    ("1,5", "15"),
    ("-1", "1"),
    ("1.2.3", "1.23"),
    ("abc0.5eth", "0.5"),
    (" 2 ", "2"),
])
def test_amount_input_filter(raw, expected):
    assert filter_amount(raw) == expected


# =============================================================================
# Submission
# =============================================================================

class TestSubmit:

    @pytest.mark.asyncio
    async def test_builds_fixed_fee_transfer(self, controller, session, rpc):
        seen = states_of(controller.state)
        fill(controller, amount="2.0")

        await controller.submit()

        assert kinds(seen) == ["SendLoading", "SendSuccess"]
        assert controller.current_state == SendSuccess("0xfeed")

        request, wallet = session.sent[0]
        assert wallet.address == EVM_ADDRESS
        assert request.from_address == EVM_ADDRESS
        assert request.to_address == OTHER_ADDRESS
        assert request.value == 2 * 10**18
        assert request.gas == 21000
        assert request.max_fee_per_gas == 20
        assert request.max_priority_fee_per_gas == 10
        assert request.chain_id == 11155111

    @pytest.mark.asyncio
    async def test_exact_wei_conversion(self, controller, session):
        fill(controller, amount="1.5")
        await controller.submit()
        assert session.sent[0][0].value == 1500000000000000000

        fill(controller, amount="0.000000000000000001")
        await controller.submit()
        assert session.sent[1][0].value == 1

    @pytest.mark.asyncio
    async def test_missing_hash_uses_placeholder(self, controller, session):
        session.tx_hash = None
        fill(controller)

        await controller.submit()

        assert controller.current_state == SendSuccess(message("tx_hash_unknown"))

    @pytest.mark.asyncio
    async def test_no_evm_wallet(self, session, rpc):
        session.push([WalletRecord(chain="SOL", address="So1111")])
        controller = TransactionSubmissionController(session, rpc)
        fill(controller)

        await controller.submit()

        assert controller.current_state == SendFailed(
            message("error_no_evm_wallet_send"), ErrorCategory.VALIDATION
        )
        assert rpc.gas_price_calls == 0

    @pytest.mark.asyncio
    async def test_gas_price_failure_is_classified(self, controller, session, rpc):
        rpc.gas_price_error = RuntimeError("HTTP request failed: 502")
        fill(controller)

        await controller.submit()

        assert controller.current_state == SendFailed(
            message("error_transaction_network"), ErrorCategory.TRANSACTION_NETWORK
        )
        assert session.sent == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw, key, category", [
        ("request to https://eth.llamarpc.com timed out", "error_network_mainnet", ErrorCategory.NETWORK),
        ("TypeError: Failed to fetch", "error_network_mainnet", ErrorCategory.NETWORK),
        ("TransactionExecutionError: reverted", "error_transaction_network", ErrorCategory.TRANSACTION_NETWORK),
        ("insufficient funds for gas * price + value", "error_insufficient_balance", ErrorCategory.INSUFFICIENT_FUNDS),
        ("sender balance too low", "error_insufficient_balance", ErrorCategory.INSUFFICIENT_FUNDS),
        ("invalid address checksum", "error_invalid_recipient", ErrorCategory.INVALID_RECIPIENT),
        ("x" * 201, "error_transaction_failed_generic", ErrorCategory.UNKNOWN),
    ])
    async def test_send_failures_are_classified(self, controller, session, raw, key, category):
        session.send_error = RuntimeError(raw)
        fill(controller)

        await controller.submit()

        assert controller.current_state == SendFailed(message(key), category)

    @pytest.mark.asyncio
    async def test_short_unknown_failure_passes_through(self, controller, session):
        session.send_error = RuntimeError("user rejected the request")
        fill(controller)

        await controller.submit()

        assert controller.current_state == SendFailed("user rejected the request", ErrorCategory.UNKNOWN)

    @pytest.mark.asyncio
    async def test_editing_after_error_resets_to_idle(self, controller):
        fill(controller, recipient="0x1234")
        await controller.submit()
        assert isinstance(controller.current_state, SendFailed)

        controller.set_amount("3")

        assert controller.current_state == SendIdle()

    @pytest.mark.asyncio
    async def test_reset(self, controller):
        fill(controller)
        await controller.submit()

        controller.reset()

        assert controller.current_state == SendIdle()


# =============================================================================
# Builder
# =============================================================================

def test_fee_caps_fixed_policy():
    assert fee_caps(10) == (20, 10)
    assert fee_caps(7, max_fee_multiplier=3) == (21, 7)


def test_native_transfer_rpc_dict():
    request = build_native_transfer(
        chain_id=11155111,
        from_address=EVM_ADDRESS,
        to_address=OTHER_ADDRESS,
        amount_wei=10**18,
        gas_price_wei=10,
    )

    assert request.to_rpc_dict() == {
        "from": EVM_ADDRESS,
        "to": OTHER_ADDRESS,
        "value": hex(10**18),
        "gas": "0x5208",
        "maxFeePerGas": "0x14",
        "maxPriorityFeePerGas": "0xa",
        "chainId": hex(11155111),
    }
