from decimal import Decimal

import pytest

from walletflow.services.evm import (
    eth_to_wei,
    first_evm_wallet,
    format_eth,
    is_evm_chain,
    is_valid_recipient,
    parse_eth_amount,
    wei_to_eth,
)
from walletflow.types import WalletRecord


@pytest.mark.parametrize("chain", ["EVM", "evm", "Eth", "ETHEREUM", "ethereum"])
def test_evm_chain_labels(chain):
    assert is_evm_chain(chain) is True


@pytest.mark.parametrize("chain", [None, "", "SOL", "BTC", "ethereum-classic"])
def test_non_evm_chain_labels(chain):
    assert is_evm_chain(chain) is False


def test_first_evm_wallet_skips_other_chains():
    wallets = [
        WalletRecord(chain="SOL", address="So1111"),
        WalletRecord(chain="eth", address=""),
        WalletRecord(chain="EVM", address="0xabc"),
    ]

    assert first_evm_wallet(wallets) == wallets[1]
    assert first_evm_wallet([]) is None
    assert first_evm_wallet(None) is None


def test_recipient_shape():
    assert is_valid_recipient("0x" + "ab" * 20) is True
    assert is_valid_recipient("0x1234") is False
    assert is_valid_recipient("0X" + "ab" * 20) is False


def test_eth_to_wei_is_exact():
    assert eth_to_wei("1.5") == 1500000000000000000
    assert eth_to_wei("0.000000000000000001") == 1
    assert eth_to_wei(Decimal("123456789.123456789123456789")) == 123456789123456789123456789


def test_wei_to_eth():
    assert wei_to_eth(0) == Decimal(0)
    assert wei_to_eth(1500000000000000000) == Decimal("1.5")
    assert wei_to_eth(1) == Decimal("0.000000000000000001")


@pytest.mark.parametrize("value, expected", [
    (Decimal("0"), "0"),
    (Decimal("0E-18"), "0"),
    (Decimal("1.500000000000000000"), "1.5"),
    (Decimal("0.000000000000000001"), "0.000000000000000001"),
    (Decimal("1E+3"), "1000"),
    (Decimal("123456789012.123456789012345678"), "123456789012.123456789012345678"),
])
def test_format_eth_is_plain(value, expected):
    assert format_eth(value) == expected


@pytest.mark.parametrize("raw, expected", [
    ("1", Decimal("1")),
    (" 0.5 ", Decimal("0.5")),
    ("0.0000000000000000010", Decimal("0.000000000000000001")),
    ("0", None),
    ("-1", None),
    ("abc", None),
    ("NaN", None),
    ("Infinity", None),
])
def test_parse_eth_amount(raw, expected):
    assert parse_eth_amount(raw) == expected
