"""In-memory collaborators shared by the controller tests."""

import asyncio
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from walletflow.providers.base import ClipboardProvider, RpcProvider, WalletSessionProvider
from walletflow.types import TransactionRequest, WalletRecord


EVM_ADDRESS = "0x1234567890abcdef1234567890ABCDEF12345678"
OTHER_ADDRESS = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"


class FakeWalletSession(WalletSessionProvider):
    """Wallet service double.

    ``push`` publishes a snapshot to the change stream and makes it the
    current ``user_wallets``. ``user_wallets_sequence`` scripts what
    successive reads of ``user_wallets`` return.
    """

    def __init__(self, wallets: Optional[List[WalletRecord]] = None):
        self._wallets = wallets
        self._changes: asyncio.Queue = asyncio.Queue()
        self.user_wallets_sequence: Optional[List[Optional[List[WalletRecord]]]] = None
        self.user_wallets_reads = 0

        self.calls: List[Tuple[str, tuple]] = []
        self.send_otp_error: Optional[Exception] = None
        self.verify_otp_error: Optional[Exception] = None
        self.resend_otp_error: Optional[Exception] = None
        self.logout_error: Optional[Exception] = None
        self.send_error: Optional[Exception] = None
        self.tx_hash: Optional[str] = "0xfeed"
        self.sent: List[Tuple[TransactionRequest, WalletRecord]] = []

    def push(self, wallets: Optional[List[WalletRecord]]) -> None:
        self._wallets = wallets
        self._changes.put_nowait(wallets)

    async def send_otp(self, email: str) -> None:
        self.calls.append(("send_otp", (email,)))
        if self.send_otp_error:
            raise self.send_otp_error

    async def verify_otp(self, code: str) -> None:
        self.calls.append(("verify_otp", (code,)))
        if self.verify_otp_error:
            raise self.verify_otp_error

    async def resend_otp(self) -> None:
        self.calls.append(("resend_otp", ()))
        if self.resend_otp_error:
            raise self.resend_otp_error

    async def logout(self) -> None:
        self.calls.append(("logout", ()))
        if self.logout_error:
            raise self.logout_error

    @property
    def user_wallets(self) -> Optional[List[WalletRecord]]:
        self.user_wallets_reads += 1
        if self.user_wallets_sequence:
            return self.user_wallets_sequence.pop(0)
        return self._wallets

    async def wallet_changes(self):
        while True:
            yield await self._changes.get()

    async def send_transaction(self, request: TransactionRequest, wallet: WalletRecord) -> Optional[str]:
        self.calls.append(("send_transaction", (request, wallet)))
        if self.send_error:
            raise self.send_error
        self.sent.append((request, wallet))
        return self.tx_hash

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]


class FakeRpc(RpcProvider):
    name = "fake"
    chain_id = 11155111

    def __init__(self, gas_price: int = 10, balances: Optional[Dict[str, Decimal]] = None):
        self.gas_price = gas_price
        self.balances = balances or {}
        self.balance_error: Optional[Exception] = None
        self.gas_price_error: Optional[Exception] = None
        self.balance_gate: Optional[asyncio.Event] = None
        self.balance_calls: List[str] = []
        self.gas_price_calls = 0
        self.close_calls = 0

    async def get_gas_price(self) -> int:
        self.gas_price_calls += 1
        if self.gas_price_error:
            raise self.gas_price_error
        return self.gas_price

    async def get_balance(self, address: str) -> Decimal:
        self.balance_calls.append(address)
        if self.balance_gate is not None:
            await self.balance_gate.wait()
        if self.balance_error:
            raise self.balance_error
        return self.balances.get(address, Decimal("0"))

    async def close(self) -> None:
        self.close_calls += 1


class FakeClipboard(ClipboardProvider):
    def __init__(self):
        self.entries: List[Tuple[str, str]] = []

    def set_text(self, label: str, text: str) -> None:
        self.entries.append((label, text))


def evm_wallet(address: Optional[str] = EVM_ADDRESS, chain: str = "EVM") -> WalletRecord:
    return WalletRecord(chain=chain, address=address)


async def settle(rounds: int = 10) -> None:
    """Let queued tasks run without advancing any timers meaningfully."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class RecordingSleep:
    """Sleep stand-in that records delays and returns on the next loop turn."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


def states_of(store, into: Optional[list] = None) -> list:
    """Collect every value published by a StateStore from now on."""
    seen = [] if into is None else into
    store.subscribe(seen.append)
    return seen


@pytest.fixture
def session() -> FakeWalletSession:
    return FakeWalletSession()


@pytest.fixture
def rpc() -> FakeRpc:
    return FakeRpc(balances={EVM_ADDRESS: Decimal("1.5")})


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()


def kinds(states: Sequence[object]) -> List[str]:
    return [type(s).__name__ for s in states]
