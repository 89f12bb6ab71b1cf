from abc import ABC, abstractmethod
from decimal import Decimal
from typing import AsyncIterator, List, Optional

from ..types import TransactionRequest, WalletRecord


class RpcProvider(ABC):
    """Read access to an EVM network"""

    name: str
    chain_id: int

    @abstractmethod
    async def get_gas_price(self) -> int:
        """Current gas price in wei"""
        pass

    @abstractmethod
    async def get_balance(self, address: str) -> Decimal:
        """Native balance of ``address`` in ETH"""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection pool"""
        pass


class WalletSessionProvider(ABC):
    """Embedded wallet service: email OTP auth, key custody and signing.

    Implemented by the host application around the wallet SDK.
    """

    @abstractmethod
    async def send_otp(self, email: str) -> None:
        pass

    @abstractmethod
    async def verify_otp(self, code: str) -> None:
        pass

    @abstractmethod
    async def resend_otp(self) -> None:
        pass

    @abstractmethod
    async def logout(self) -> None:
        pass

    @property
    @abstractmethod
    def user_wallets(self) -> Optional[List[WalletRecord]]:
        """Current wallet snapshot, ``None`` before the service has one"""
        pass

    @abstractmethod
    def wallet_changes(self) -> AsyncIterator[Optional[List[WalletRecord]]]:
        """Full wallet list snapshots, delivered for as long as it is iterated.

        Need not start with the current snapshot; consumers read
        ``user_wallets`` for that.
        """
        pass

    @abstractmethod
    async def send_transaction(self, request: TransactionRequest, wallet: WalletRecord) -> Optional[str]:
        """Sign and broadcast ``request``; returns the transaction hash if known"""
        pass


class ClipboardProvider(ABC):
    """Platform clipboard"""

    @abstractmethod
    def set_text(self, label: str, text: str) -> None:
        pass
