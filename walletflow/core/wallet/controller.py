"""
Wallet Reconciliation Controller

Two triggers feed the wallet state: the wallet service's change stream and
the manual retrying reload. Both publish Loading and then commit through
``_commit_loaded``, which only writes if nothing has been published since
their own Loading. A single provisioning timer turns a wallet that never
appears into an error.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Any, Awaitable, Callable, Coroutine, List, Optional, Set

from structlog.contextvars import bound_contextvars

from ...config import Settings, settings
from ...providers.base import ClipboardProvider, RpcProvider, WalletSessionProvider
from ...services.evm import first_evm_wallet, format_eth
from ...types import WalletRecord
from ..errors import ErrorCategory, error_text
from ..messages import message
from ..state import StateStore
from .models import WalletFailed, WalletLoaded, WalletLoading, WalletState


Sleep = Callable[[float], Awaitable[Any]]


class WalletReconciliationController:
    """
    Resolves the user's EVM wallet, its balance and the network label.

    Must be constructed inside a running event loop: the wallet change
    subscription starts immediately and lives until ``close()``.
    """

    def __init__(
        self,
        session: WalletSessionProvider,
        rpc: RpcProvider,
        clipboard: Optional[ClipboardProvider] = None,
        *,
        config: Optional[Settings] = None,
        provisioning_timeout_seconds: Optional[float] = None,
        max_attempts: Optional[int] = None,
        sleep: Sleep = asyncio.sleep,
        logger: Optional[logging.Logger] = None,
    ):
        self.session = session
        self.rpc = rpc
        self.clipboard = clipboard
        self.config = config or settings
        if provisioning_timeout_seconds is None:
            provisioning_timeout_seconds = self.config.wallet_provisioning_timeout_seconds
        if max_attempts is None:
            max_attempts = self.config.wallet_load_max_attempts
        self.provisioning_timeout_seconds = provisioning_timeout_seconds
        self.max_attempts = max_attempts
        self.logger = logger or logging.getLogger(__name__)
        self._sleep = sleep

        self.state: StateStore[WalletState] = StateStore(WalletLoading(), name="wallet", logger=self.logger)
        self.is_refreshing: StateStore[bool] = StateStore(False, name="wallet_refreshing", logger=self.logger)

        self._loop = asyncio.get_running_loop()
        self._timeout_task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()
        self._closed = False
        self._subscription_task = self._loop.create_task(
            self._watch_wallets(), name="wallet-changes"
        )

    @property
    def current_state(self) -> WalletState:
        return self.state.value

    @property
    def provisioning_timer_active(self) -> bool:
        return self._timeout_task is not None and not self._timeout_task.done()

    @property
    def network_label(self) -> str:
        return self.config.network_label

    # ---------------------------
    # Change stream
    # ---------------------------
    async def _watch_wallets(self) -> None:
        """Reconcile the current snapshot, then every change after it.

        Streams are not required to replay the current value, so a wallet
        that already exists is picked up from ``user_wallets`` first.
        """
        with bound_contextvars(flow="wallet", operation="watch"):
            try:
                self._on_wallets_changed(self.session.user_wallets)
                async for wallets in self.session.wallet_changes():
                    self._on_wallets_changed(wallets)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.logger.error(f"Wallet change stream failed: {e}", exc_info=True)

    def _on_wallets_changed(self, wallets: Optional[List[WalletRecord]]) -> None:
        evm_wallet = first_evm_wallet(wallets)
        waiting = not self.is_refreshing.value and isinstance(self.state.value, WalletLoading)

        if evm_wallet is not None and evm_wallet.has_address:
            self._cancel_provisioning_timeout()
            self._spawn(self._load_wallet_from(evm_wallet))
        elif evm_wallet is not None:
            # Wallet exists but its address has not been derived yet
            self._cancel_provisioning_timeout()
            if waiting:
                self._start_provisioning_timeout()
        elif waiting:
            self._start_provisioning_timeout()

    async def _load_wallet_from(self, wallet: WalletRecord) -> None:
        # A Loaded state is never replaced by a change notification
        if not isinstance(self.state.value, (WalletLoading, WalletFailed)):
            return

        version = self.state.set(WalletLoading())
        with bound_contextvars(operation="reconcile"):
            try:
                address = (wallet.address or "").strip()
                balance = await self._fetch_balance(address)
                self._commit_loaded(version, address, balance)
            except Exception as e:
                self.logger.error(f"Failed to load wallet {wallet.address}: {e}", exc_info=True)
                if self.state.version == version:
                    self.state.set(WalletFailed(error_text(e)))
            finally:
                self.is_refreshing.set(False)

    # ---------------------------
    # Provisioning timeout
    # ---------------------------
    def _start_provisioning_timeout(self) -> None:
        self._cancel_provisioning_timeout()
        self._timeout_task = self._loop.create_task(
            self._provisioning_timeout(), name="wallet-provisioning-timeout"
        )

    def _cancel_provisioning_timeout(self) -> None:
        if self._timeout_task is not None:
            self._timeout_task.cancel()
            self._timeout_task = None

    async def _provisioning_timeout(self) -> None:
        await self._sleep(self.provisioning_timeout_seconds)
        if isinstance(self.state.value, WalletLoading):
            self.logger.warning(
                f"No EVM wallet provisioned after {self.provisioning_timeout_seconds}s"
            )
            self.state.set(
                WalletFailed(message("error_wallet_creation_timeout"), ErrorCategory.TIMEOUT)
            )

    # ---------------------------
    # Manual reload
    # ---------------------------
    async def load_wallet(self) -> None:
        await self.load_wallet_with_retry()

    async def refresh(self) -> None:
        self.is_refreshing.set(True)
        await self.load_wallet_with_retry()

    async def load_wallet_with_retry(self) -> None:
        """Poll the wallet service until an EVM address shows up.

        Attempt 0 runs immediately; attempt n waits
        min(base * max(2, n), cap) first. Stops early if the change stream
        commits a Loaded state in the meantime.
        """
        self.is_refreshing.set(True)
        self._cancel_provisioning_timeout()
        version = self.state.set(WalletLoading())
        with bound_contextvars(flow="wallet", operation="reload"):
            try:
                for attempt in range(self.max_attempts):
                    delay = self.config.retry_delay_seconds(attempt)
                    if delay > 0:
                        await self._sleep(delay)
                        if isinstance(self.state.value, WalletLoaded):
                            return

                    wallet = first_evm_wallet(self.session.user_wallets)
                    if wallet is None or not wallet.has_address:
                        self.logger.debug(
                            f"Wallet load attempt {attempt + 1}/{self.max_attempts}: no EVM address yet"
                        )
                        continue

                    address = (wallet.address or "").strip()
                    balance = await self._fetch_balance(address)
                    self._commit_loaded(version, address, balance)
                    return

                self.logger.warning(f"No EVM wallet after {self.max_attempts} attempts")
                # A change-stream load that started meanwhile owns the outcome
                if self.state.version == version:
                    self.state.set(WalletFailed(message("error_failed_load_wallet")))
            except Exception as e:
                self.logger.error(f"Wallet reload failed: {e}", exc_info=True)
                if self.state.version == version:
                    self.state.set(WalletFailed(error_text(e)))
            finally:
                self.is_refreshing.set(False)

    # ---------------------------
    # Shared load steps
    # ---------------------------
    async def _fetch_balance(self, address: str) -> Decimal:
        try:
            return await self.rpc.get_balance(address)
        except Exception as e:
            # Show the wallet with a zero balance rather than an error
            self.logger.warning(f"Balance fetch failed for {address}, showing 0: {e}")
            return Decimal(0)

    def _commit_loaded(self, version: int, address: str, balance: Decimal) -> bool:
        if self.state.version != version:
            self.logger.debug(f"Discarding stale wallet load for {address}")
            return False
        self.state.set(
            WalletLoaded(
                address=address,
                network=self.network_label,
                balance_eth=format_eth(balance),
            )
        )
        self.logger.info(f"Wallet loaded: {address}")
        return True

    # ---------------------------
    # Actions
    # ---------------------------
    def get_evm_wallet(self) -> Optional[WalletRecord]:
        return first_evm_wallet(self.session.user_wallets)

    def copy_address(self) -> bool:
        state = self.state.value
        if not isinstance(state, WalletLoaded):
            return False
        if self.clipboard is None:
            self.logger.warning("No clipboard configured, address not copied")
            return False
        try:
            self.clipboard.set_text(message("wallet_address_clipboard_label"), state.address)
        except Exception as e:
            self.logger.warning(f"Copying wallet address failed: {e}")
            return False
        return True

    async def logout(self, on_complete: Callable[[], Any]) -> None:
        try:
            await self.session.logout()
        except Exception as e:
            self.logger.warning(f"Logout failed: {e}")
        finally:
            on_complete()

    # ---------------------------
    # Lifecycle
    # ---------------------------
    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        task = self._loop.create_task(coro)
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """Cancel every task this controller owns and release the RPC client."""
        if self._closed:
            return
        self._closed = True

        tasks = [self._subscription_task, *self._inflight]
        if self._timeout_task is not None:
            tasks.append(self._timeout_task)
        self._timeout_task = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._inflight.clear()

        await self.rpc.close()

    async def __aenter__(self) -> "WalletReconciliationController":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
