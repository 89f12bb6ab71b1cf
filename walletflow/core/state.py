"""
Observable state container.

Every controller publishes its state through a ``StateStore``: one value,
one mutation entry point, and synchronous fan-out to subscribers. The
``version`` counter lets async work detect that the value it published has
since been replaced.
"""

import asyncio
import logging
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")

Subscriber = Callable[[T], None]


class StateStore(Generic[T]):
    """Single-writer observable value."""

    def __init__(self, initial: T, name: str = "state", logger: Optional[logging.Logger] = None):
        self._value = initial
        self._version = 0
        self._name = name
        self._subscribers: List[Subscriber] = []
        self.logger = logger or logging.getLogger(__name__)

    @property
    def value(self) -> T:
        return self._value

    @property
    def version(self) -> int:
        return self._version

    def set(self, value: T) -> int:
        """Replace the value, notify subscribers and return the new version."""
        previous = self._value
        self._value = value
        self._version += 1
        self.logger.debug("%s: %r -> %r (v%d)", self._name, previous, value, self._version)

        for callback in list(self._subscribers):
            try:
                callback(value)
            except Exception as e:
                self.logger.error(f"{self._name} subscriber error: {e}", exc_info=True)

        return self._version

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for future values; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def wait_for(self, predicate: Callable[[T], bool], timeout: Optional[float] = None) -> T:
        """Wait until the value satisfies ``predicate`` and return it."""
        if predicate(self._value):
            return self._value

        future: asyncio.Future = asyncio.get_running_loop().create_future()

        def on_change(value: T) -> None:
            if not future.done() and predicate(value):
                future.set_result(value)

        unsubscribe = self.subscribe(on_change)
        try:
            return await asyncio.wait_for(future, timeout=timeout)
        finally:
            unsubscribe()

    def __repr__(self) -> str:
        return f"StateStore({self._name}={self._value!r}, v{self._version})"
