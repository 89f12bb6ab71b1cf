from dataclasses import dataclass

from ..errors import ErrorCategory


class SendState:
    """Base class for transaction submission states."""


@dataclass(frozen=True)
class SendIdle(SendState):
    pass


@dataclass(frozen=True)
class SendLoading(SendState):
    pass


@dataclass(frozen=True)
class SendSuccess(SendState):
    tx_hash: str


@dataclass(frozen=True)
class SendFailed(SendState):
    message: str
    category: ErrorCategory = ErrorCategory.UNKNOWN
