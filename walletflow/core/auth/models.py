"""
Auth flow states.

Idle -> SendingOtp -> OtpSent -> VerifyingOtp -> Authenticated, with
AuthFailed reachable from any in-flight step and cleared back to Idle by
the next user edit.
"""

from dataclasses import dataclass

from ..errors import ErrorCategory


class AuthState:
    """Base class for auth flow states."""

    is_terminal = False


@dataclass(frozen=True)
class Idle(AuthState):
    pass


@dataclass(frozen=True)
class SendingOtp(AuthState):
    pass


@dataclass(frozen=True)
class OtpSent(AuthState):
    email: str


@dataclass(frozen=True)
class VerifyingOtp(AuthState):
    pass


@dataclass(frozen=True)
class AuthFailed(AuthState):
    message: str
    category: ErrorCategory = ErrorCategory.AUTHENTICATION


@dataclass(frozen=True)
class Authenticated(AuthState):
    is_terminal = True
