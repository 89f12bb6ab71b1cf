"""
Auth Flow Controller

Email one-time passcode login against the wallet session service. Each
operation calls the service at most once; failures become AuthFailed
states carrying a user-facing message, never exceptions.
"""

import logging
import re
import string
from typing import Optional

from structlog.contextvars import bound_contextvars

from ...providers.base import WalletSessionProvider
from ..errors import (
    ErrorCategory,
    classify_otp_send_error,
    classify_otp_verify_error,
)
from ..messages import message
from ..state import StateStore
from .models import (
    AuthFailed,
    AuthState,
    Authenticated,
    Idle,
    OtpSent,
    SendingOtp,
    VerifyingOtp,
)


OTP_LENGTH = 6

# Same shape as Android's Patterns.EMAIL_ADDRESS
_EMAIL_RE = re.compile(
    r"[a-zA-Z0-9+._%\-]{1,256}"
    r"@"
    r"[a-zA-Z0-9][a-zA-Z0-9\-]{0,64}"
    r"(\.[a-zA-Z0-9][a-zA-Z0-9\-]{0,25})+"
)


def is_valid_email(email: str) -> bool:
    return _EMAIL_RE.fullmatch(email) is not None


class AuthFlowController:
    """
    OTP login state machine.

    Initial state is Idle; Authenticated is terminal. The email and code
    inputs are observable alongside the state so a UI can bind to all three.
    """

    def __init__(
        self,
        session: WalletSessionProvider,
        logger: Optional[logging.Logger] = None,
    ):
        self.session = session
        self.logger = logger or logging.getLogger(__name__)

        self.state: StateStore[AuthState] = StateStore(Idle(), name="auth", logger=self.logger)
        self.email: StateStore[str] = StateStore("", name="email", logger=self.logger)
        self.otp_code: StateStore[str] = StateStore("", name="otp_code", logger=self.logger)

    @property
    def current_state(self) -> AuthState:
        return self.state.value

    def _clear_error(self) -> None:
        if isinstance(self.state.value, AuthFailed):
            self.state.set(Idle())

    def _fail(self, text: str, category: ErrorCategory) -> None:
        self.state.set(AuthFailed(message=text, category=category))

    # ---------------------------
    # Email entry
    # ---------------------------
    def set_email(self, value: str) -> None:
        self.email.set(value.strip())
        self._clear_error()

    def is_email_valid(self) -> bool:
        return is_valid_email(self.email.value)

    async def send_otp(self) -> None:
        if not self.is_email_valid():
            self._fail(message("error_invalid_email"), ErrorCategory.VALIDATION)
            return

        email = self.email.value
        self.state.set(SendingOtp())
        with bound_contextvars(flow="auth", operation="send_otp"):
            try:
                await self.session.send_otp(email)
            except Exception as e:
                category, text = classify_otp_send_error(e)
                self.logger.warning(f"OTP send failed ({category.value}): {e}")
                self._fail(text, category)
                return

            self.logger.info("OTP sent")
        self.otp_code.set("")
        self.state.set(OtpSent(email=email))

    # ---------------------------
    # Code entry
    # ---------------------------
    def set_otp_code(self, value: str) -> None:
        digits = "".join(ch for ch in value if ch in string.digits)
        self.otp_code.set(digits[:OTP_LENGTH])
        self._clear_error()

    async def verify_otp(self) -> None:
        code = self.otp_code.value
        if len(code) != OTP_LENGTH:
            self._fail(message("error_enter_6_digits"), ErrorCategory.VALIDATION)
            return

        self.state.set(VerifyingOtp())
        with bound_contextvars(flow="auth", operation="verify_otp"):
            try:
                await self.session.verify_otp(code)
            except Exception as e:
                category, text = classify_otp_verify_error(e)
                self.logger.warning(f"OTP verification failed: {e}")
                self.otp_code.set("")
                self._fail(text, category)
                return

            self.logger.info("OTP verified, session authenticated")
        self.state.set(Authenticated())

    async def resend_otp(self) -> None:
        """Request a fresh code.

        On success the flow returns to Idle rather than OtpSent.
        Callers that keep the code sheet open must not rely on an OtpSent
        transition here.
        """
        self.otp_code.set("")
        self.state.set(SendingOtp())
        with bound_contextvars(flow="auth", operation="resend_otp"):
            try:
                await self.session.resend_otp()
            except Exception as e:
                self.logger.warning(f"OTP resend failed: {e}")
                self._fail(message("error_resend_failed"), ErrorCategory.AUTHENTICATION)
                return

            self.logger.info("OTP resent")
        self.state.set(Idle())

    def dismiss(self) -> None:
        self.state.set(Idle())
        self.otp_code.set("")
