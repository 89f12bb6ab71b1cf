"""
Email OTP Auth Flow

Drives the send / verify / resend one-time passcode state machine.
"""

from .controller import AuthFlowController, is_valid_email
from .models import (
    AuthFailed,
    AuthState,
    Authenticated,
    Idle,
    OtpSent,
    SendingOtp,
    VerifyingOtp,
)

__all__ = [
    "AuthFlowController",
    "is_valid_email",
    # States
    "AuthState",
    "Idle",
    "SendingOtp",
    "OtpSent",
    "VerifyingOtp",
    "AuthFailed",
    "Authenticated",
]
