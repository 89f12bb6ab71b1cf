"""Email OTP login, embedded wallet reconciliation and ETH transfers on Sepolia."""

__version__ = "0.1.0"
