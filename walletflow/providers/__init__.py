from .base import ClipboardProvider, RpcProvider, WalletSessionProvider
from .sepolia import SepoliaRpcProvider

__all__ = [
    "ClipboardProvider",
    "RpcProvider",
    "WalletSessionProvider",
    "SepoliaRpcProvider",
]
