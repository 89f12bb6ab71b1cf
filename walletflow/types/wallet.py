from typing import Optional

from pydantic import BaseModel, Field


class WalletRecord(BaseModel):
    """Read-only view of a wallet held by the wallet session service."""

    chain: Optional[str] = Field(default=None, description="Chain classification reported by the wallet service (e.g. EVM)")
    address: Optional[str] = Field(default=None, description="Wallet address; empty until the key is derived")
    wallet_id: Optional[str] = Field(default=None, description="Wallet service identifier, if any")

    @property
    def has_address(self) -> bool:
        return bool(self.address and self.address.strip())
