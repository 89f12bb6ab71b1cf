from typing import Any, Dict

from pydantic import BaseModel, Field


class TransactionRequest(BaseModel):
    """EIP-1559 native value transfer handed to the wallet service for signing."""

    chain_id: int = Field(description="Target chain id")
    from_address: str = Field(description="Sender (the user's EVM wallet)")
    to_address: str = Field(description="Recipient address")
    value: int = Field(ge=0, description="Amount in wei")
    gas: int = Field(description="Gas limit")
    max_fee_per_gas: int = Field(ge=0, description="maxFeePerGas in wei")
    max_priority_fee_per_gas: int = Field(ge=0, description="maxPriorityFeePerGas in wei")

    def to_rpc_dict(self) -> Dict[str, Any]:
        """Hex-quantity form used by eth_sendTransaction style APIs."""
        return {
            "from": self.from_address,
            "to": self.to_address,
            "value": hex(self.value),
            "gas": hex(self.gas),
            "maxFeePerGas": hex(self.max_fee_per_gas),
            "maxPriorityFeePerGas": hex(self.max_priority_fee_per_gas),
            "chainId": hex(self.chain_id),
        }
