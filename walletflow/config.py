from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Render log lines as JSON instead of console text")

    # Sepolia RPC
    sepolia_rpc_url: str = Field(
        default="https://ethereum-sepolia-rpc.publicnode.com",
        description="JSON-RPC endpoint for the Sepolia test network",
        validation_alias=AliasChoices("sepolia_rpc_url", "SEPOLIA_RPC_URL", "RPC_URL"),
    )
    sepolia_chain_id: int = Field(default=11155111, description="Sepolia chain id")
    network_name: str = Field(default="Sepolia", description="Network name shown next to the chain id")
    rpc_connect_timeout_seconds: float = Field(default=30.0, gt=0, description="RPC connect timeout")
    rpc_read_timeout_seconds: float = Field(default=30.0, gt=0, description="RPC read timeout")
    rpc_write_timeout_seconds: float = Field(default=30.0, gt=0, description="RPC write timeout")

    # Wallet reconciliation
    wallet_provisioning_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="How long to wait for the wallet service to provision an EVM address",
    )
    wallet_load_max_attempts: int = Field(
        default=9,
        ge=1,
        description="Attempts made by the manual wallet reload before giving up",
    )
    wallet_load_retry_base_delay_ms: int = Field(
        default=500,
        ge=0,
        description="Base delay between manual reload attempts",
    )
    wallet_load_retry_max_delay_ms: int = Field(
        default=5000,
        ge=0,
        description="Upper bound on the delay between manual reload attempts",
    )

    # Transfers
    transfer_gas_limit: int = Field(default=21000, ge=21000, description="Gas limit for native transfers")
    max_fee_multiplier: int = Field(
        default=2,
        ge=1,
        description="maxFeePerGas as a multiple of the current gas price",
    )

    @property
    def network_label(self) -> str:
        return f"{self.network_name} (Chain ID: {self.sepolia_chain_id})"

    def retry_delay_seconds(self, attempt: int) -> float:
        """Delay before manual reload attempt ``attempt`` (zero for the first)."""
        if attempt <= 0:
            return 0.0
        delay_ms = min(
            self.wallet_load_retry_base_delay_ms * max(2, attempt),
            self.wallet_load_retry_max_delay_ms,
        )
        return delay_ms / 1000


# Global settings instance
settings = Settings()
