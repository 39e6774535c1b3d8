"""Application configuration using pydantic-settings.

All optimizer thresholds live here so they can be tuned per deployment.
The dominance and tolerance defaults were chosen empirically and should be
recalibrated against real quote data before being treated as correct.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Arbitrum One: every leg bridges into native USDC here
ARBITRUM_CHAIN_ID = 42161
ARBITRUM_USDC_ADDRESS = "0xaf88d065e77c8cC2239327C5EDb3A432268e5831"

# Hyperliquid bridge contract on Arbitrum
HYPERLIQUID_BRIDGE_ADDRESS = "0x2df1c51e09aecf9cacb7bc98cb1742757f163df7"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=True, description="Enable debug mode")
    dry_run: bool = Field(default=True, description="Simulate quotes and execution")

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")

    # ======================
    # Settlement
    # ======================
    destination_chain_id: int = Field(
        default=ARBITRUM_CHAIN_ID, description="Chain every leg bridges into"
    )
    destination_token_address: str = Field(
        default=ARBITRUM_USDC_ADDRESS, description="Canonical asset on the destination chain"
    )
    destination_token_decimals: int = Field(default=6, description="Destination asset decimals")
    settlement_address: str = Field(
        default=HYPERLIQUID_BRIDGE_ADDRESS, description="Final transfer recipient"
    )
    min_settlement_usd: Decimal = Field(
        default=Decimal("5"), description="Minimum final deposit (USD)"
    )

    # ======================
    # Balance scanning
    # ======================
    min_balance_usd: Decimal = Field(
        default=Decimal("1.0"), description="Balances below this USD value are ignored"
    )
    max_tokens_to_check: int = Field(
        default=20, description="Maximum number of balances to request quotes for"
    )

    # ======================
    # Strategy selection
    # ======================
    completion_tolerance: Decimal = Field(
        default=Decimal("0.95"), description="Stop selecting once this share of target is reached"
    )
    min_bridge_usd: Decimal = Field(
        default=Decimal("1.0"), description="Skip legs whose output is below this USD value"
    )
    dominance_output_band: Decimal = Field(
        default=Decimal("0.95"),
        description="A dominating strategy must deliver at least this share of the other's output",
    )
    identical_time_tolerance_seconds: int = Field(default=1)
    identical_fee_tolerance_usd: Decimal = Field(default=Decimal("0.01"))
    identical_output_tolerance_usd: Decimal = Field(default=Decimal("0.10"))

    # ======================
    # Quoting (LI.FI)
    # ======================
    lifi_api_url: str = Field(default="https://li.quest/v1", description="LI.FI API base URL")
    lifi_api_key: str = Field(default="", description="LI.FI API key")
    lifi_integrator: str = Field(default="hyprdeposit", description="LI.FI integrator id")
    default_slippage: Decimal = Field(
        default=Decimal("0.005"), description="Default slippage tolerance (0.5%)"
    )
    quote_timeout_seconds: float = Field(default=30.0, description="Per-quote timeout")
    max_concurrent_requests: int = Field(
        default=8, description="Concurrent balance/quote requests"
    )
    status_poll_interval_seconds: float = Field(default=5.0)
    status_poll_timeout_seconds: float = Field(default=1800.0)
    cache_ttl_seconds: float = Field(default=30.0, description="Price/balance cache TTL")

    # ======================
    # Chain RPC Endpoints
    # ======================
    rpc_overrides: dict[int, str] = Field(
        default_factory=dict, description="Per-chain RPC URL overrides keyed by chain id"
    )

    # ======================
    # Wallet
    # ======================
    wallet_private_key: Optional[str] = Field(
        default=None, description="Hot wallet private key used by the local signer"
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def has_wallet(self) -> bool:
        """Check if a signing key is configured."""
        return bool(self.wallet_private_key)

    def get_rpc_url(self, chain_id: int) -> str:
        """Get RPC URL for a chain, preferring configured overrides."""
        if chain_id in self.rpc_overrides:
            return self.rpc_overrides[chain_id]

        from hyprdeposit.chains import SUPPORTED_CHAINS

        chain = SUPPORTED_CHAINS.get(chain_id)
        return chain.rpc_url if chain else ""

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "dry_run": self.dry_run,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "wallet_configured": self.has_wallet,
            "settlement": {
                "chain_id": self.destination_chain_id,
                "token": self.destination_token_address,
                "recipient": self.settlement_address,
                "min_usd": str(self.min_settlement_usd),
            },
            "optimizer": {
                "min_balance_usd": str(self.min_balance_usd),
                "max_tokens_to_check": self.max_tokens_to_check,
                "completion_tolerance": str(self.completion_tolerance),
                "min_bridge_usd": str(self.min_bridge_usd),
                "dominance_output_band": str(self.dominance_output_band),
            },
            "lifi": {
                "url": self.lifi_api_url,
                "api_key": "***" if self.lifi_api_key else "(not set)",
                "slippage": str(self.default_slippage),
            },
            "rpc_overrides": sorted(self.rpc_overrides),
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
