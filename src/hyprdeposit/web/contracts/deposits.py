"""Deposit planning contracts.

Amounts are Decimals and serialise as strings. Raw on-chain amounts are
decimal strings so they survive JSON clients without precision loss.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"


class BalancesRequest(BaseModel):
    """Request to scan a wallet across chains."""

    address: str = Field(..., pattern=ADDRESS_PATTERN, description="Wallet address to scan")
    chain_ids: Optional[list[int]] = Field(
        None, description="Chains to scan (None = all supported chains)"
    )


class TokenBalanceView(BaseModel):
    """A USD-valued balance of one asset on one chain."""

    chain_id: int
    chain_name: str
    token_address: str
    token_symbol: str
    token_decimals: int
    balance: Decimal = Field(..., description="Balance in human-readable units")
    balance_raw: str = Field(..., description="Raw balance in smallest units")
    balance_usd: Decimal


class BalancesResponse(BaseModel):
    success: bool
    address: str
    balances: list[TokenBalanceView] = Field(default_factory=list)
    total_usd: Decimal = Decimal("0")
    error: Optional[str] = None


class PlanRequest(BaseModel):
    """Request for a deposit plan."""

    address: str = Field(..., pattern=ADDRESS_PATTERN, description="Wallet holding the funds")
    target_usd: Decimal = Field(..., gt=0, description="Amount to deposit in USD")
    chain_ids: Optional[list[int]] = Field(
        None, description="Chains to draw from (None = all supported chains)"
    )


class BridgeLegView(BaseModel):
    """One allocated leg of a strategy."""

    chain_id: int
    chain_name: str
    token_symbol: str
    token_address: str
    input_usd: Decimal
    output_usd: Decimal
    fees_usd: Decimal
    time_seconds: int
    efficiency: Decimal
    used_input_amount: str = Field(..., description="Raw amount bridged by this leg")
    provider: str
    tool: Optional[str] = None


class StrategyView(BaseModel):
    objective: str = Field(..., description="fastest or cheapest")
    legs: list[BridgeLegView]
    total_input_usd: Decimal
    total_output_usd: Decimal
    total_time_seconds: int
    total_fees_usd: Decimal
    efficiency: Decimal


class PlanResponse(BaseModel):
    """A deposit plan with both strategies and how they compare."""

    success: bool
    status: str = Field(..., description="ready, insufficient_funds or no_routes")
    target_usd: Decimal
    available_usd: Decimal = Decimal("0")
    insufficient_funds: bool = False
    fastest: Optional[StrategyView] = None
    cheapest: Optional[StrategyView] = None
    comparison: Optional[str] = Field(
        None, description="identical, fastest_dominates, cheapest_dominates, trade_off, ..."
    )
    recommended: Optional[str] = Field(
        None, description="Objective to present alone, None for a trade-off"
    )
    balances: list[TokenBalanceView] = Field(default_factory=list)
    error: Optional[str] = None
