"""Data model for deposit optimization runs."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Optional

from hyprdeposit.amounts import from_raw_amount
from hyprdeposit.routing.base import Quote

if TYPE_CHECKING:
    from hyprdeposit.optimizer.dominance import StrategyComparison


class StrategyObjective(str, Enum):
    """Ordering used by the strategy selector."""

    FASTEST = "fastest"  # time-first
    CHEAPEST = "cheapest"  # efficiency-first


class PlanStatus(str, Enum):
    READY = "ready"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    NO_ROUTES = "no_routes"


@dataclass(frozen=True)
class TokenBalance:
    """A USD-valued balance of one asset on one chain."""

    chain_id: int
    chain_name: str
    token_address: str
    token_symbol: str
    token_decimals: int
    raw_balance: int
    balance_usd: Decimal

    @property
    def amount(self) -> Decimal:
        """Balance in human units."""
        return from_raw_amount(self.raw_balance, self.token_decimals)

    @property
    def key(self) -> tuple[int, str]:
        return (self.chain_id, self.token_address.lower())


@dataclass(frozen=True)
class BridgeOption:
    """A quoted way to move one balance to the destination asset.

    The ``used_*`` fields are only set on allocated copies produced by the
    strategy selector; the shared option is never mutated.
    """

    source: TokenBalance
    quote: Quote
    estimated_output_usd: Decimal
    estimated_time_seconds: int
    estimated_fees_usd: Decimal
    efficiency: Decimal
    used_input_usd: Optional[Decimal] = None
    used_output_usd: Optional[Decimal] = None
    used_fees_usd: Optional[Decimal] = None
    used_input_amount: Optional[str] = None

    @property
    def is_allocated(self) -> bool:
        return self.used_input_amount is not None

    @property
    def input_usd(self) -> Decimal:
        return self.used_input_usd if self.used_input_usd is not None else self.source.balance_usd

    @property
    def output_usd(self) -> Decimal:
        if self.used_output_usd is not None:
            return self.used_output_usd
        return self.estimated_output_usd

    @property
    def input_amount_raw(self) -> int:
        """Raw amount this leg moves (the whole balance if unallocated)."""
        if self.used_input_amount is not None:
            return int(self.used_input_amount)
        return self.source.raw_balance

    @property
    def leg_key(self) -> tuple[int, str, int]:
        """Identity of the leg by chain, asset and amount."""
        return (self.source.chain_id, self.source.token_address.lower(), self.input_amount_raw)


@dataclass(frozen=True)
class DepositStrategy:
    """An ordered selection of allocated bridge legs."""

    objective: StrategyObjective
    bridges: tuple[BridgeOption, ...]
    total_input_usd: Decimal
    total_output_usd: Decimal
    total_time_seconds: int
    total_fees_usd: Decimal
    efficiency: Decimal
    # Requested deposit this strategy was built for
    target_usd: Optional[Decimal] = None

    @property
    def leg_keys(self) -> frozenset:
        return frozenset(bridge.leg_key for bridge in self.bridges)


@dataclass
class DepositPlan:
    """Result of one optimization run."""

    target_amount_usd: Decimal
    available_balance_usd: Decimal
    fastest: Optional[DepositStrategy]
    cheapest: Optional[DepositStrategy]
    all_balances: list[TokenBalance] = field(default_factory=list)
    insufficient_funds: bool = False
    comparison: Optional["StrategyComparison"] = None

    @property
    def status(self) -> PlanStatus:
        if self.insufficient_funds:
            return PlanStatus.INSUFFICIENT_FUNDS
        if self.fastest is None and self.cheapest is None:
            return PlanStatus.NO_ROUTES
        return PlanStatus.READY

    @property
    def recommended(self) -> Optional[DepositStrategy]:
        """Strategy to present alone, or None for a genuine trade-off."""
        if self.comparison is None:
            return self.fastest or self.cheapest
        return self.comparison.recommended
