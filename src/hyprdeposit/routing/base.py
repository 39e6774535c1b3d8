"""Abstract bridging interface for quote/execution providers."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from hyprdeposit.amounts import from_raw_amount
from hyprdeposit.exceptions import (  # noqa: F401
    ExecutionError,
    NoRouteError,
    QuoteError,
    TransientQuoteError,
    UserRejectedError,
)

logger = logging.getLogger(__name__)

# Used when a route does not report its execution time
DEFAULT_EXECUTION_TIME_SECONDS = 60


@dataclass
class Quote:
    """A bridge quote from a provider.

    Amounts are raw on-chain integers. ``route`` keeps the provider's own
    route object so the provider can execute it later.
    """

    provider: str
    from_chain_id: int
    to_chain_id: int
    from_token: str
    to_token: str
    from_amount: int
    to_amount: int
    to_amount_min: int
    to_token_decimals: int
    execution_time_seconds: int = DEFAULT_EXECUTION_TIME_SECONDS
    fee_costs_usd: Decimal = Decimal("0")
    gas_costs_usd: Decimal = Decimal("0")
    tool: Optional[str] = None
    route: dict = field(default_factory=dict)
    is_simulated: bool = False
    timestamp: float = field(default_factory=time.time)  # When quote was created
    ttl_seconds: int = 60

    @property
    def output_amount(self) -> Decimal:
        """Expected output in human units of the destination asset."""
        return from_raw_amount(self.to_amount, self.to_token_decimals)

    @property
    def total_cost_usd(self) -> Decimal:
        """Reported fees plus gas, in USD."""
        return self.fee_costs_usd + self.gas_costs_usd

    @property
    def is_expired(self) -> bool:
        """Check if quote has expired."""
        return time.time() > (self.timestamp + self.ttl_seconds)


class ExecutionPhase(str, Enum):
    """Sub-phases a provider reports while a route executes."""

    ACTION_REQUIRED = "ACTION_REQUIRED"
    STARTED = "STARTED"
    PENDING = "PENDING"
    DONE = "DONE"

    @property
    def percent(self) -> int:
        return PHASE_PERCENT[self]


PHASE_PERCENT = {
    ExecutionPhase.ACTION_REQUIRED: 25,
    ExecutionPhase.STARTED: 25,
    ExecutionPhase.PENDING: 50,
    ExecutionPhase.DONE: 100,
}


@dataclass(frozen=True)
class ExecutionUpdate:
    """One progress event emitted while a route executes."""

    phase: ExecutionPhase
    message: str
    tx_hash: Optional[str] = None
    tx_link: Optional[str] = None

    @property
    def percent(self) -> int:
        return self.phase.percent


ExecutionCallback = Callable[[ExecutionUpdate], Union[None, Awaitable[None]]]


class BridgeProvider(ABC):
    """Abstract base class for bridge quote/execution providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier."""
        pass

    @abstractmethod
    async def get_quote(
        self,
        from_chain_id: int,
        to_chain_id: int,
        from_token: str,
        to_token: str,
        from_amount: int,
        from_address: str,
        slippage: Decimal,
    ) -> Quote:
        """
        Get a bridge quote.

        Args:
            from_chain_id: Source chain id
            to_chain_id: Destination chain id
            from_token: Source asset address
            to_token: Destination asset address
            from_amount: Raw amount of the source asset
            from_address: Wallet sending the funds
            slippage: Maximum acceptable slippage (0.005 = 0.5%)

        Returns:
            Quote for the route

        Raises:
            NoRouteError: If no route exists
            TransientQuoteError: If the request failed and may succeed later
        """
        pass

    @abstractmethod
    async def get_token_price(self, chain_id: int, token_address: str) -> Optional[Decimal]:
        """USD price of an asset, or None if it is unpriced."""
        pass

    @abstractmethod
    async def execute_route(self, quote: Quote, on_progress: ExecutionCallback) -> None:
        """
        Execute a quoted route.

        Calls ``on_progress`` for each sub-phase and returns once the funds
        arrived on the destination chain.

        Raises:
            UserRejectedError: If a signature was refused
            ExecutionError: On any other failure
        """
        pass
