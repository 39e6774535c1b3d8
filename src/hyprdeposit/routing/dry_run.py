"""Dry-run bridge provider for simulated deposits.

Quotes are deterministic: a percentage fee plus a flat per-chain network
fee, with per-chain execution times. Execution emits the same sub-phases
as a real route without touching any chain.
"""

import logging
import secrets
from decimal import Decimal
from typing import Optional

from hyprdeposit.amounts import from_raw_amount, to_raw_amount
from hyprdeposit.chains import find_token, is_stablecoin
from hyprdeposit.routing.base import (
    BridgeProvider,
    ExecutionCallback,
    ExecutionPhase,
    ExecutionUpdate,
    NoRouteError,
    Quote,
)
from hyprdeposit.utils import notify
from hyprdeposit.wallet.dry_run import DryRunWallet

logger = logging.getLogger(__name__)

# Simulated native asset prices in USD, for demonstration only
SIMULATED_PRICES: dict[str, Decimal] = {
    "ETH": Decimal("3900.00"),
    "BNB": Decimal("710.00"),
    "POL": Decimal("0.62"),
    "MATIC": Decimal("0.62"),
    "AVAX": Decimal("52.00"),
    "FTM": Decimal("1.05"),
    "HYPE": Decimal("25.00"),
    "MON": Decimal("1.00"),
}

# Simulated bridge durations by source chain
SIMULATED_TIMES: dict[int, int] = {
    1: 900,  # Ethereum
    10: 120,  # Optimism
    56: 180,  # BSC
    137: 240,  # Polygon
    8453: 60,  # Base
    42161: 30,  # Arbitrum
    43114: 120,  # Avalanche
    999: 90,  # HyperEVM
    143: 90,  # Monad
}

# Flat network fee in USD by source chain
SIMULATED_NETWORK_FEES: dict[int, Decimal] = {
    1: Decimal("3.00"),
    56: Decimal("0.10"),
    137: Decimal("0.05"),
}
DEFAULT_NETWORK_FEE_USD = Decimal("0.02")


class DryRunBridgeProvider(BridgeProvider):
    """Simulated bridge provider.

    Args:
        fee_percent: Bridge fee as a fraction of the input value
        wallet: Optional dry-run wallet credited when a route completes
    """

    def __init__(
        self,
        fee_percent: Decimal = Decimal("0.003"),
        wallet: Optional[DryRunWallet] = None,
    ):
        self.fee_percent = fee_percent
        self.wallet = wallet
        self._prices = SIMULATED_PRICES.copy()

    @property
    def name(self) -> str:
        return "Simulated Bridge"

    def _price(self, symbol: str) -> Optional[Decimal]:
        if is_stablecoin(symbol):
            return Decimal("1")
        return self._prices.get(symbol.upper())

    async def get_token_price(self, chain_id: int, token_address: str) -> Optional[Decimal]:
        token = find_token(chain_id, token_address)
        if token is None:
            return None
        return self._price(token.symbol)

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
        source = find_token(from_chain_id, from_token)
        destination = find_token(to_chain_id, to_token)
        if source is None or destination is None:
            raise NoRouteError(f"Unknown asset {from_token} on chain {from_chain_id}")

        price = self._price(source.symbol)
        if price is None:
            raise NoRouteError(f"No simulated price for {source.symbol}")

        input_usd = from_raw_amount(from_amount, source.decimals) * price
        network_fee = SIMULATED_NETWORK_FEES.get(from_chain_id, DEFAULT_NETWORK_FEE_USD)
        bridge_fee = input_usd * self.fee_percent
        output_usd = input_usd - bridge_fee - network_fee
        if output_usd <= 0:
            raise NoRouteError(f"Amount too small to cover fees on chain {from_chain_id}")

        to_amount = to_raw_amount(output_usd, destination.decimals)
        to_amount_min = to_raw_amount(output_usd * (1 - slippage), destination.decimals)

        logger.debug(
            f"[DRY RUN] Quote {source.symbol} on {from_chain_id}: "
            f"${input_usd:.2f} -> ${output_usd:.2f}"
        )

        return Quote(
            provider=self.name,
            from_chain_id=from_chain_id,
            to_chain_id=to_chain_id,
            from_token=from_token,
            to_token=to_token,
            from_amount=from_amount,
            to_amount=to_amount,
            to_amount_min=to_amount_min,
            to_token_decimals=destination.decimals,
            execution_time_seconds=SIMULATED_TIMES.get(from_chain_id, 300),
            fee_costs_usd=bridge_fee,
            gas_costs_usd=network_fee,
            tool="simulated",
            is_simulated=True,
        )

    async def execute_route(self, quote: Quote, on_progress: ExecutionCallback) -> None:
        tx_hash = f"0x{secrets.token_hex(32)}"

        await notify(
            on_progress,
            ExecutionUpdate(ExecutionPhase.ACTION_REQUIRED, "Waiting for wallet signature"),
        )
        await notify(
            on_progress,
            ExecutionUpdate(ExecutionPhase.STARTED, "Bridge transaction submitted", tx_hash),
        )
        await notify(
            on_progress,
            ExecutionUpdate(ExecutionPhase.PENDING, "Bridging in progress", tx_hash),
        )

        if self.wallet is not None:
            self.wallet.credit(quote.to_chain_id, quote.to_token, quote.to_amount)

        logger.info(f"[DRY RUN] Simulated bridge from chain {quote.from_chain_id}: {tx_hash}")
        await notify(
            on_progress,
            ExecutionUpdate(ExecutionPhase.DONE, "Bridge complete", tx_hash),
        )
