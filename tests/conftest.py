"""Pytest configuration and fixtures."""

import asyncio
import os
from dataclasses import replace
from decimal import Decimal
from typing import Optional

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "true"
os.environ["DRY_RUN"] = "true"
os.environ["WALLET_PRIVATE_KEY"] = ""

from hyprdeposit.amounts import from_raw_amount, to_raw_amount
from hyprdeposit.chains import SUPPORTED_CHAINS, find_token, is_known_stablecoin
from hyprdeposit.config import ARBITRUM_CHAIN_ID, ARBITRUM_USDC_ADDRESS, Settings
from hyprdeposit.optimizer.models import (
    BridgeOption,
    DepositStrategy,
    StrategyObjective,
    TokenBalance,
)
from hyprdeposit.optimizer.quotes import build_option
from hyprdeposit.routing.base import (
    BridgeProvider,
    ExecutionCallback,
    ExecutionPhase,
    ExecutionUpdate,
    Quote,
)
from hyprdeposit.utils import notify
from hyprdeposit.wallet.dry_run import DryRunWallet

WALLET = "0x1111111111111111111111111111111111111111"

BASE_USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
OPTIMISM_USDC = "0x0b2C639c533813f4Aa9D7837CAf62653d097Ff85"
OPTIMISM_USDT = "0x94b008aA00579c1307B0EF2c499aD98a8ce58e58"
POLYGON_USDC = "0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359"
NATIVE = "0x0000000000000000000000000000000000000000"


class FakeBridgeProvider(BridgeProvider):
    """Scriptable bridge provider.

    Output is input value times ``efficiency``; per-asset efficiencies,
    per-chain times, quote errors, quote delays and execution errors can
    be set on the instance.
    """

    def __init__(
        self,
        prices: Optional[dict[tuple[int, str], Decimal]] = None,
        efficiency: Decimal = Decimal("0.99"),
        wallet: Optional[DryRunWallet] = None,
    ):
        self.prices = {(c, a.lower()): p for (c, a), p in (prices or {}).items()}
        self.efficiency = efficiency
        self.efficiencies: dict[tuple[int, str], Decimal] = {}
        self.times: dict[int, int] = {}
        self.quote_errors: dict[tuple[int, str], Exception] = {}
        self.quote_delays: dict[int, float] = {}
        self.execution_errors: dict[int, Exception] = {}
        self.wallet = wallet

        self.price_requests: list[tuple[int, str]] = []
        self.quote_requests: list[tuple[int, str, int]] = []
        self.executed: list[Quote] = []
        self.callbacks: list[ExecutionCallback] = []

    @property
    def name(self) -> str:
        return "fake"

    async def get_token_price(self, chain_id: int, token_address: str) -> Optional[Decimal]:
        self.price_requests.append((chain_id, token_address.lower()))
        return self.prices.get((chain_id, token_address.lower()))

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
        key = (from_chain_id, from_token.lower())
        self.quote_requests.append((from_chain_id, from_token.lower(), from_amount))

        if from_chain_id in self.quote_delays:
            await asyncio.sleep(self.quote_delays[from_chain_id])
        if key in self.quote_errors:
            raise self.quote_errors[key]

        token = find_token(from_chain_id, from_token)
        if is_known_stablecoin(from_chain_id, from_token):
            price = Decimal("1")
        else:
            price = self.prices.get(key, Decimal("0"))

        efficiency = self.efficiencies.get(key, self.efficiency)
        output_usd = from_raw_amount(from_amount, token.decimals) * price * efficiency
        to_amount = to_raw_amount(output_usd, 6)

        return Quote(
            provider=self.name,
            from_chain_id=from_chain_id,
            to_chain_id=to_chain_id,
            from_token=from_token,
            to_token=to_token,
            from_amount=from_amount,
            to_amount=to_amount,
            to_amount_min=to_amount,
            to_token_decimals=6,
            execution_time_seconds=self.times.get(from_chain_id, 60),
        )

    async def execute_route(self, quote: Quote, on_progress: ExecutionCallback) -> None:
        self.executed.append(quote)
        self.callbacks.append(on_progress)
        tx_hash = f"0x{len(self.executed):064x}"

        await notify(on_progress, ExecutionUpdate(ExecutionPhase.ACTION_REQUIRED, "Sign"))
        await notify(on_progress, ExecutionUpdate(ExecutionPhase.STARTED, "Sent", tx_hash))

        error = self.execution_errors.get(quote.from_chain_id)
        if error is not None:
            raise error

        await notify(on_progress, ExecutionUpdate(ExecutionPhase.PENDING, "Bridging", tx_hash))
        if self.wallet is not None:
            self.wallet.credit(quote.to_chain_id, quote.to_token, quote.to_amount)
        await notify(on_progress, ExecutionUpdate(ExecutionPhase.DONE, "Done", tx_hash))


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, dry_run=True, debug=True, environment="test")


@pytest.fixture
def wallet() -> DryRunWallet:
    return DryRunWallet(address=WALLET)


@pytest.fixture
def provider(wallet) -> FakeBridgeProvider:
    return FakeBridgeProvider(
        prices={(8453, NATIVE): Decimal("3000"), (10, NATIVE): Decimal("3000")},
        wallet=wallet,
    )


def make_balance(
    chain_id: int = 8453,
    token_address: str = BASE_USDC,
    amount: Decimal = Decimal("20"),
    price: Decimal = Decimal("1"),
) -> TokenBalance:
    """Build a valued balance for a known asset."""
    token = find_token(chain_id, token_address)
    return TokenBalance(
        chain_id=chain_id,
        chain_name=SUPPORTED_CHAINS[chain_id].name,
        token_address=token.address,
        token_symbol=token.symbol,
        token_decimals=token.decimals,
        raw_balance=to_raw_amount(Decimal(amount), token.decimals),
        balance_usd=Decimal(amount) * Decimal(price),
    )


def make_option(
    chain_id: int = 8453,
    token_address: str = BASE_USDC,
    amount: Decimal = Decimal("20"),
    price: Decimal = Decimal("1"),
    efficiency: Decimal = Decimal("0.99"),
    time_seconds: int = 60,
) -> BridgeOption:
    """Build a quoted option whose output is ``efficiency`` times its value."""
    balance = make_balance(chain_id, token_address, amount, price)
    output_usd = balance.balance_usd * Decimal(efficiency)
    to_amount = to_raw_amount(output_usd, 6)
    quote = Quote(
        provider="fake",
        from_chain_id=chain_id,
        to_chain_id=ARBITRUM_CHAIN_ID,
        from_token=balance.token_address,
        to_token=ARBITRUM_USDC_ADDRESS,
        from_amount=balance.raw_balance,
        to_amount=to_amount,
        to_amount_min=to_amount,
        to_token_decimals=6,
        execution_time_seconds=time_seconds,
    )
    return build_option(balance, quote)


def allocate_all(option: BridgeOption) -> BridgeOption:
    """Allocated copy using the whole balance."""
    return replace(
        option,
        used_input_usd=option.source.balance_usd,
        used_output_usd=option.estimated_output_usd,
        used_fees_usd=option.estimated_fees_usd,
        used_input_amount=str(option.source.raw_balance),
    )


def make_strategy(
    objective: StrategyObjective = StrategyObjective.FASTEST,
    bridges: tuple = (),
    time_seconds: int = 60,
    fees_usd: Decimal = Decimal("0.2"),
    output_usd: Decimal = Decimal("19.8"),
) -> DepositStrategy:
    """Build a strategy with explicit aggregate metrics."""
    input_usd = Decimal(output_usd) + Decimal(fees_usd)
    return DepositStrategy(
        objective=objective,
        bridges=tuple(bridges),
        total_input_usd=input_usd,
        total_output_usd=Decimal(output_usd),
        total_time_seconds=time_seconds,
        total_fees_usd=Decimal(fees_usd),
        efficiency=Decimal(output_usd) / input_usd,
    )


def strategy_of(*options: BridgeOption, target_usd: Optional[Decimal] = None) -> DepositStrategy:
    """Strategy that bridges each option's whole balance, in order.

    The target defaults to the combined output of the legs.
    """
    legs = tuple(allocate_all(option) for option in options)
    total_output = sum((leg.used_output_usd for leg in legs), Decimal("0"))
    return DepositStrategy(
        objective=StrategyObjective.FASTEST,
        bridges=legs,
        total_input_usd=sum((leg.used_input_usd for leg in legs), Decimal("0")),
        total_output_usd=total_output,
        total_time_seconds=sum(leg.estimated_time_seconds for leg in legs),
        total_fees_usd=sum((leg.used_fees_usd for leg in legs), Decimal("0")),
        efficiency=Decimal("0.99"),
        target_usd=target_usd if target_usd is not None else total_output,
    )
