"""Deposit optimizer: scan, quote, select and compare in one run."""

import logging
from decimal import Decimal
from typing import Optional

from hyprdeposit.amounts import floor_usd
from hyprdeposit.chains import ChainInfo
from hyprdeposit.config import Settings, get_settings
from hyprdeposit.optimizer.cache import TTLCache
from hyprdeposit.optimizer.dominance import compare_strategies
from hyprdeposit.optimizer.models import (
    BridgeOption,
    DepositPlan,
    DepositStrategy,
    TokenBalance,
)
from hyprdeposit.optimizer.quotes import QuoteCollector
from hyprdeposit.optimizer.scanner import BalanceScanner
from hyprdeposit.optimizer.selector import StrategySelector
from hyprdeposit.routing.base import BridgeProvider
from hyprdeposit.scanner.base import BalanceReader
from hyprdeposit.utils import ProgressCallback, notify

logger = logging.getLogger(__name__)


class DepositOptimizer:
    """Plans a deposit from balances scattered across chains.

    Collaborators are injected once and shared by every run. The only
    state kept between runs is the price/balance cache, which is cleared
    at the start of each plan.
    """

    def __init__(
        self,
        reader: BalanceReader,
        provider: BridgeProvider,
        settings: Optional[Settings] = None,
        cache: Optional[TTLCache] = None,
    ):
        self.settings = settings or get_settings()
        self.cache = cache if cache is not None else TTLCache(self.settings.cache_ttl_seconds)
        self.scanner = BalanceScanner(reader, provider, self.settings, self.cache)
        self.quotes = QuoteCollector(provider, self.settings)
        self.selector = StrategySelector(self.settings)

    async def scan_all_balances(
        self,
        wallet_address: str,
        chains: Optional[list[ChainInfo]] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> list[TokenBalance]:
        return await self.scanner.scan_all_balances(wallet_address, chains, on_progress)

    async def get_bridge_quotes(
        self,
        wallet_address: str,
        balances: list[TokenBalance],
        on_progress: Optional[ProgressCallback] = None,
    ) -> list[BridgeOption]:
        return await self.quotes.get_bridge_quotes(wallet_address, balances, on_progress)

    def calculate_strategies(
        self, target_usd: Decimal, options: list[BridgeOption]
    ) -> tuple[Optional[DepositStrategy], Optional[DepositStrategy]]:
        return self.selector.calculate_strategies(target_usd, options)

    async def calculate_deposit_plan(
        self,
        wallet_address: str,
        target_usd: Decimal,
        chains: Optional[list[ChainInfo]] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> DepositPlan:
        """
        Build a full deposit plan for a wallet.

        Insufficient funds and missing routes are reported through the
        plan's status, never raised.

        Args:
            wallet_address: Wallet holding the funds
            target_usd: Amount to deposit, floored to cents
            chains: Chains to scan (all supported chains by default)
            on_progress: Called with (message, percent) from 0 to 100

        Raises:
            ValueError: If the target is not positive
            ScanFailedError: If no chain could be scanned
        """
        target = floor_usd(Decimal(target_usd))
        if target <= 0:
            raise ValueError(f"Target amount must be positive, got {target_usd}")

        self.cache.invalidate()
        await notify(on_progress, "Starting deposit optimization...", 0)

        balances = await self.scan_all_balances(wallet_address, chains, on_progress)
        available = sum((b.balance_usd for b in balances), Decimal("0"))

        if available < target:
            logger.info(f"Insufficient funds: ${available:.2f} available, ${target} requested")
            await notify(on_progress, "Insufficient funds", 100)
            return DepositPlan(
                target_amount_usd=target,
                available_balance_usd=available,
                fastest=None,
                cheapest=None,
                all_balances=balances,
                insufficient_funds=True,
            )

        options = await self.get_bridge_quotes(wallet_address, balances, on_progress)

        if not options:
            logger.warning(f"No bridge routes found for {wallet_address}")
            await notify(on_progress, "No bridge routes available", 100)
            return DepositPlan(
                target_amount_usd=target,
                available_balance_usd=available,
                fastest=None,
                cheapest=None,
                all_balances=balances,
                insufficient_funds=False,
                comparison=compare_strategies(None, None, self.settings),
            )

        await notify(on_progress, "Calculating optimal strategies...", 95)
        fastest, cheapest = self.calculate_strategies(target, options)
        comparison = compare_strategies(fastest, cheapest, self.settings)
        logger.info(f"Plan for ${target}: {comparison.outcome.value}")

        await notify(on_progress, "Optimization complete!", 100)
        return DepositPlan(
            target_amount_usd=target,
            available_balance_usd=available,
            fastest=fastest,
            cheapest=cheapest,
            all_balances=balances,
            insufficient_funds=False,
            comparison=comparison,
        )
