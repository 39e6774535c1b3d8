"""Deposit planning service for the web API.

SECURITY: This service only reads public chain data and quotes. It never
holds keys or signs; execution stays with the client's wallet.
"""

import logging
from decimal import Decimal
from typing import Optional

from hyprdeposit.chains import SUPPORTED_CHAINS, ChainInfo
from hyprdeposit.config import get_settings
from hyprdeposit.optimizer.models import DepositStrategy, TokenBalance
from hyprdeposit.optimizer.planner import DepositOptimizer
from hyprdeposit.routing.factory import create_balance_reader, create_bridge_provider
from hyprdeposit.scanner.base import ScanFailedError
from hyprdeposit.web.contracts.deposits import (
    BalancesRequest,
    BalancesResponse,
    BridgeLegView,
    PlanRequest,
    PlanResponse,
    StrategyView,
    TokenBalanceView,
)

logger = logging.getLogger(__name__)


class UnknownChainError(ValueError):
    """Raised when a request names a chain that is not supported."""


def resolve_chains(chain_ids: Optional[list[int]]) -> Optional[list[ChainInfo]]:
    """Map requested chain ids to chain configs (None means all)."""
    if chain_ids is None:
        return None

    unknown = [chain_id for chain_id in chain_ids if chain_id not in SUPPORTED_CHAINS]
    if unknown:
        raise UnknownChainError(f"Unsupported chain ids: {unknown}")
    return [SUPPORTED_CHAINS[chain_id] for chain_id in chain_ids]


def balance_view(balance: TokenBalance) -> TokenBalanceView:
    return TokenBalanceView(
        chain_id=balance.chain_id,
        chain_name=balance.chain_name,
        token_address=balance.token_address,
        token_symbol=balance.token_symbol,
        token_decimals=balance.token_decimals,
        balance=balance.amount,
        balance_raw=str(balance.raw_balance),
        balance_usd=balance.balance_usd,
    )


def strategy_view(strategy: Optional[DepositStrategy]) -> Optional[StrategyView]:
    if strategy is None:
        return None

    return StrategyView(
        objective=strategy.objective.value,
        legs=[
            BridgeLegView(
                chain_id=leg.source.chain_id,
                chain_name=leg.source.chain_name,
                token_symbol=leg.source.token_symbol,
                token_address=leg.source.token_address,
                input_usd=leg.input_usd,
                output_usd=leg.output_usd,
                fees_usd=leg.used_fees_usd or Decimal("0"),
                time_seconds=leg.estimated_time_seconds,
                efficiency=leg.efficiency,
                used_input_amount=str(leg.input_amount_raw),
                provider=leg.quote.provider,
                tool=leg.quote.tool,
            )
            for leg in strategy.bridges
        ],
        total_input_usd=strategy.total_input_usd,
        total_output_usd=strategy.total_output_usd,
        total_time_seconds=strategy.total_time_seconds,
        total_fees_usd=strategy.total_fees_usd,
        efficiency=strategy.efficiency,
    )


class DepositService:
    """Scans wallets and builds deposit plans."""

    def __init__(self, optimizer: Optional[DepositOptimizer] = None):
        self._optimizer = optimizer

    @property
    def optimizer(self) -> DepositOptimizer:
        if self._optimizer is None:
            settings = get_settings()
            self._optimizer = DepositOptimizer(
                reader=create_balance_reader(settings),
                provider=create_bridge_provider(settings),
                settings=settings,
            )
        return self._optimizer

    async def get_balances(self, request: BalancesRequest) -> BalancesResponse:
        """Scan a wallet and return its valued balances."""
        chains = resolve_chains(request.chain_ids)

        try:
            balances = await self.optimizer.scan_all_balances(request.address, chains)
        except ScanFailedError as e:
            logger.error(f"Balance scan failed for {request.address[:10]}...: {e}")
            return BalancesResponse(success=False, address=request.address, error=str(e))

        return BalancesResponse(
            success=True,
            address=request.address,
            balances=[balance_view(b) for b in balances],
            total_usd=sum((b.balance_usd for b in balances), Decimal("0")),
        )

    async def get_plan(self, request: PlanRequest) -> PlanResponse:
        """Build a deposit plan for a wallet and target amount."""
        chains = resolve_chains(request.chain_ids)

        try:
            plan = await self.optimizer.calculate_deposit_plan(
                request.address, request.target_usd, chains
            )
        except ScanFailedError as e:
            logger.error(f"Deposit plan failed for {request.address[:10]}...: {e}")
            return PlanResponse(
                success=False,
                status="scan_failed",
                target_usd=request.target_usd,
                error=str(e),
            )

        recommended = plan.recommended
        return PlanResponse(
            success=True,
            status=plan.status.value,
            target_usd=plan.target_amount_usd,
            available_usd=plan.available_balance_usd,
            insufficient_funds=plan.insufficient_funds,
            fastest=strategy_view(plan.fastest),
            cheapest=strategy_view(plan.cheapest),
            comparison=plan.comparison.outcome.value if plan.comparison else None,
            recommended=recommended.objective.value if recommended else None,
            balances=[balance_view(b) for b in plan.all_balances],
        )
