"""Decide whether the fastest and cheapest strategies are a real choice."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from hyprdeposit.config import Settings, get_settings
from hyprdeposit.optimizer.models import DepositStrategy

logger = logging.getLogger(__name__)


class ComparisonOutcome(str, Enum):
    NONE = "none"  # no strategy at all
    SINGLE = "single"  # only one objective produced a strategy
    IDENTICAL = "identical"
    FASTEST_DOMINATES = "fastest_dominates"
    CHEAPEST_DOMINATES = "cheapest_dominates"
    TRADE_OFF = "trade_off"


@dataclass(frozen=True)
class StrategyComparison:
    """Outcome of comparing the two strategies of a plan.

    ``recommended`` is the single strategy to present, or None when both
    should be offered as a trade-off.
    """

    outcome: ComparisonOutcome
    recommended: Optional[DepositStrategy]

    @property
    def is_trade_off(self) -> bool:
        return self.outcome == ComparisonOutcome.TRADE_OFF


def dominates(a: DepositStrategy, b: DepositStrategy, output_band: Decimal) -> bool:
    """Check if ``a`` is faster-or-equal, cheaper-or-equal and within the output band of ``b``."""
    return (
        a.total_time_seconds <= b.total_time_seconds
        and a.total_fees_usd <= b.total_fees_usd
        and a.total_output_usd >= b.total_output_usd * output_band
    )


def strategies_identical(
    a: DepositStrategy, b: DepositStrategy, settings: Settings
) -> bool:
    """Same legs (chain, asset, amount) and near-equal aggregate metrics."""
    return (
        a.leg_keys == b.leg_keys
        and abs(a.total_time_seconds - b.total_time_seconds)
        <= settings.identical_time_tolerance_seconds
        and abs(a.total_fees_usd - b.total_fees_usd) < settings.identical_fee_tolerance_usd
        and abs(a.total_output_usd - b.total_output_usd) < settings.identical_output_tolerance_usd
    )


def compare_strategies(
    fastest: Optional[DepositStrategy],
    cheapest: Optional[DepositStrategy],
    settings: Optional[Settings] = None,
) -> StrategyComparison:
    """
    Compare the fastest and cheapest strategies of a plan.

    A strategy that is strictly faster while costing no more wins
    outright, even if its output falls outside the band. When each
    dominates the other the larger output wins, then the faster one.
    """
    settings = settings or get_settings()

    if fastest is None and cheapest is None:
        return StrategyComparison(ComparisonOutcome.NONE, None)
    if fastest is None or cheapest is None:
        return StrategyComparison(ComparisonOutcome.SINGLE, fastest or cheapest)

    if strategies_identical(fastest, cheapest, settings):
        logger.debug("Strategies are identical, presenting one")
        return StrategyComparison(ComparisonOutcome.IDENTICAL, fastest)

    band = settings.dominance_output_band
    cheapest_dominates = dominates(cheapest, fastest, band)
    fastest_dominates = dominates(fastest, cheapest, band)

    cheapest_strictly_better = (
        cheapest.total_time_seconds < fastest.total_time_seconds
        and cheapest.total_fees_usd <= fastest.total_fees_usd
    )
    fastest_strictly_better = (
        fastest.total_time_seconds < cheapest.total_time_seconds
        and fastest.total_fees_usd <= cheapest.total_fees_usd
    )

    if (cheapest_dominates and not fastest_dominates) or cheapest_strictly_better:
        return StrategyComparison(ComparisonOutcome.CHEAPEST_DOMINATES, cheapest)
    if (fastest_dominates and not cheapest_dominates) or fastest_strictly_better:
        return StrategyComparison(ComparisonOutcome.FASTEST_DOMINATES, fastest)

    if cheapest_dominates and fastest_dominates:
        if cheapest.total_output_usd > fastest.total_output_usd:
            return StrategyComparison(ComparisonOutcome.CHEAPEST_DOMINATES, cheapest)
        return StrategyComparison(ComparisonOutcome.FASTEST_DOMINATES, fastest)

    return StrategyComparison(ComparisonOutcome.TRADE_OFF, None)
