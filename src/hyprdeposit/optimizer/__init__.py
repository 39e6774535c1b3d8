"""Deposit optimization engine."""

from hyprdeposit.optimizer.cache import TTLCache
from hyprdeposit.optimizer.dominance import (
    ComparisonOutcome,
    StrategyComparison,
    compare_strategies,
)
from hyprdeposit.optimizer.models import (
    BridgeOption,
    DepositPlan,
    DepositStrategy,
    PlanStatus,
    StrategyObjective,
    TokenBalance,
)
from hyprdeposit.optimizer.planner import DepositOptimizer
from hyprdeposit.optimizer.quotes import QuoteCollector, build_option
from hyprdeposit.optimizer.scanner import BalanceScanner
from hyprdeposit.optimizer.selector import StrategySelector

__all__ = [
    "BalanceScanner",
    "BridgeOption",
    "ComparisonOutcome",
    "DepositOptimizer",
    "DepositPlan",
    "DepositStrategy",
    "PlanStatus",
    "QuoteCollector",
    "StrategyComparison",
    "StrategyObjective",
    "StrategySelector",
    "TTLCache",
    "TokenBalance",
    "build_option",
    "compare_strategies",
]
