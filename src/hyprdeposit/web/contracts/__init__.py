"""Request/response contracts for the web API."""

from hyprdeposit.web.contracts.deposits import (
    BalancesRequest,
    BalancesResponse,
    BridgeLegView,
    PlanRequest,
    PlanResponse,
    StrategyView,
    TokenBalanceView,
)

__all__ = [
    "BalancesRequest",
    "BalancesResponse",
    "BridgeLegView",
    "PlanRequest",
    "PlanResponse",
    "StrategyView",
    "TokenBalanceView",
]
