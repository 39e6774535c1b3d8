"""Bridge quote and execution providers.

Providers:
- LI.FI: cross-chain aggregator (quotes, prices, execution)
- Simulated: deterministic quotes for dry-run mode
"""

from hyprdeposit.routing.base import (
    BridgeProvider,
    ExecutionError,
    ExecutionPhase,
    ExecutionUpdate,
    NoRouteError,
    Quote,
    QuoteError,
    TransientQuoteError,
    UserRejectedError,
)
from hyprdeposit.routing.dry_run import DryRunBridgeProvider
from hyprdeposit.routing.factory import (
    create_balance_reader,
    create_bridge_provider,
    create_wallet,
)
from hyprdeposit.routing.lifi import LiFiProvider

__all__ = [
    # Base classes
    "BridgeProvider",
    "Quote",
    "ExecutionPhase",
    "ExecutionUpdate",
    # Errors
    "QuoteError",
    "NoRouteError",
    "TransientQuoteError",
    "ExecutionError",
    "UserRejectedError",
    # Providers
    "DryRunBridgeProvider",
    "LiFiProvider",
    # Factory functions
    "create_balance_reader",
    "create_bridge_provider",
    "create_wallet",
]
