"""Factory for creating bridge providers and wallets.

Creates the LI.FI provider and a local signer for live runs, otherwise
falls back to simulated ones.
"""

import logging
from typing import Optional

from hyprdeposit.config import Settings, get_settings
from hyprdeposit.routing.base import BridgeProvider
from hyprdeposit.scanner.base import BalanceReader
from hyprdeposit.wallet.base import WalletSigner

logger = logging.getLogger(__name__)


def create_wallet(settings: Optional[Settings] = None) -> WalletSigner:
    """Create the signer for this process.

    Uses the configured private key unless running in dry-run mode.
    """
    settings = settings or get_settings()

    if settings.has_wallet and not settings.dry_run:
        try:
            from hyprdeposit.wallet.local import LocalWallet
            return LocalWallet(settings=settings)
        except ValueError as e:
            logger.warning(f"Failed to create local wallet: {e}")

    # Fallback to simulated
    from hyprdeposit.wallet.dry_run import DryRunWallet
    return DryRunWallet()


def create_bridge_provider(
    settings: Optional[Settings] = None,
    wallet: Optional[WalletSigner] = None,
) -> BridgeProvider:
    """Create the bridge provider.

    Args:
        settings: Application settings
        wallet: Signer used for execution
    """
    settings = settings or get_settings()

    if not settings.dry_run:
        from hyprdeposit.routing.lifi import LiFiProvider
        return LiFiProvider(wallet=wallet, settings=settings)

    from hyprdeposit.routing.dry_run import DryRunBridgeProvider
    from hyprdeposit.wallet.dry_run import DryRunWallet

    logger.info("Dry-run mode: using simulated bridge provider")
    return DryRunBridgeProvider(wallet=wallet if isinstance(wallet, DryRunWallet) else None)


def create_balance_reader(settings: Optional[Settings] = None) -> BalanceReader:
    """Create the balance reader.

    Reads from chain RPC endpoints unless running in dry-run mode, where
    balances come from an empty static table.
    """
    settings = settings or get_settings()

    if not settings.dry_run:
        from hyprdeposit.scanner.rpc import RpcBalanceReader
        return RpcBalanceReader(settings=settings)

    from hyprdeposit.scanner.static import StaticBalanceReader
    return StaticBalanceReader()
