"""Transaction signers."""

from hyprdeposit.wallet.base import TxReceipt, WalletSigner
from hyprdeposit.wallet.dry_run import DryRunWallet
from hyprdeposit.wallet.local import LocalWallet

__all__ = ["DryRunWallet", "LocalWallet", "TxReceipt", "WalletSigner"]
