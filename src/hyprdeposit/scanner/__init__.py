"""Wallet balance readers."""

from hyprdeposit.scanner.base import (
    BalanceFetchError,
    BalanceReader,
    RawBalance,
    ScanFailedError,
)
from hyprdeposit.scanner.rpc import RpcBalanceReader
from hyprdeposit.scanner.static import StaticBalanceReader

__all__ = [
    "BalanceFetchError",
    "BalanceReader",
    "RawBalance",
    "RpcBalanceReader",
    "ScanFailedError",
    "StaticBalanceReader",
]
