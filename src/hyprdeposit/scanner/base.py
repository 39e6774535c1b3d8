"""Base interface for wallet balance readers.

A balance reader answers one question: how much of a given asset does a
wallet hold on a given chain. Valuation and filtering happen in the
optimizer's balance scanner.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from hyprdeposit.amounts import from_raw_amount
from hyprdeposit.chains import ChainInfo, TokenInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawBalance:
    """Balance as reported by the chain."""

    raw_amount: int
    decimals: int

    @property
    def amount(self) -> Decimal:
        """Balance in human units."""
        return from_raw_amount(self.raw_amount, self.decimals)


class BalanceFetchError(Exception):
    """Raised when a chain or asset is unreachable. Safe to retry."""

    def __init__(self, chain_id: int, token_symbol: str, reason: str):
        self.chain_id = chain_id
        self.token_symbol = token_symbol
        self.reason = reason
        super().__init__(f"Failed to get {token_symbol} balance on chain {chain_id}: {reason}")


class BalanceReader(ABC):
    """Abstract base class for balance readers."""

    @abstractmethod
    async def get_balance(
        self,
        wallet_address: str,
        chain: ChainInfo,
        token: TokenInfo,
    ) -> RawBalance:
        """
        Get the balance of one asset on one chain.

        Args:
            wallet_address: Wallet to query
            chain: Chain the asset lives on
            token: Asset to query (native or ERC-20)

        Returns:
            Raw balance with the asset's decimals

        Raises:
            BalanceFetchError: If the chain or asset could not be read
        """
        pass


class ScanFailedError(Exception):
    """Raised when no chain at all could be scanned."""
