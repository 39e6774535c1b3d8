"""Balance scanning: enumerate, value and filter wallet balances."""

import asyncio
import logging
from decimal import Decimal
from typing import Optional

from hyprdeposit.chains import (
    SUPPORTED_CHAINS,
    ChainInfo,
    TokenInfo,
    get_stablecoins,
    is_known_stablecoin,
)
from hyprdeposit.config import Settings, get_settings
from hyprdeposit.optimizer.cache import TTLCache
from hyprdeposit.optimizer.models import TokenBalance
from hyprdeposit.routing.base import BridgeProvider
from hyprdeposit.scanner.base import BalanceFetchError, BalanceReader, RawBalance, ScanFailedError
from hyprdeposit.utils import ProgressCallback, gather_bounded, notify

logger = logging.getLogger(__name__)

# Share of overall plan progress covered by scanning
SCAN_PROGRESS_SPAN = 50


class BalanceScanner:
    """Reads native and known stable balances on every chain and values them."""

    def __init__(
        self,
        reader: BalanceReader,
        provider: BridgeProvider,
        settings: Optional[Settings] = None,
        cache: Optional[TTLCache] = None,
    ):
        self.reader = reader
        self.provider = provider
        self.settings = settings or get_settings()
        self.cache = cache if cache is not None else TTLCache(self.settings.cache_ttl_seconds)

    async def scan_all_balances(
        self,
        wallet_address: str,
        chains: Optional[list[ChainInfo]] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> list[TokenBalance]:
        """
        Scan a wallet across chains.

        Args:
            wallet_address: Wallet to scan
            chains: Chains to scan (all supported chains by default)
            on_progress: Called with (message, percent) in the 0-50 range

        Returns:
            Balances worth at least ``min_balance_usd``, largest first

        Raises:
            ScanFailedError: If not a single chain could be read
        """
        chains = list(chains) if chains is not None else list(SUPPORTED_CHAINS.values())
        await notify(on_progress, "Scanning balances...", 0)

        targets = [(chain, token) for chain in chains for token in self._assets_for(chain)]
        if not targets:
            return []

        lock = asyncio.Lock()
        completed = 0
        failed_chains: set[int] = set()
        scanned_chains: set[int] = set()

        async def scan_one(chain: ChainInfo, token: TokenInfo) -> Optional[TokenBalance]:
            nonlocal completed
            try:
                raw = await self._read_balance(wallet_address, chain, token)
            except BalanceFetchError as e:
                logger.warning(str(e))
                failed_chains.add(chain.id)
                balance = None
            else:
                scanned_chains.add(chain.id)
                balance = await self._value_balance(chain, token, raw)

            async with lock:
                completed += 1
                await notify(
                    on_progress,
                    f"Scanning {chain.name}...",
                    completed / len(targets) * SCAN_PROGRESS_SPAN,
                )
            return balance

        results = await gather_bounded(
            [lambda c=chain, t=token: scan_one(c, t) for chain, token in targets],
            self.settings.max_concurrent_requests,
        )

        if not scanned_chains:
            raise ScanFailedError(f"Could not scan any of {len(chains)} chains")
        if failed_chains - scanned_chains:
            logger.warning(f"Skipped unreachable chains: {sorted(failed_chains - scanned_chains)}")

        balances = [
            balance
            for balance in results
            if balance is not None and balance.balance_usd >= self.settings.min_balance_usd
        ]
        balances.sort(key=lambda b: (-b.balance_usd, b.chain_id, b.token_address.lower()))

        total = sum((b.balance_usd for b in balances), Decimal("0"))
        logger.info(f"Found {len(balances)} balances worth ${total:.2f} for {wallet_address}")
        return balances

    def _assets_for(self, chain: ChainInfo) -> list[TokenInfo]:
        return [chain.native_token, *get_stablecoins(chain.id)]

    async def _read_balance(
        self, wallet_address: str, chain: ChainInfo, token: TokenInfo
    ) -> RawBalance:
        key = ("balance", wallet_address.lower(), chain.id, token.address.lower())
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        raw = await self.reader.get_balance(wallet_address, chain, token)
        self.cache.set(key, raw)
        return raw

    async def get_price(self, chain_id: int, token_address: str) -> Optional[Decimal]:
        """USD price of an asset. Known stable assets are priced at $1."""
        if is_known_stablecoin(chain_id, token_address):
            return Decimal("1")

        key = ("price", chain_id, token_address.lower())
        if self.cache.contains(key):
            return self.cache.get(key)

        try:
            price = await self.provider.get_token_price(chain_id, token_address)
        except Exception as e:
            logger.error(f"Price lookup failed for {token_address} on chain {chain_id}: {e}")
            return None
        self.cache.set(key, price)
        return price

    async def _value_balance(
        self, chain: ChainInfo, token: TokenInfo, raw: RawBalance
    ) -> Optional[TokenBalance]:
        if raw.raw_amount <= 0:
            return None

        price = await self.get_price(chain.id, token.address)
        if price is None:
            logger.debug(f"{token.symbol} on {chain.name} is unpriced, valuing at $0")
            price = Decimal("0")

        return TokenBalance(
            chain_id=chain.id,
            chain_name=chain.name,
            token_address=token.address,
            token_symbol=token.symbol,
            token_decimals=raw.decimals,
            raw_balance=raw.raw_amount,
            balance_usd=raw.amount * price,
        )
