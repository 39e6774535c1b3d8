"""Quote acquisition: one bridge quote per balance."""

import asyncio
import logging
from decimal import Decimal
from typing import Optional

from hyprdeposit.config import Settings, get_settings
from hyprdeposit.optimizer.models import BridgeOption, TokenBalance
from hyprdeposit.routing.base import BridgeProvider, Quote, QuoteError
from hyprdeposit.utils import ProgressCallback, gather_bounded, notify

logger = logging.getLogger(__name__)

QUOTE_PROGRESS_START = 50
QUOTE_PROGRESS_SPAN = 40


class QuoteCollector:
    """Requests a quote from every balance to the destination asset."""

    def __init__(self, provider: BridgeProvider, settings: Optional[Settings] = None):
        self.provider = provider
        self.settings = settings or get_settings()

    def is_destination(self, balance: TokenBalance) -> bool:
        """Check if a balance already is the destination asset."""
        return (
            balance.chain_id == self.settings.destination_chain_id
            and balance.token_address.lower() == self.settings.destination_token_address.lower()
        )

    async def get_bridge_quotes(
        self,
        wallet_address: str,
        balances: list[TokenBalance],
        on_progress: Optional[ProgressCallback] = None,
    ) -> list[BridgeOption]:
        """
        Quote every balance to the destination asset.

        Only the ``max_tokens_to_check`` largest balances are quoted.
        Failed or timed-out quotes are logged and skipped.

        Returns:
            Bridge options in the order of ``balances``
        """
        to_quote = balances[: self.settings.max_tokens_to_check]
        await notify(on_progress, "Getting bridge quotes...", QUOTE_PROGRESS_START)

        if len(balances) > len(to_quote):
            logger.info(f"Quoting top {len(to_quote)} of {len(balances)} balances")

        lock = asyncio.Lock()
        completed = 0

        async def quote_one(balance: TokenBalance) -> Optional[BridgeOption]:
            nonlocal completed
            option = await self._quote_balance(wallet_address, balance)
            async with lock:
                completed += 1
                await notify(
                    on_progress,
                    f"Got quote for {balance.token_symbol} on {balance.chain_name}",
                    QUOTE_PROGRESS_START + completed / len(to_quote) * QUOTE_PROGRESS_SPAN,
                )
            return option

        results = await gather_bounded(
            [lambda b=balance: quote_one(b) for balance in to_quote],
            self.settings.max_concurrent_requests,
        )

        options = [option for option in results if option is not None]
        await notify(on_progress, "Quotes complete", QUOTE_PROGRESS_START + QUOTE_PROGRESS_SPAN)
        logger.info(f"Got {len(options)} bridge options from {len(to_quote)} balances")
        return options

    async def _quote_balance(
        self, wallet_address: str, balance: TokenBalance
    ) -> Optional[BridgeOption]:
        if self.is_destination(balance):
            logger.debug(f"Skipping {balance.token_symbol} on {balance.chain_name}: already at destination")
            return None

        if balance.raw_balance <= 0:
            return None

        try:
            quote = await asyncio.wait_for(
                self.provider.get_quote(
                    from_chain_id=balance.chain_id,
                    to_chain_id=self.settings.destination_chain_id,
                    from_token=balance.token_address,
                    to_token=self.settings.destination_token_address,
                    from_amount=balance.raw_balance,
                    from_address=wallet_address,
                    slippage=self.settings.default_slippage,
                ),
                timeout=self.settings.quote_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Quote timed out for {balance.token_symbol} on {balance.chain_name}")
            return None
        except QuoteError as e:
            logger.warning(f"Failed to get quote for {balance.token_symbol} on {balance.chain_name}: {e}")
            return None
        except Exception as e:
            logger.error(f"Quote error for {balance.token_symbol} on {balance.chain_name}: {e}")
            return None

        return build_option(balance, quote)


def build_option(balance: TokenBalance, quote: Quote) -> BridgeOption:
    """Derive option metrics from a quote.

    The destination asset is a USD stablecoin, so its output amount is its
    USD value.
    """
    output_usd = quote.output_amount
    input_usd = balance.balance_usd
    efficiency = output_usd / input_usd if input_usd > 0 else Decimal("0")

    return BridgeOption(
        source=balance,
        quote=quote,
        estimated_output_usd=output_usd,
        estimated_time_seconds=quote.execution_time_seconds,
        estimated_fees_usd=max(Decimal("0"), input_usd - output_usd),
        efficiency=efficiency,
    )
