"""Sequential execution of a deposit strategy.

Legs run one at a time: each one needs the wallet's signature, and a
wallet session cannot safely sign two requests at once. There is no
cancellation primitive. A caller that stops awaiting the run abandons it,
but transactions already submitted stay on chain.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Callable, Optional

from hyprdeposit.amounts import from_raw_amount, to_raw_amount
from hyprdeposit.config import Settings, get_settings
from hyprdeposit.execution.errors import classify_execution_error
from hyprdeposit.execution.progress import (
    BridgeExecution,
    ExecutionProgress,
    LegStatus,
    RunStatus,
    SettlementState,
)
from hyprdeposit.optimizer.models import BridgeOption, DepositStrategy
from hyprdeposit.routing.base import BridgeProvider, ExecutionPhase, ExecutionUpdate, Quote
from hyprdeposit.utils import notify
from hyprdeposit.wallet.base import WalletSigner

logger = logging.getLogger(__name__)

ExecutionObserver = Callable[[ExecutionProgress], object]


class SequentialExecutor:
    """Executes a strategy's legs in order, then settles on the destination chain."""

    def __init__(
        self,
        provider: BridgeProvider,
        wallet: WalletSigner,
        settings: Optional[Settings] = None,
    ):
        self.provider = provider
        self.wallet = wallet
        self.settings = settings or get_settings()

    async def execute_strategy(
        self,
        strategy: DepositStrategy,
        on_progress: Optional[ExecutionObserver] = None,
        target_usd: Optional[Decimal] = None,
    ) -> ExecutionProgress:
        """
        Execute every leg of a strategy, then the settlement transfer.

        A refused signature stops the run. Any other leg failure is recorded
        and the next leg still runs. Settlement happens once at least one leg
        succeeded.

        Args:
            strategy: Strategy to execute
            on_progress: Receives a snapshot after every state change
            target_usd: Amount to settle (defaults to the target the strategy
                was planned for)

        Returns:
            Final progress of the run

        Raises:
            ValueError: If neither the call nor the strategy carries a target
        """
        target = target_usd if target_usd is not None else strategy.target_usd
        if target is None:
            raise ValueError("No settlement target: pass target_usd or plan the strategy first")

        progress = ExecutionProgress(
            legs=[BridgeExecution(option=option) for option in strategy.bridges],
            message="Preparing bridges",
        )
        total = len(progress.legs)
        await self._emit(progress, on_progress)

        for index, leg in enumerate(progress.legs):
            progress.current_index = index
            progress.status = RunStatus.PENDING
            progress.message = f"Bridge {index + 1} of {total}"
            leg.status = LegStatus.EXECUTING
            leg.message = "Getting fresh quote..."
            await self._emit(progress, on_progress)

            try:
                quote = await self._fresh_quote(leg.option)
                await self.provider.execute_route(
                    quote,
                    lambda update, leg=leg: self._on_update(progress, leg, update, on_progress),
                )
            except Exception as e:
                classified = classify_execution_error(e)
                logger.error(
                    f"Bridge {index + 1} ({leg.option.source.token_symbol} on "
                    f"{leg.option.source.chain_name}) failed: {e}"
                )
                leg.status = LegStatus.FAILED
                leg.error = classified.message
                leg.error_kind = classified.kind
                leg.tx_hash = leg.tx_hash or getattr(e, "tx_hash", None)
                await self._emit(progress, on_progress)

                if classified.is_fatal:
                    logger.info("User rejected transaction, stopping execution")
                    break
                continue

            leg.status = LegStatus.COMPLETED
            leg.percent = 100
            leg.message = "Bridge complete"
            await self._emit(progress, on_progress)
            logger.info(f"Bridge {index + 1} completed ({progress.completed_count} successful)")

        progress.current_index = None

        if progress.completed_count == 0:
            progress.status = RunStatus.FAILED
            progress.message = "All bridges failed"
            await self._emit(progress, on_progress)
            return progress

        await self._settle(progress, Decimal(target), on_progress)
        return progress

    async def _fresh_quote(self, option: BridgeOption) -> Quote:
        """Re-quote the exact allocated amount; the planning quote may be stale."""
        return await asyncio.wait_for(
            self.provider.get_quote(
                from_chain_id=option.source.chain_id,
                to_chain_id=self.settings.destination_chain_id,
                from_token=option.source.token_address,
                to_token=self.settings.destination_token_address,
                from_amount=option.input_amount_raw,
                from_address=self.wallet.address,
                slippage=self.settings.default_slippage,
            ),
            timeout=self.settings.quote_timeout_seconds,
        )

    async def _on_update(
        self,
        progress: ExecutionProgress,
        leg: BridgeExecution,
        update: ExecutionUpdate,
        on_progress: Optional[ExecutionObserver],
    ) -> None:
        if leg.status.is_terminal:
            logger.debug(f"Dropping {update.phase.value} event for finished leg")
            return

        leg.percent = update.percent
        leg.message = update.message
        if update.tx_hash:
            leg.tx_hash = update.tx_hash
        if update.tx_link:
            leg.tx_link = update.tx_link

        if update.phase == ExecutionPhase.ACTION_REQUIRED:
            progress.status = RunStatus.APPROVING
        else:
            progress.status = RunStatus.PENDING
        await self._emit(progress, on_progress)

    async def _settle(
        self,
        progress: ExecutionProgress,
        target: Decimal,
        on_progress: Optional[ExecutionObserver],
    ) -> None:
        """Transfer min(target, settled balance) to the settlement address."""
        settings = self.settings
        settlement = SettlementState()
        progress.settlement = settlement
        progress.status = RunStatus.PENDING
        progress.message = "Depositing to settlement address..."
        await self._emit(progress, on_progress)

        try:
            balance_raw = await self.wallet.get_balance(
                settings.destination_chain_id, settings.destination_token_address
            )
            available = from_raw_amount(balance_raw, settings.destination_token_decimals)
            amount = min(target, available)
            settlement.amount_usd = amount
            logger.info(f"Requested ${target:.2f}, available ${available:.2f}, depositing ${amount:.2f}")

            if amount < settings.min_settlement_usd:
                settlement.status = LegStatus.FAILED
                settlement.error = (
                    f"Minimum deposit is ${settings.min_settlement_usd} USDC. "
                    f"Deposit amount: ${amount:.2f} USDC."
                )
                progress.status = RunStatus.FAILED
                progress.message = settlement.error
                await self._emit(progress, on_progress)
                return

            settlement.status = LegStatus.EXECUTING
            await self._emit(progress, on_progress)

            receipt = await self.wallet.transfer(
                settings.destination_chain_id,
                settings.destination_token_address,
                settings.settlement_address,
                to_raw_amount(amount, settings.destination_token_decimals),
            )
        except Exception as e:
            classified = classify_execution_error(e)
            logger.error(f"Settlement failed: {e}")
            settlement.status = LegStatus.FAILED
            settlement.error = classified.message
            progress.status = RunStatus.FAILED
            progress.message = classified.message
            await self._emit(progress, on_progress)
            return

        settlement.status = LegStatus.COMPLETED
        settlement.tx_hash = receipt.tx_hash
        progress.status = RunStatus.COMPLETED
        if progress.failed_count:
            progress.message = (
                f"{progress.completed_count} of {len(progress.legs)} bridges succeeded, "
                f"${amount:.2f} USDC deposited"
            )
        else:
            progress.message = f"${amount:.2f} USDC deposited"
        await self._emit(progress, on_progress)

    async def _emit(
        self, progress: ExecutionProgress, on_progress: Optional[ExecutionObserver]
    ) -> None:
        await notify(on_progress, progress.snapshot())
