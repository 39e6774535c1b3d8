"""Greedy strategy selection.

Walks the quoted options in objective order and allocates just enough of
each balance to reach the target. Stablecoins move in whole units, rounded
up with one spare unit for fees and capped at the balance. This is a
heuristic, not an exact solver: quotes are estimates, and a knapsack search
would not pay for its latency.
"""

import logging
from dataclasses import replace
from decimal import ROUND_CEILING, Decimal
from typing import Optional

from hyprdeposit.amounts import from_raw_amount, round_token_amount
from hyprdeposit.chains import get_gas_reserve, is_native_token, is_stablecoin
from hyprdeposit.config import Settings, get_settings
from hyprdeposit.optimizer.models import BridgeOption, DepositStrategy, StrategyObjective

logger = logging.getLogger(__name__)


def order_options(
    options: list[BridgeOption], objective: StrategyObjective
) -> list[BridgeOption]:
    """Sort options for an objective.

    Fastest: ascending time, then descending output. Cheapest: descending
    efficiency, then descending output. Remaining ties keep input order.
    """
    if objective == StrategyObjective.FASTEST:
        return sorted(options, key=lambda o: (o.estimated_time_seconds, -o.estimated_output_usd))
    return sorted(options, key=lambda o: (-o.efficiency, -o.estimated_output_usd))


def available_amount(option: BridgeOption) -> Decimal:
    """Balance that may be bridged, after the gas reserve for native assets."""
    balance = option.source.amount
    if not is_native_token(option.source.token_address, option.source.token_symbol):
        return balance

    reserve = get_gas_reserve(option.source.chain_id)
    available = max(Decimal("0"), balance - reserve)
    logger.debug(
        f"{option.source.token_symbol} is native on chain {option.source.chain_id}, "
        f"reserving {reserve} for gas. Available: {available}"
    )
    return available


class StrategySelector:
    """Builds fastest and cheapest strategies from bridge options."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def calculate_strategies(
        self, target_usd: Decimal, options: list[BridgeOption]
    ) -> tuple[Optional[DepositStrategy], Optional[DepositStrategy]]:
        """Select a strategy per objective.

        Returns:
            (fastest, cheapest), either of which may be None
        """
        if not options:
            return None, None

        fastest = self.select(target_usd, options, StrategyObjective.FASTEST)
        cheapest = self.select(target_usd, options, StrategyObjective.CHEAPEST)
        return fastest, cheapest

    def select(
        self,
        target_usd: Decimal,
        options: list[BridgeOption],
        objective: StrategyObjective,
    ) -> Optional[DepositStrategy]:
        """
        Greedily allocate options until the target is reached.

        Args:
            target_usd: Output to reach, in USD
            options: Quoted options (never mutated)
            objective: Ordering to use

        Returns:
            Strategy with at least one leg, or None if nothing was selected
        """
        tolerance_usd = target_usd * self.settings.completion_tolerance

        selected: list[BridgeOption] = []
        total_output = Decimal("0")
        total_input = Decimal("0")
        total_fees = Decimal("0")
        total_time = 0

        for option in order_options(options, objective):
            if total_output >= target_usd:
                break
            if total_output >= tolerance_usd:
                logger.info(
                    f"Reached {total_output / target_usd:.1%} of target, stopping within tolerance"
                )
                break

            allocated = self._allocate(option, target_usd - total_output)
            if allocated is None:
                continue

            selected.append(allocated)
            total_output += allocated.used_output_usd
            total_input += allocated.used_input_usd
            total_fees += allocated.used_fees_usd
            total_time += option.estimated_time_seconds

        if not selected:
            return None

        return DepositStrategy(
            objective=objective,
            bridges=tuple(selected),
            total_input_usd=total_input,
            total_output_usd=total_output,
            total_time_seconds=total_time,
            total_fees_usd=total_fees,
            efficiency=total_output / total_input if total_input > 0 else Decimal("0"),
            target_usd=target_usd,
        )

    def _allocate(self, option: BridgeOption, needed_usd: Decimal) -> Optional[BridgeOption]:
        """Allocate the part of ``option`` needed to cover ``needed_usd``.

        Returns an allocated copy, or None when the option should be skipped.
        """
        source = option.source
        balance = source.amount
        if balance <= 0:
            return None

        available = available_amount(option)
        if available <= 0:
            logger.debug(f"Skipping {source.token_symbol}: nothing left after gas reserve")
            return None

        max_output = available / balance * option.estimated_output_usd
        if max_output <= needed_usd:
            token_amount = available
        elif is_stablecoin(source.token_symbol):
            # Whole units rounded up plus one for fees, capped at the balance
            needed_units = (available * needed_usd / max_output).to_integral_value(
                rounding=ROUND_CEILING
            )
            token_amount = min(needed_units + 1, available)
        else:
            token_amount = available * (needed_usd / max_output)

        raw_amount = round_token_amount(token_amount, source.token_decimals, source.token_symbol)
        if raw_amount <= 0:
            return None

        # Values follow the rounded amount, which is what will actually move
        fraction = from_raw_amount(raw_amount, source.token_decimals) / balance
        used_output = fraction * option.estimated_output_usd

        if used_output < self.settings.min_bridge_usd:
            logger.debug(
                f"Skipping {source.token_symbol} on {source.chain_name}: "
                f"output ${used_output:.2f} below ${self.settings.min_bridge_usd} minimum"
            )
            return None

        return replace(
            option,
            used_input_usd=fraction * source.balance_usd,
            used_output_usd=used_output,
            used_fees_usd=fraction * option.estimated_fees_usd,
            used_input_amount=str(raw_amount),
        )
