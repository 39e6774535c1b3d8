#!/usr/bin/env python3
"""Deposit Planning Script.

Scans a wallet, prints the fastest and cheapest strategies for a target
amount and, in dry-run mode, can execute the recommended one.

Usage:
    python scripts/plan_deposit.py --address 0x... --target 25 [--chains 1,8453]

Options:
    --address  Wallet to plan for
    --target   Deposit amount in USD
    --chains   Comma-separated chain ids (default: all supported)
    --balance  Seed a dry-run balance as CHAIN_ID:TOKEN_ADDRESS:AMOUNT (repeatable)
    --execute  Execute the recommended strategy (dry-run mode only)
"""

import argparse
import asyncio
import logging
import sys
from decimal import Decimal
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hyprdeposit.chains import SUPPORTED_CHAINS
from hyprdeposit.config import get_settings
from hyprdeposit.execution import ExecutionProgress, SequentialExecutor
from hyprdeposit.main import configure_logging
from hyprdeposit.optimizer import DepositOptimizer, DepositStrategy
from hyprdeposit.routing import create_balance_reader, create_bridge_provider, create_wallet
from hyprdeposit.scanner import StaticBalanceReader

logger = logging.getLogger("plan_deposit")


def format_time(seconds: int) -> str:
    if seconds < 60:
        return f"~{seconds}s"
    return f"~{-(-seconds // 60)} min"


def print_strategy(label: str, strategy: DepositStrategy) -> None:
    print(f"\n{label}: ${strategy.total_output_usd:.2f} out, "
          f"${strategy.total_fees_usd:.2f} fees, {format_time(strategy.total_time_seconds)}")
    for leg in strategy.bridges:
        print(f"  - {leg.source.token_symbol} on {leg.source.chain_name}: "
              f"${leg.input_usd:.2f} -> ${leg.output_usd:.2f} "
              f"({leg.used_input_amount} raw, {format_time(leg.estimated_time_seconds)})")


def print_progress(progress: ExecutionProgress) -> None:
    print(f"[{progress.status.value}] {progress.message}")


def parse_balance(value: str) -> tuple[int, str, Decimal]:
    chain_id, token, amount = value.split(":")
    return int(chain_id), token, Decimal(amount)


async def main():
    parser = argparse.ArgumentParser(description="Deposit Planner")
    parser.add_argument("--address", type=str, required=True, help="Wallet address")
    parser.add_argument("--target", type=Decimal, required=True, help="Deposit amount in USD")
    parser.add_argument("--chains", type=str, help="Comma-separated chain ids")
    parser.add_argument("--balance", action="append", default=[], help="CHAIN_ID:TOKEN:AMOUNT")
    parser.add_argument("--execute", action="store_true", help="Execute the recommended strategy")

    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings)

    chains = None
    if args.chains:
        chains = [SUPPORTED_CHAINS[int(chain_id)] for chain_id in args.chains.split(",")]

    reader = create_balance_reader(settings)
    if args.balance:
        if not isinstance(reader, StaticBalanceReader):
            parser.error("--balance only applies in dry-run mode")
        for chain_id, token, amount in map(parse_balance, args.balance):
            reader.set_balance(chain_id, token, amount)

    wallet = create_wallet(settings)
    provider = create_bridge_provider(settings, wallet)
    optimizer = DepositOptimizer(reader, provider, settings)

    plan = await optimizer.calculate_deposit_plan(
        args.address,
        args.target,
        chains,
        on_progress=lambda message, percent: print(f"{percent:5.1f}% {message}"),
    )

    print(f"\nTarget: ${plan.target_amount_usd}  Available: ${plan.available_balance_usd:.2f}")
    print(f"Status: {plan.status.value}")
    if plan.fastest:
        print_strategy("Fastest", plan.fastest)
    if plan.cheapest:
        print_strategy("Cheapest", plan.cheapest)
    if plan.comparison:
        print(f"\nComparison: {plan.comparison.outcome.value}")

    if not args.execute:
        return

    if not settings.dry_run:
        print("\n--execute is only allowed in dry-run mode")
        return

    strategy = plan.recommended or plan.fastest
    if strategy is None:
        print("\nNothing to execute")
        return

    print(f"\nExecuting {strategy.objective.value} strategy...")
    executor = SequentialExecutor(provider, wallet, settings)
    progress = await executor.execute_strategy(strategy, print_progress, plan.target_amount_usd)
    print(f"\n{progress.headline}: {progress.message}")


if __name__ == "__main__":
    asyncio.run(main())
