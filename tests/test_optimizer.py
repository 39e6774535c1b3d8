"""Tests for quote collection and end-to-end deposit planning."""

from decimal import Decimal

import pytest

from conftest import BASE_USDC, NATIVE, OPTIMISM_USDT, WALLET, make_balance
from hyprdeposit.config import ARBITRUM_CHAIN_ID, ARBITRUM_USDC_ADDRESS
from hyprdeposit.optimizer import DepositOptimizer
from hyprdeposit.optimizer.dominance import ComparisonOutcome
from hyprdeposit.optimizer.models import PlanStatus
from hyprdeposit.optimizer.quotes import QuoteCollector, build_option
from hyprdeposit.optimizer.selector import available_amount
from hyprdeposit.routing.base import NoRouteError, Quote, TransientQuoteError
from hyprdeposit.scanner import StaticBalanceReader


@pytest.fixture
def balances():
    return [
        make_balance(8453, BASE_USDC, Decimal("20")),
        make_balance(10, OPTIMISM_USDT, Decimal("15")),
        make_balance(ARBITRUM_CHAIN_ID, ARBITRUM_USDC_ADDRESS, Decimal("10")),
    ]


def make_optimizer(provider, settings, funds):
    reader = StaticBalanceReader(funds)
    return DepositOptimizer(reader, provider, settings)


class TestQuoteCollector:
    """Tests for quote acquisition."""

    @pytest.mark.asyncio
    async def test_quotes_every_source_but_destination(self, provider, settings, balances):
        collector = QuoteCollector(provider, settings)

        options = await collector.get_bridge_quotes(WALLET, balances)

        assert [o.source.chain_id for o in options] == [8453, 10]
        assert all(chain_id != ARBITRUM_CHAIN_ID for chain_id, _, _ in provider.quote_requests)

    @pytest.mark.asyncio
    async def test_quotes_full_balance(self, provider, settings, balances):
        collector = QuoteCollector(provider, settings)

        await collector.get_bridge_quotes(WALLET, balances)

        assert (8453, BASE_USDC.lower(), 20_000_000) in provider.quote_requests

    @pytest.mark.asyncio
    async def test_derived_metrics(self, provider, settings, balances):
        collector = QuoteCollector(provider, settings)

        options = await collector.get_bridge_quotes(WALLET, balances)

        option = options[0]
        assert option.estimated_output_usd == Decimal("19.8")
        assert option.estimated_fees_usd == Decimal("0.2")
        assert option.efficiency == Decimal("0.99")
        assert option.estimated_time_seconds == 60

    @pytest.mark.asyncio
    async def test_only_top_balances_are_quoted(self, provider, settings, balances):
        collector = QuoteCollector(provider, settings.model_copy(update={"max_tokens_to_check": 1}))

        options = await collector.get_bridge_quotes(WALLET, balances)

        assert len(provider.quote_requests) == 1
        assert len(options) == 1

    @pytest.mark.asyncio
    async def test_failed_quotes_are_skipped(self, provider, settings, balances):
        provider.quote_errors[(8453, BASE_USDC.lower())] = NoRouteError("no route")
        provider.quote_errors[(10, OPTIMISM_USDT.lower())] = TransientQuoteError("429")
        collector = QuoteCollector(provider, settings)

        assert await collector.get_bridge_quotes(WALLET, balances) == []

    @pytest.mark.asyncio
    async def test_unexpected_quote_error_is_isolated(self, provider, settings, balances):
        provider.quote_errors[(8453, BASE_USDC.lower())] = ValueError("invalid literal for int()")
        collector = QuoteCollector(provider, settings)

        options = await collector.get_bridge_quotes(WALLET, balances)

        assert [o.source.chain_id for o in options] == [10]

    @pytest.mark.asyncio
    async def test_slow_quotes_time_out(self, provider, settings, balances):
        provider.quote_delays[10] = 1.0
        collector = QuoteCollector(provider, settings.model_copy(update={"quote_timeout_seconds": 0.05}))

        options = await collector.get_bridge_quotes(WALLET, balances)

        assert [o.source.chain_id for o in options] == [8453]

    @pytest.mark.asyncio
    async def test_progress_range(self, provider, settings, balances):
        events = []
        collector = QuoteCollector(provider, settings)

        await collector.get_bridge_quotes(WALLET, balances, lambda msg, pct: events.append((msg, pct)))

        assert events[0] == ("Getting bridge quotes...", 50)
        assert events[-1] == ("Quotes complete", 90)
        assert all(50 <= pct <= 90 for _, pct in events)

    def test_build_option_clamps_fees(self):
        balance = make_balance(8453, BASE_USDC, Decimal("10"))
        quote = Quote(
            provider="fake",
            from_chain_id=8453,
            to_chain_id=ARBITRUM_CHAIN_ID,
            from_token=BASE_USDC,
            to_token=ARBITRUM_USDC_ADDRESS,
            from_amount=balance.raw_balance,
            to_amount=10_500_000,
            to_amount_min=10_400_000,
            to_token_decimals=6,
        )

        option = build_option(balance, quote)

        assert option.estimated_fees_usd == Decimal("0")
        assert option.efficiency == Decimal("1.05")


class TestDepositOptimizer:
    """End-to-end planning over the in-memory reader and fake provider."""

    @pytest.mark.asyncio
    async def test_insufficient_funds(self, provider, settings):
        optimizer = make_optimizer(provider, settings, {(8453, BASE_USDC): Decimal("0.5")})
        events = []

        plan = await optimizer.calculate_deposit_plan(
            WALLET, Decimal("5"), on_progress=lambda msg, pct: events.append((msg, pct))
        )

        assert plan.status == PlanStatus.INSUFFICIENT_FUNDS
        assert plan.insufficient_funds
        assert plan.fastest is None and plan.cheapest is None
        assert plan.available_balance_usd == Decimal("0")
        assert events[-1] == ("Insufficient funds", 100)
        assert provider.quote_requests == []

    @pytest.mark.asyncio
    async def test_stablecoin_plan(self, provider, settings):
        """$12.05 USDC on Base for a $10 target: one leg of 12 whole units."""
        optimizer = make_optimizer(provider, settings, {(8453, BASE_USDC): Decimal("12.05")})

        plan = await optimizer.calculate_deposit_plan(WALLET, Decimal("10"))

        assert plan.status == PlanStatus.READY
        assert plan.available_balance_usd == Decimal("12.05")
        leg = plan.fastest.bridges[0]
        assert leg.used_input_amount == "12000000"
        assert int(leg.used_input_amount) <= 12_050_000
        assert plan.comparison.outcome == ComparisonOutcome.IDENTICAL
        assert plan.recommended is plan.fastest

    @pytest.mark.asyncio
    async def test_destination_balance_counts_but_is_not_bridged(self, provider, settings):
        funds = {
            (ARBITRUM_CHAIN_ID, ARBITRUM_USDC_ADDRESS): Decimal("10"),
            (8453, BASE_USDC): Decimal("20"),
        }
        optimizer = make_optimizer(provider, settings, funds)

        plan = await optimizer.calculate_deposit_plan(WALLET, Decimal("15"))

        assert plan.available_balance_usd == Decimal("30")
        assert {leg.source.chain_id for leg in plan.fastest.bridges} == {8453}

    @pytest.mark.asyncio
    async def test_no_routes(self, provider, settings):
        provider.quote_errors[(8453, BASE_USDC.lower())] = NoRouteError("no route")
        optimizer = make_optimizer(provider, settings, {(8453, BASE_USDC): Decimal("20")})
        events = []

        plan = await optimizer.calculate_deposit_plan(
            WALLET, Decimal("10"), on_progress=lambda msg, pct: events.append((msg, pct))
        )

        assert plan.status == PlanStatus.NO_ROUTES
        assert not plan.insufficient_funds
        assert plan.comparison.outcome == ComparisonOutcome.NONE
        assert plan.recommended is None
        assert events[-1] == ("No bridge routes available", 100)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("target", ["0", "-5", "0.001"])
    async def test_rejects_non_positive_target(self, provider, settings, target):
        optimizer = make_optimizer(provider, settings, {})

        with pytest.raises(ValueError):
            await optimizer.calculate_deposit_plan(WALLET, Decimal(target))

    @pytest.mark.asyncio
    async def test_target_floored_to_cents(self, provider, settings):
        optimizer = make_optimizer(provider, settings, {(8453, BASE_USDC): Decimal("20")})

        plan = await optimizer.calculate_deposit_plan(WALLET, Decimal("10.129"))

        assert plan.target_amount_usd == Decimal("10.12")

    @pytest.mark.asyncio
    async def test_progress_sequence(self, provider, settings):
        optimizer = make_optimizer(provider, settings, {(8453, BASE_USDC): Decimal("20")})
        events = []

        await optimizer.calculate_deposit_plan(
            WALLET, Decimal("10"), on_progress=lambda msg, pct: events.append((msg, pct))
        )

        percents = [pct for _, pct in events]
        assert events[0] == ("Starting deposit optimization...", 0)
        assert ("Calculating optimal strategies...", 95) in events
        assert events[-1] == ("Optimization complete!", 100)
        assert percents == sorted(percents)

    @pytest.mark.asyncio
    async def test_each_plan_fetches_fresh_prices(self, provider, settings):
        optimizer = make_optimizer(provider, settings, {(8453, NATIVE): Decimal("0.01")})

        await optimizer.calculate_deposit_plan(WALLET, Decimal("10"))
        await optimizer.calculate_deposit_plan(WALLET, Decimal("10"))

        assert provider.price_requests.count((8453, NATIVE)) == 2

    @pytest.mark.asyncio
    async def test_each_plan_reads_fresh_balances(self, provider, settings):
        reader = StaticBalanceReader({(8453, BASE_USDC): Decimal("50")})
        optimizer = DepositOptimizer(reader, provider, settings)

        first = await optimizer.calculate_deposit_plan(WALLET, Decimal("10"))
        reader.set_balance(8453, BASE_USDC, Decimal("0"))
        second = await optimizer.calculate_deposit_plan(WALLET, Decimal("10"))

        assert optimizer.scanner.cache is optimizer.cache
        assert first.available_balance_usd == Decimal("50")
        assert second.available_balance_usd == Decimal("0")
        assert second.status == PlanStatus.INSUFFICIENT_FUNDS

    @pytest.mark.asyncio
    @pytest.mark.parametrize("target", ["5", "12", "25", "35"])
    async def test_strategies_reach_target(self, provider, settings, target):
        funds = {
            (8453, BASE_USDC): Decimal("20"),
            (10, OPTIMISM_USDT): Decimal("15"),
            (8453, NATIVE): Decimal("0.005"),
        }
        optimizer = make_optimizer(provider, settings, funds)

        plan = await optimizer.calculate_deposit_plan(WALLET, Decimal(target))

        assert plan.status == PlanStatus.READY
        for strategy in (plan.fastest, plan.cheapest):
            assert strategy.total_output_usd >= Decimal(target) * settings.completion_tolerance
            for leg in strategy.bridges:
                bridged = Decimal(int(leg.used_input_amount)) / Decimal(10) ** leg.source.token_decimals
                assert bridged <= available_amount(leg)
