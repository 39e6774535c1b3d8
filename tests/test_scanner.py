"""Tests for balance scanning and the TTL cache."""

from decimal import Decimal

import pytest

from conftest import BASE_USDC, NATIVE, OPTIMISM_USDT, WALLET, FakeBridgeProvider
from hyprdeposit.chains import SUPPORTED_CHAINS
from hyprdeposit.optimizer.cache import TTLCache
from hyprdeposit.optimizer.scanner import BalanceScanner
from hyprdeposit.scanner import BalanceFetchError, ScanFailedError, StaticBalanceReader

CHAINS = [SUPPORTED_CHAINS[8453], SUPPORTED_CHAINS[10]]


class BrokenPriceProvider(FakeBridgeProvider):
    async def get_token_price(self, chain_id, token_address):
        raise ValueError("Expecting value: line 1 column 1 (char 0)")


@pytest.fixture
def reader():
    return StaticBalanceReader(
        {
            (8453, BASE_USDC): Decimal("25"),
            (8453, NATIVE): Decimal("0.01"),
            (10, OPTIMISM_USDT): Decimal("0.5"),
        }
    )


@pytest.fixture
def scanner(reader, provider, settings):
    return BalanceScanner(reader, provider, settings)


class TestStaticBalanceReader:
    """Tests for the in-memory balance reader."""

    @pytest.mark.asyncio
    async def test_returns_raw_amount(self, reader):
        chain = SUPPORTED_CHAINS[8453]

        balance = await reader.get_balance(WALLET, chain, chain.native_token)

        assert balance.raw_amount == 10**16
        assert balance.amount == Decimal("0.01")

    @pytest.mark.asyncio
    async def test_unknown_asset_reads_zero(self, reader):
        chain = SUPPORTED_CHAINS[1]

        balance = await reader.get_balance(WALLET, chain, chain.native_token)

        assert balance.raw_amount == 0

    @pytest.mark.asyncio
    async def test_unreachable_chain(self):
        reader = StaticBalanceReader(unreachable_chains={10})
        chain = SUPPORTED_CHAINS[10]

        with pytest.raises(BalanceFetchError) as exc_info:
            await reader.get_balance(WALLET, chain, chain.native_token)

        assert exc_info.value.chain_id == 10


class TestBalanceScanner:
    """Tests for scanning, valuation and filtering."""

    @pytest.mark.asyncio
    async def test_price_lookup_error_leaves_asset_unpriced(self, reader, settings):
        scanner = BalanceScanner(reader, BrokenPriceProvider(), settings)

        balances = await scanner.scan_all_balances(WALLET, CHAINS)

        assert [b.token_symbol for b in balances] == ["USDC"]

    def test_keeps_injected_empty_cache(self, reader, provider, settings):
        cache = TTLCache(30)

        assert BalanceScanner(reader, provider, settings, cache).cache is cache

    @pytest.mark.asyncio
    async def test_values_filters_and_sorts(self, scanner):
        balances = await scanner.scan_all_balances(WALLET, CHAINS)

        assert [(b.chain_id, b.token_symbol) for b in balances] == [(8453, "ETH"), (8453, "USDC")]
        assert balances[0].balance_usd == Decimal("30")
        assert balances[1].balance_usd == Decimal("25")
        assert balances[1].raw_balance == 25_000_000

    @pytest.mark.asyncio
    async def test_stablecoins_priced_at_par(self, scanner, provider):
        await scanner.scan_all_balances(WALLET, CHAINS)

        assert provider.price_requests == [(8453, NATIVE)]

    @pytest.mark.asyncio
    async def test_unpriced_asset_is_filtered(self, reader, settings):
        scanner = BalanceScanner(reader, FakeBridgeProvider(), settings)

        balances = await scanner.scan_all_balances(WALLET, CHAINS)

        assert [b.token_symbol for b in balances] == ["USDC"]

    @pytest.mark.asyncio
    async def test_unreachable_chain_is_skipped(self, reader, provider, settings):
        reader.unreachable_chains = {10}
        scanner = BalanceScanner(reader, provider, settings)

        balances = await scanner.scan_all_balances(WALLET, CHAINS)

        assert {b.chain_id for b in balances} == {8453}

    @pytest.mark.asyncio
    async def test_all_chains_unreachable(self, reader, provider, settings):
        reader.unreachable_chains = {8453, 10}
        scanner = BalanceScanner(reader, provider, settings)

        with pytest.raises(ScanFailedError):
            await scanner.scan_all_balances(WALLET, CHAINS)

    @pytest.mark.asyncio
    async def test_no_chains(self, scanner):
        assert await scanner.scan_all_balances(WALLET, []) == []

    @pytest.mark.asyncio
    async def test_progress_covers_first_half(self, scanner):
        events = []

        await scanner.scan_all_balances(WALLET, CHAINS, lambda msg, pct: events.append(pct))

        assert events[0] == 0
        assert events[-1] == 50
        assert events == sorted(events)
        assert len(events) == 6  # start + one per asset

    @pytest.mark.asyncio
    async def test_async_progress_callback(self, scanner):
        messages = []

        async def on_progress(message, percent):
            messages.append(message)

        await scanner.scan_all_balances(WALLET, CHAINS, on_progress)

        assert messages[0] == "Scanning balances..."
        assert "Scanning Base..." in messages

    @pytest.mark.asyncio
    async def test_prices_and_balances_are_cached(self, scanner, reader, provider):
        await scanner.scan_all_balances(WALLET, CHAINS)
        reader.set_balance(8453, BASE_USDC, Decimal("99"))

        balances = await scanner.scan_all_balances(WALLET, CHAINS)

        assert len(provider.price_requests) == 1
        assert balances[1].balance_usd == Decimal("25")

        scanner.cache.invalidate()
        balances = await scanner.scan_all_balances(WALLET, CHAINS)

        assert len(provider.price_requests) == 2
        assert balances[0].balance_usd == Decimal("99")


class TestTTLCache:
    """Tests for the TTL cache."""

    def test_get_and_expire(self):
        now = [0.0]
        cache = TTLCache(30, clock=lambda: now[0])
        cache.set("price", Decimal("3000"))

        now[0] = 29.9
        assert cache.get("price") == Decimal("3000")

        now[0] = 30.0
        assert cache.get("price") is None
        assert len(cache) == 0

    def test_contains_cached_none(self):
        cache = TTLCache(30)
        cache.set("unpriced", None)

        assert cache.contains("unpriced")
        assert not cache.contains("missing")

    def test_invalidate(self):
        cache = TTLCache(30)
        cache.set("a", 1)
        cache.set("b", 2)

        cache.invalidate("a")
        assert cache.get("a") is None
        assert cache.get("b") == 2

        cache.invalidate()
        assert len(cache) == 0
