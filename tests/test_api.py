"""Tests for the FastAPI endpoints."""

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from conftest import BASE_USDC, WALLET
from hyprdeposit import __version__
from hyprdeposit.api.app import create_app
from hyprdeposit.chains import SUPPORTED_CHAINS
from hyprdeposit.optimizer import DepositOptimizer
from hyprdeposit.routing.base import NoRouteError
from hyprdeposit.scanner import StaticBalanceReader
from hyprdeposit.web.controllers.deposits import get_deposit_service
from hyprdeposit.web.services.deposit_service import DepositService


@pytest.fixture
def reader():
    return StaticBalanceReader({(8453, BASE_USDC): Decimal("25")})


@pytest.fixture
def test_app(reader, provider, settings):
    """Create test application backed by in-memory collaborators."""
    app = create_app()
    service = DepositService(DepositOptimizer(reader, provider, settings))
    app.dependency_overrides[get_deposit_service] = lambda: service

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    """Create async test client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.asyncio
    async def test_health_check(self, client):
        """Test basic health check."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "hyprdeposit"
        assert data["mode"] == "dry_run"

    @pytest.mark.asyncio
    async def test_detailed_health(self, client):
        """Test detailed health check."""
        response = await client.get("/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["version"] == __version__
        assert data["mode"] == "dry_run"
        assert data["destination_chain"] == "Arbitrum One"
        assert "Base" in data["chains"]
        assert data["config"]["dry_run"] is True
        assert data["config"]["wallet_configured"] is False
        assert "wallet_private_key" not in data["config"]


class TestBalanceEndpoints:
    """Tests for balance scanning."""

    @pytest.mark.asyncio
    async def test_scan_balances(self, client):
        response = await client.post("/api/v1/deposits/balances", json={"address": WALLET})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert len(data["balances"]) == 1
        balance = data["balances"][0]
        assert balance["chain_id"] == 8453
        assert balance["token_symbol"] == "USDC"
        assert balance["balance_raw"] == "25000000"
        assert Decimal(data["total_usd"]) == Decimal("25")

    @pytest.mark.asyncio
    async def test_scan_selected_chains(self, client):
        response = await client.post(
            "/api/v1/deposits/balances", json={"address": WALLET, "chain_ids": [10]}
        )

        assert response.status_code == 200
        assert response.json()["balances"] == []

    @pytest.mark.asyncio
    async def test_unknown_chain(self, client):
        response = await client.post(
            "/api/v1/deposits/balances", json={"address": WALLET, "chain_ids": [5]}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_address(self, client):
        response = await client.post("/api/v1/deposits/balances", json={"address": "not-an-address"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_scan_failed(self, client, reader):
        reader.unreachable_chains = set(SUPPORTED_CHAINS)

        response = await client.post("/api/v1/deposits/balances", json={"address": WALLET})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["error"]


class TestPlanEndpoints:
    """Tests for deposit planning."""

    @pytest.mark.asyncio
    async def test_plan_ready(self, client):
        response = await client.post(
            "/api/v1/deposits/plan", json={"address": WALLET, "target_usd": "10"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["status"] == "ready"
        assert data["comparison"] == "identical"
        assert data["recommended"] == "fastest"
        leg = data["fastest"]["legs"][0]
        assert leg["chain_id"] == 8453
        assert leg["used_input_amount"] == "12000000"
        assert leg["provider"] == "fake"

    @pytest.mark.asyncio
    async def test_plan_insufficient_funds(self, client):
        response = await client.post(
            "/api/v1/deposits/plan", json={"address": WALLET, "target_usd": 100}
        )

        data = response.json()
        assert data["status"] == "insufficient_funds"
        assert data["insufficient_funds"] is True
        assert data["fastest"] is None
        assert data["cheapest"] is None
        assert Decimal(data["available_usd"]) == Decimal("25")

    @pytest.mark.asyncio
    async def test_plan_no_routes(self, client, provider):
        provider.quote_errors[(8453, BASE_USDC.lower())] = NoRouteError("no route")

        response = await client.post(
            "/api/v1/deposits/plan", json={"address": WALLET, "target_usd": 10}
        )

        data = response.json()
        assert data["status"] == "no_routes"
        assert data["recommended"] is None

    @pytest.mark.asyncio
    async def test_plan_scan_failed(self, client, reader):
        reader.unreachable_chains = set(SUPPORTED_CHAINS)

        response = await client.post(
            "/api/v1/deposits/plan", json={"address": WALLET, "target_usd": 10}
        )

        data = response.json()
        assert data["success"] is False
        assert data["status"] == "scan_failed"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("target", [0, -1])
    async def test_plan_rejects_non_positive_target(self, client, target):
        response = await client.post(
            "/api/v1/deposits/plan", json={"address": WALLET, "target_usd": target}
        )

        assert response.status_code == 422
