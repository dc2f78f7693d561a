"""Tests for the dashboard HTTP routes via FastAPI's TestClient."""
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from token_dashboard.api.dashboard import DEGRADED_HEADER, get_aggregator
from token_dashboard.main import app
from token_dashboard.schemas.dashboard import HealthStatus
from token_dashboard.services.dashboard import DashboardResult, mock_dashboard


@pytest.fixture
def fake_aggregator():
    aggregator = MagicMock()
    app.dependency_overrides[get_aggregator] = lambda: aggregator
    yield aggregator
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


class TestDashboardRoute:

    def test_returns_camel_case_record(self, client, fake_aggregator):
        fake_aggregator.build_dashboard_result = AsyncMock(
            return_value=DashboardResult(record=mock_dashboard(), degraded=[])
        )

        resp = client.get("/api/dashboard-data")

        assert resp.status_code == 200
        body = resp.json()
        assert body["tokenSymbol"] == "URANUS"
        assert body["volume24h"] == 25000.5
        assert len(body["topWallets"]) == 5
        assert DEGRADED_HEADER not in resp.headers

    def test_degraded_sources_exposed_in_header(self, client, fake_aggregator):
        fake_aggregator.build_dashboard_result = AsyncMock(
            return_value=DashboardResult(record=mock_dashboard(), degraded=["top_holders", "holder_chart"])
        )

        resp = client.get("/api/dashboard-data")

        assert resp.status_code == 200
        assert resp.headers[DEGRADED_HEADER] == "top_holders,holder_chart"


class TestHealthRoute:

    def test_healthy(self, client, fake_aggregator):
        fake_aggregator.check_health = AsyncMock(return_value=HealthStatus(
            status="healthy", timestamp="2026-01-01T00:00:00+00:00",
            api_credits=100, message="Solana Tracker API is working correctly",
        ))

        resp = client.get("/api/health")

        assert resp.status_code == 200
        body = resp.json()
        assert body["apiCredits"] == 100
        assert "error" not in body and "upstreamStatus" not in body, f"Unset fields leaked: {body}"

    def test_unhealthy_is_500_with_error(self, client, fake_aggregator):
        fake_aggregator.check_health = AsyncMock(return_value=HealthStatus(
            status="unhealthy", timestamp="2026-01-01T00:00:00+00:00",
            error="HTTP error! status: 401", upstream_status=401,
            message="API connection failed - using mock data",
        ))

        resp = client.get("/api/health")

        assert resp.status_code == 500
        body = resp.json()
        assert body["status"] == "unhealthy"
        assert body["error"] == "HTTP error! status: 401"
        assert body["upstreamStatus"] == 401
        assert "apiCredits" not in body


class TestChartRoute:

    def test_default_period(self, client):
        resp = client.get("/api/chart-data")

        assert resp.status_code == 200
        body = resp.json()
        assert body["period"] == "24h"
        assert len(body["priceHistory"]) == 24
        assert len(body["ohlcvData"]) == 24

    def test_period_is_echoed(self, client):
        assert client.get("/api/chart-data", params={"period": "7d"}).json()["period"] == "7d"
