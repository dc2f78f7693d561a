"""Shared fixtures for the token dashboard tests.

Upstream calls are always mocked: either an AsyncMock client or an
httpx.MockTransport behind a real SolanaTrackerClient.
"""
import time

import pytest

HOUR = 3600


class FakeClock:
    """Monotonic clock that only moves when something sleeps on it."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_response() -> dict:
    """Trimmed /tokens/{address} body in the shape Solana Tracker returns."""
    return {
        "token": {
            "name": "Uranus",
            "symbol": "URA",
            "image": "https://example.com/uranus.png",
            "description": "A token",
        },
        "pools": [
            {
                "poolId": "pool-1",
                "market": "raydium",
                "price": {"usd": 0.5},
                "tokenSupply": 1_000_000,
                "liquidity": {"usd": 42_000.5},
                "txns": {
                    "volume24h": 2_370_571,
                    "volume": 9_000_000,
                    "total": 1234,
                    "buys": 700,
                    "sells": 534,
                },
                "lastUpdated": 1_759_999_000_000,
            },
            {"poolId": "pool-2", "price": {"usd": 99}},
        ],
        "events": {"24h": {"priceChangePercentage": -3.25}},
        "risk": {"score": 3, "jupiterVerified": True},
        "holders": 4321,
    }


@pytest.fixture
def top_holders_response() -> list:
    return [
        {"wallet": f"wallet-{i}", "amount": 1_000_000 - i * 1000, "percentage": 10 - i * 0.5}
        for i in range(15)
    ]


@pytest.fixture
def holder_chart_response() -> dict:
    now = int(time.time())
    return {
        "holders": [
            {"time": now - 1 * HOUR, "holders": 150},
            {"time": now - 48 * HOUR, "holders": 100},
        ]
    }
