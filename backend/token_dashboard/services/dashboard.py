from __future__ import annotations
import asyncio
import logging
import random
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Optional

import httpx

from token_dashboard.config import get_settings
from token_dashboard.schemas.dashboard import DashboardData, HealthStatus, TopHolder
from token_dashboard.services.holder_growth import (
    estimate_holder_growth,
    parse_holder_series,
    synthetic_growth,
)
from token_dashboard.services.solana_tracker import (
    SolanaTrackerClient,
    UpstreamError,
    solana_tracker_client,
)
from token_dashboard.services.top_holders import mock_top_holders, normalize_top_holders, to_number

settings = get_settings()
logger = logging.getLogger(__name__)

PLACEHOLDER_TOKEN = "URANUS"

# Sources that can fall back to synthetic data, as reported in DashboardResult.degraded
SOURCE_TOKEN = "token"
SOURCE_TOP_HOLDERS = "top_holders"
SOURCE_HOLDER_CHART = "holder_chart"


@dataclass
class FetchOutcome:
    """Result of one optional upstream fetch: data, or the reason there is none."""

    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class DashboardResult:
    record: DashboardData
    degraded: list[str] = field(default_factory=list)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _dig(obj: Any, *keys: str) -> Any:
    """Nested dict lookup that yields None as soon as the shape stops matching."""
    for key in keys:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def synthetic_volume_growth() -> int:
    """Volume growth is not reported upstream; always a placeholder in [20, 120)."""
    return random.randrange(20, 120)


def mock_dashboard() -> DashboardData:
    """Fully synthetic record served when the token itself can't be fetched."""
    return DashboardData(
        token_name=PLACEHOLDER_TOKEN,
        token_symbol=PLACEHOLDER_TOKEN,
        token_image="",
        token_description="Uranus Token - Because your portfolio needs a little Uranus in it!",
        market_cap=1234567.89,
        price=0.000123,
        price_change_24h=5.23,
        total_supply=1_000_000_000,
        circulating_supply=1_000_000_000,
        volume_24h=25000.50,
        total_volume=100000.00,
        total_transactions=1500,
        buy_transactions=800,
        sell_transactions=700,
        total_holders=1250,
        holders_growth=15,
        volume_growth=25,
        top_wallets=mock_top_holders(),
        liquidity=50000.00,
        risk_score=25,
        jupiter_verified=True,
        pool_id="mock-pool-id",
        market="mock-market",
        last_updated=_now_ms(),
    )


def merge_dashboard(
    token_data: Any,
    top_wallets: list[TopHolder],
    holders_growth: float,
    volume_growth: Optional[float] = None,
) -> DashboardData:
    """Reshape a ``/tokens/{address}`` response into the dashboard record.

    Market figures come from the first pool. Market cap is the pool's
    ``marketCap.usd`` when that is a non-zero number, otherwise it is derived
    as price * supply; a reported 0 counts as missing, as with the holder
    fields. Anything missing or non-numeric falls back to the field default.
    """
    if not isinstance(token_data, dict):
        token_data = {}

    token = token_data.get("token")
    if not isinstance(token, dict):
        token = {}
    pools = token_data.get("pools")
    main_pool = pools[0] if isinstance(pools, list) and pools and isinstance(pools[0], dict) else {}

    price = to_number(_dig(main_pool, "price", "usd"))
    total_supply = to_number(main_pool.get("tokenSupply"))
    market_cap = to_number(_dig(main_pool, "marketCap", "usd")) or price * total_supply

    txns = main_pool.get("txns")
    if not isinstance(txns, dict):
        txns = {}

    return DashboardData(
        token_name=str(token.get("name") or PLACEHOLDER_TOKEN),
        token_symbol=str(token.get("symbol") or PLACEHOLDER_TOKEN),
        token_image=str(token.get("image") or ""),
        token_description=str(token.get("description") or ""),
        market_cap=market_cap,
        price=price,
        price_change_24h=to_number(_dig(token_data, "events", "24h", "priceChangePercentage")),
        total_supply=total_supply,
        circulating_supply=total_supply,
        volume_24h=to_number(txns.get("volume24h")),
        total_volume=to_number(txns.get("volume")),
        total_transactions=int(to_number(txns.get("total"))),
        buy_transactions=int(to_number(txns.get("buys"))),
        sell_transactions=int(to_number(txns.get("sells"))),
        total_holders=int(to_number(token_data.get("holders"))),
        holders_growth=holders_growth,
        volume_growth=synthetic_volume_growth() if volume_growth is None else volume_growth,
        top_wallets=top_wallets,
        liquidity=to_number(_dig(main_pool, "liquidity", "usd")),
        risk_score=to_number(_dig(token_data, "risk", "score")),
        jupiter_verified=bool(_dig(token_data, "risk", "jupiterVerified")),
        pool_id=str(main_pool.get("poolId") or ""),
        market=str(main_pool.get("market") or ""),
        last_updated=int(to_number(main_pool.get("lastUpdated"))) or _now_ms(),
    )


class DashboardAggregator:
    """Builds the dashboard record from Solana Tracker, degrading per source.

    Top holders and the holder chart fall back to synthetic data on their
    own; if the token itself can't be fetched the whole record is synthetic.
    ``build_dashboard`` never raises.
    """

    def __init__(
        self,
        client: Optional[SolanaTrackerClient] = None,
        contract_address: Optional[str] = None,
        fetch_top_holders: Optional[bool] = None,
    ):
        self.client = client or solana_tracker_client
        self.contract_address = settings.contract_address if contract_address is None else contract_address
        self.fetch_top_holders = settings.fetch_top_holders if fetch_top_holders is None else fetch_top_holders

    async def _fetch(self, source: str, call: Awaitable[Any]) -> FetchOutcome:
        try:
            return FetchOutcome(data=await call)
        except (UpstreamError, httpx.HTTPError) as e:
            logger.warning(f"Error fetching {source}, falling back to synthetic data: {e}")
            return FetchOutcome(error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error fetching {source}, falling back to synthetic data")
            return FetchOutcome(error=str(e))

    async def _fetch_top_holders(self) -> FetchOutcome:
        if not self.fetch_top_holders:
            return FetchOutcome(error="top holders fetch disabled")
        return await self._fetch(SOURCE_TOP_HOLDERS, self.client.get_top_holders(self.contract_address))

    async def build_dashboard_result(self) -> DashboardResult:
        """Build the record and report which sources had to be synthesized."""
        address = self.contract_address
        logger.info(f"Fetching dashboard data for {address}")

        try:
            token_data = await self.client.get_token(address)
        except (UpstreamError, httpx.HTTPError) as e:
            logger.error(f"Error fetching token data, serving synthetic dashboard: {e}")
            return DashboardResult(record=mock_dashboard(), degraded=[SOURCE_TOKEN])
        except Exception:
            logger.exception("Unexpected error fetching token data, serving synthetic dashboard")
            return DashboardResult(record=mock_dashboard(), degraded=[SOURCE_TOKEN])

        # Independent of each other; the client's rate limiter still spaces them
        top_outcome, chart_outcome = await asyncio.gather(
            self._fetch_top_holders(),
            self._fetch(SOURCE_HOLDER_CHART, self.client.get_holder_chart(address)),
        )

        degraded = []
        if not top_outcome.ok or not isinstance(top_outcome.data, list):
            degraded.append(SOURCE_TOP_HOLDERS)
        try:
            top_wallets = normalize_top_holders(top_outcome.data)
        except Exception as e:
            logger.warning(f"Error processing top holders, using synthetic holders: {e}")
            top_wallets = mock_top_holders()
            if SOURCE_TOP_HOLDERS not in degraded:
                degraded.append(SOURCE_TOP_HOLDERS)

        # Problems with the chart only cost the growth tile, never the record
        try:
            series = parse_holder_series(chart_outcome.data)
            if not chart_outcome.ok or series is None:
                degraded.append(SOURCE_HOLDER_CHART)
            holders_growth = estimate_holder_growth(series)
        except Exception as e:
            logger.warning(f"Error processing holder chart, using synthetic growth: {e}")
            holders_growth = synthetic_growth()
            if SOURCE_HOLDER_CHART not in degraded:
                degraded.append(SOURCE_HOLDER_CHART)

        try:
            record = merge_dashboard(token_data, top_wallets, holders_growth)
        except Exception as e:
            logger.error(f"Error processing dashboard data, serving synthetic dashboard: {e}")
            return DashboardResult(record=mock_dashboard(), degraded=[SOURCE_TOKEN])

        if degraded:
            logger.warning(f"Dashboard built with synthetic data for: {', '.join(degraded)}")
        else:
            logger.info("Dashboard data processed successfully")
        return DashboardResult(record=record, degraded=degraded)

    async def build_dashboard(self) -> DashboardData:
        return (await self.build_dashboard_result()).record

    async def check_health(self) -> HealthStatus:
        """Probe ``/credits``. Unlike the dashboard, upstream errors are reported."""
        timestamp = datetime.now(timezone.utc).isoformat()
        try:
            credits = await self.client.get_credits()
        except (UpstreamError, httpx.HTTPError) as e:
            logger.warning(f"Health check failed: {e}")
            return HealthStatus(
                status="unhealthy",
                timestamp=timestamp,
                error=str(e),
                upstream_status=e.status if isinstance(e, UpstreamError) else None,
                message="API connection failed - using mock data",
            )

        api_credits = _dig(credits, "credits")
        return HealthStatus(
            status="healthy",
            timestamp=timestamp,
            api_credits=to_number(api_credits) if api_credits is not None else None,
            message="Solana Tracker API is working correctly",
        )


dashboard_aggregator = DashboardAggregator()
