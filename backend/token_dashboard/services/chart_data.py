"""Synthetic price chart feed.

Solana Tracker's chart endpoints aren't wired up yet, so the chart widget is
fed hourly points generated around a fixed reference price and volume.
"""
from __future__ import annotations

import random
import time

from token_dashboard.schemas.dashboard import ChartData, OHLCVCandle, PricePoint

BASE_PRICE = 0.5022527140331136
BASE_VOLUME_24H = 2370571
HOUR_MS = 3_600_000

PRICE_VARIATION = 0.05  # +/-2.5% around the base price
VOLUME_VARIATION = 0.3  # +/-15% around the hourly volume


def _vary(base: float, variation: float) -> float:
    return base * (1 + (random.random() - 0.5) * variation)


def _hourly_volume() -> int:
    return int(_vary(BASE_VOLUME_24H, VOLUME_VARIATION) / 24)


def generate_price_history(hours: int = 24) -> list[PricePoint]:
    now_ms = int(time.time() * 1000)
    return [
        PricePoint(
            time=now_ms - (hours - i) * HOUR_MS,
            price=_vary(BASE_PRICE, PRICE_VARIATION),
            volume=_hourly_volume(),
        )
        for i in range(hours)
    ]


def generate_ohlcv(hours: int = 24) -> list[OHLCVCandle]:
    now_ms = int(time.time() * 1000)
    candles = []
    for i in range(hours):
        open_price = _vary(BASE_PRICE, PRICE_VARIATION)
        candles.append(OHLCVCandle(
            time=now_ms - (hours - i) * HOUR_MS,
            open=open_price,
            high=open_price * (1 + random.random() * 0.02),
            low=open_price * (1 - random.random() * 0.02),
            close=_vary(open_price, 0.01),
            volume=_hourly_volume(),
        ))
    return candles


def generate_chart_data(period: str = "24h", hours: int = 24) -> ChartData:
    return ChartData(
        price_history=generate_price_history(hours),
        ohlcv_data=generate_ohlcv(hours),
        period=period,
    )
