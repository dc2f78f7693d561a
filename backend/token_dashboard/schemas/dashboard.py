from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# The dashboard frontend reads camelCase keys
_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TopHolder(BaseModel):
    rank: int
    wallet: str
    balance: float
    balance_formatted: str
    percentage: str

    model_config = _camel


class DashboardData(BaseModel):
    token_name: str = "URANUS"
    token_symbol: str = "URANUS"
    token_image: str = ""
    token_description: str = ""

    market_cap: float = 0.0
    price: float = 0.0
    price_change_24h: float = Field(0.0, alias="priceChange24h")
    total_supply: float = 0.0
    circulating_supply: float = 0.0

    volume_24h: float = Field(0.0, alias="volume24h")
    total_volume: float = 0.0
    total_transactions: int = 0
    buy_transactions: int = 0
    sell_transactions: int = 0

    total_holders: int = 0
    holders_growth: float = 0.0
    volume_growth: float = 0.0

    top_wallets: List[TopHolder] = []

    liquidity: float = 0.0
    risk_score: float = 0.0
    jupiter_verified: bool = False

    pool_id: str = ""
    market: str = ""
    last_updated: int = 0

    model_config = _camel


class PricePoint(BaseModel):
    time: int
    price: float
    volume: int


class OHLCVCandle(BaseModel):
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: int


class ChartData(BaseModel):
    price_history: List[PricePoint]
    ohlcv_data: List[OHLCVCandle]
    period: str

    model_config = _camel


class HealthStatus(BaseModel):
    status: str
    timestamp: str
    message: str
    api_credits: Optional[float] = None
    error: Optional[str] = None
    upstream_status: Optional[int] = None

    model_config = _camel
