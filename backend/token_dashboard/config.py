from __future__ import annotations
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    solana_tracker_api_key: str = ""
    contract_address: str = ""
    solana_tracker_base_url: str = "https://data.solanatracker.io"

    # Upstream request pacing
    solana_tracker_min_interval_ms: int = 1000  # spacing between requests
    solana_tracker_retry_delay_ms: int = 2000  # fixed wait after a 429
    solana_tracker_max_retries: int = 3
    solana_tracker_timeout: float = 30.0  # seconds

    # Degraded mode: skip the top holders call and serve the synthetic leaderboard
    fetch_top_holders: bool = True

    frontend_url: str = "http://localhost:3000"
    extra_cors_origins: str = ""  # comma-separated additional origins for production

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache()
def get_settings() -> Settings:
    return Settings()
