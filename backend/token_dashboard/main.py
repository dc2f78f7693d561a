from __future__ import annotations
import logging

from token_dashboard.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

app = FastAPI(
    title="Token Dashboard API",
    description="Solana Tracker token metrics aggregated for the dashboard frontend",
    version="1.0.0",
)

_origins = [settings.frontend_url.rstrip("/"), "http://localhost:3000", "http://localhost:3001"]
if settings.extra_cors_origins:
    _origins.extend([o.strip().rstrip("/") for o in settings.extra_cors_origins.split(",") if o.strip()])
# Deduplicate
_origins = list(dict.fromkeys(_origins))

logger = logging.getLogger(__name__)
logger.info("CORS allowed origins: %s", _origins)
if not settings.solana_tracker_api_key or not settings.contract_address:
    logger.warning("SOLANA_TRACKER_API_KEY or CONTRACT_ADDRESS not set, dashboard will serve synthetic data")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Dashboard-Degraded"],
)

# Register route modules
from token_dashboard.api import dashboard

app.include_router(dashboard.router)
