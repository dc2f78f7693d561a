from __future__ import annotations
import asyncio
import enum
import logging
from typing import Any, Optional

import httpx

from token_dashboard.config import get_settings
from token_dashboard.services.rate_limiter import RateLimiter

settings = get_settings()
logger = logging.getLogger(__name__)


class UpstreamErrorKind(str, enum.Enum):
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    MALFORMED_RESPONSE = "malformed_response"


class UpstreamError(Exception):
    """A Solana Tracker request that could not produce a JSON body."""

    def __init__(self, kind: UpstreamErrorKind, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.status = status


def _is_rate_limit_message(error: Exception) -> bool:
    message = str(error).lower()
    return "429" in message or "rate limit" in message


class SolanaTrackerClient:
    """Client for the Solana Tracker data API.

    Every attempt, retries included, goes through the shared RateLimiter.
    A 429 response waits a fixed ``retry_delay`` and retries up to
    ``max_retries`` times; other non-2xx responses fail immediately.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        rate_limiter: Optional[RateLimiter] = None,
        retry_delay: Optional[float] = None,
        max_retries: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = settings.solana_tracker_api_key if api_key is None else api_key
        self.base_url = (base_url or settings.solana_tracker_base_url).rstrip("/")
        self.rate_limiter = rate_limiter or RateLimiter(
            min_interval=settings.solana_tracker_min_interval_ms / 1000
        )
        self.retry_delay = (
            settings.solana_tracker_retry_delay_ms / 1000 if retry_delay is None else retry_delay
        )
        self.max_retries = settings.solana_tracker_max_retries if max_retries is None else max_retries
        self.timeout = settings.solana_tracker_timeout if timeout is None else timeout
        self.headers = {
            "x-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        self._transport = transport

    # ── low-level request ──────────────────────────────────────────

    async def request(self, endpoint: str, max_retries: Optional[int] = None) -> Any:
        """GET ``base_url + endpoint`` and return the decoded JSON body.

        Raises UpstreamError when retries are exhausted, on a non-2xx
        status, on a transport failure, or when the body is not JSON.
        """
        retries_left = self.max_retries if max_retries is None else max_retries
        url = f"{self.base_url}{endpoint}"

        while True:
            await self.rate_limiter.acquire()
            logger.info(f"Making request to: {endpoint}")

            try:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                    resp = await client.get(url, headers=self.headers)
            except httpx.HTTPError as e:
                if retries_left > 0 and _is_rate_limit_message(e):
                    logger.warning(
                        f"Rate limit error on {endpoint}, retrying in {self.retry_delay}s "
                        f"({retries_left} retries left): {e}"
                    )
                    await asyncio.sleep(self.retry_delay)
                    retries_left -= 1
                    continue
                logger.error(f"Error making request to {endpoint}: {e}")
                raise UpstreamError(UpstreamErrorKind.NETWORK_ERROR, str(e)) from e

            if resp.status_code == 429:
                logger.warning(f"Rate limit hit (429) on {endpoint}, waiting {self.retry_delay}s")
                await asyncio.sleep(self.retry_delay)
                if retries_left > 0:
                    logger.info(f"Retrying request ({retries_left} retries left)")
                    retries_left -= 1
                    continue
                raise UpstreamError(
                    UpstreamErrorKind.RATE_LIMIT_EXCEEDED,
                    "Rate limit exceeded after all retries",
                    status=429,
                )

            if not resp.is_success:
                logger.error(f"HTTP error on {endpoint}: status {resp.status_code}, response: {resp.text}")
                raise UpstreamError(
                    UpstreamErrorKind.HTTP_ERROR,
                    f"HTTP error! status: {resp.status_code}",
                    status=resp.status_code,
                )

            try:
                data = resp.json()
            except ValueError as e:
                raise UpstreamError(
                    UpstreamErrorKind.MALFORMED_RESPONSE,
                    f"Invalid JSON from {endpoint}: {e}",
                    status=resp.status_code,
                ) from e

            logger.info(f"Successfully fetched data from {endpoint}")
            return data

    # ── endpoints ──────────────────────────────────────────────────

    async def get_token(self, address: str) -> Any:
        """Token info, pools, events and risk for a mint."""
        return await self.request(f"/tokens/{address}")

    async def get_top_holders(self, address: str) -> Any:
        return await self.request(f"/tokens/{address}/holders/top")

    async def get_holder_chart(self, address: str) -> Any:
        """Holder count history: ``{"holders": [{"time": ..., "holders": ...}]}``."""
        return await self.request(f"/holders/chart/{address}")

    async def get_credits(self) -> Any:
        return await self.request("/credits")


solana_tracker_client = SolanaTrackerClient()
