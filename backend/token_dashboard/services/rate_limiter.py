from __future__ import annotations
import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """Minimum spacing between requests to a single upstream host.

    Holds the instant of the last request. ``acquire()`` waits until
    ``min_interval`` seconds have passed since that instant and then records
    a new one. The read-then-write happens under a lock, so concurrent
    callers queue up and the host sees at most one request per interval.
    """

    def __init__(
        self,
        min_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def last_request(self) -> Optional[float]:
        return self._last_request

    async def acquire(self) -> None:
        async with self._lock:
            if self._last_request is not None:
                elapsed = self._clock() - self._last_request
                if elapsed < self.min_interval:
                    wait = self.min_interval - elapsed
                    logger.info(f"Rate limiting: waiting {wait * 1000:.0f}ms before next request")
                    await self._sleep(wait)
            self._last_request = self._clock()
