"""Tests for RateLimiter request spacing."""
import asyncio
import time

import pytest

from token_dashboard.services.rate_limiter import RateLimiter


class TestSequentialSpacing:

    @pytest.mark.asyncio
    async def test_first_acquire_does_not_wait(self, fake_clock):
        limiter = RateLimiter(min_interval=1.0, clock=fake_clock, sleep=fake_clock.sleep)
        await limiter.acquire()
        assert fake_clock.sleeps == []
        assert limiter.last_request == 0.0

    @pytest.mark.asyncio
    async def test_sequential_calls_are_at_least_one_interval_apart(self, fake_clock):
        limiter = RateLimiter(min_interval=1.0, clock=fake_clock, sleep=fake_clock.sleep)
        instants = []
        for _ in range(6):
            await limiter.acquire()
            instants.append(limiter.last_request)
            fake_clock.now += 0.25  # caller does some work between requests

        gaps = [b - a for a, b in zip(instants, instants[1:])]
        assert all(gap >= 1.0 for gap in gaps), f"Requests closer than 1s apart: {gaps}"

    @pytest.mark.asyncio
    async def test_waits_only_for_the_remaining_interval(self, fake_clock):
        limiter = RateLimiter(min_interval=1.0, clock=fake_clock, sleep=fake_clock.sleep)
        await limiter.acquire()
        fake_clock.now += 0.4
        await limiter.acquire()
        assert fake_clock.sleeps == [pytest.approx(0.6)]

    @pytest.mark.asyncio
    async def test_no_wait_after_interval_has_passed(self, fake_clock):
        limiter = RateLimiter(min_interval=1.0, clock=fake_clock, sleep=fake_clock.sleep)
        await limiter.acquire()
        fake_clock.now += 5
        await limiter.acquire()
        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_real_clock_spacing(self):
        limiter = RateLimiter(min_interval=0.05)
        stamps = []
        for _ in range(3):
            await limiter.acquire()
            stamps.append(time.monotonic())
        gaps = [b - a for a, b in zip(stamps, stamps[1:])]
        assert all(gap >= 0.045 for gap in gaps), f"Gaps too small: {gaps}"


class TestConcurrentCallers:

    @pytest.mark.asyncio
    async def test_concurrent_callers_are_serialized(self, fake_clock):
        limiter = RateLimiter(min_interval=1.0, clock=fake_clock, sleep=fake_clock.sleep)
        instants = []

        async def caller():
            await limiter.acquire()
            instants.append(limiter.last_request)

        await asyncio.gather(*(caller() for _ in range(4)))

        assert sorted(instants) == [0.0, 1.0, 2.0, 3.0], (
            f"Concurrent callers must be spaced one interval apart, got {instants}"
        )
