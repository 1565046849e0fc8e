from __future__ import annotations

import asyncio

import pytest

from lacrm_mcp.rate_limits import MAX_CALLS, WINDOW_SECONDS, SlidingWindowRateLimiter


@pytest.mark.asyncio
async def test_admits_up_to_limit_without_waiting(fake_clock) -> None:
    limiter = SlidingWindowRateLimiter(clock=fake_clock, sleep=fake_clock.sleep)
    for _ in range(MAX_CALLS):
        await limiter.acquire()
    assert fake_clock.sleeps == []
    assert limiter.in_window() == MAX_CALLS


@pytest.mark.asyncio
async def test_call_over_limit_waits_for_oldest_to_expire(fake_clock) -> None:
    limiter = SlidingWindowRateLimiter(clock=fake_clock, sleep=fake_clock.sleep)
    for _ in range(MAX_CALLS):
        await limiter.acquire()
    fake_clock.now = 10.0
    await limiter.acquire()
    assert fake_clock.sleeps == [WINDOW_SECONDS - 10.0]
    assert fake_clock.now == WINDOW_SECONDS


@pytest.mark.asyncio
async def test_window_slides(fake_clock) -> None:
    limiter = SlidingWindowRateLimiter(clock=fake_clock, sleep=fake_clock.sleep)
    for i in range(MAX_CALLS):
        fake_clock.now = float(i) / 10
        await limiter.acquire()
    fake_clock.now = WINDOW_SECONDS + 0.05
    # only the entry admitted at t=0.0 has aged out
    assert limiter.in_window() == MAX_CALLS - 1
    await limiter.acquire()
    assert fake_clock.sleeps == []


@pytest.mark.asyncio
async def test_never_more_than_limit_in_any_window(fake_clock) -> None:
    limiter = SlidingWindowRateLimiter(clock=fake_clock, sleep=fake_clock.sleep)
    admitted = []
    for _ in range(MAX_CALLS * 2 + 5):
        await limiter.acquire()
        admitted.append(fake_clock.now)
    for t in admitted:
        in_window = [a for a in admitted if t <= a < t + WINDOW_SECONDS]
        assert len(in_window) <= MAX_CALLS


@pytest.mark.asyncio
async def test_concurrent_callers_share_the_window() -> None:
    limiter = SlidingWindowRateLimiter()
    await asyncio.gather(*(limiter.acquire() for _ in range(50)))
    assert limiter.in_window() == 50
