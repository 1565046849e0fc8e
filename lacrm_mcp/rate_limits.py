import asyncio
import logging
import time
from collections import deque
from typing import Awaitable, Callable, Deque, Optional


MAX_CALLS = 120
WINDOW_SECONDS = 60.0

logger = logging.getLogger("lacrm_mcp.rate_limits")


class SlidingWindowRateLimiter:
    """
    Sliding-window limiter for outbound LACRM calls.

    acquire() suspends the caller while the trailing window already holds
    MAX_CALLS admissions. It never raises. All mutation happens between
    suspension points, so concurrent coroutines on one loop need no lock.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        self._clock = clock or time.monotonic
        self._sleep = sleep or asyncio.sleep
        self._admitted: Deque[float] = deque()

    def _prune(self, now: float) -> None:
        while self._admitted and now - self._admitted[0] >= WINDOW_SECONDS:
            self._admitted.popleft()

    def in_window(self) -> int:
        self._prune(self._clock())
        return len(self._admitted)

    async def acquire(self) -> None:
        while True:
            now = self._clock()
            self._prune(now)
            if len(self._admitted) < MAX_CALLS:
                self._admitted.append(now)
                return
            wait = WINDOW_SECONDS - (now - self._admitted[0])
            if wait < 0:
                wait = 0.0
            logger.debug("Rate limit reached, waiting %.3fs", wait)
            await self._sleep(wait)
