from __future__ import annotations

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest
import pytest_asyncio

from lacrm_mcp.client import LacrmClient
from lacrm_mcp.rate_limits import SlidingWindowRateLimiter


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class RecordingBackend:
    """MockTransport handler that records requests and replays canned replies."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.replies: Dict[str, Callable[[Dict[str, Any]], httpx.Response]] = {}
        self.default = httpx.Response(200, json={})

    def reply(self, function: str, payload: Any = None, status_code: int = 200) -> None:
        self.replies[function] = lambda params: httpx.Response(status_code, json=payload)

    def calls(self) -> List[Dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.headers.get("content-type") == "application/json"]

    def last_call(self) -> Dict[str, Any]:
        return self.calls()[-1]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.headers.get("content-type") == "application/json":
            body = json.loads(request.content)
            handler = self.replies.get(body["Function"])
            if handler is not None:
                return handler(body["Parameters"])
        elif "CreateFile" in self.replies:
            return self.replies["CreateFile"]({})
        return self.default


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest_asyncio.fixture
async def client(backend: RecordingBackend, fake_clock: FakeClock):
    http = httpx.AsyncClient(transport=httpx.MockTransport(backend))
    lacrm = LacrmClient(
        "test-key",
        http_client=http,
        rate_limiter=SlidingWindowRateLimiter(clock=fake_clock, sleep=fake_clock.sleep),
    )
    yield lacrm
    await http.aclose()
