from __future__ import annotations

import json

import httpx
import pytest

from lacrm_mcp.client import API_URL, LacrmClient, UploadFile
from lacrm_mcp.errors import AuthenticationError, RemoteError
from lacrm_mcp.rate_limits import SlidingWindowRateLimiter


def _client(handler, fake_clock) -> LacrmClient:
    return LacrmClient(
        "secret-key",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        rate_limiter=SlidingWindowRateLimiter(clock=fake_clock, sleep=fake_clock.sleep),
    )


def test_empty_api_key_rejected() -> None:
    with pytest.raises(AuthenticationError):
        LacrmClient("   ")


@pytest.mark.asyncio
async def test_call_posts_function_and_parameters(client, backend) -> None:
    backend.reply("GetContact", {"ContactId": "1", "Name": "Ada"})
    result = await client.call("GetContact", {"ContactId": "1"})

    assert result == {"ContactId": "1", "Name": "Ada"}
    request = backend.requests[-1]
    assert request.method == "POST"
    assert str(request.url) == API_URL
    assert request.headers["authorization"] == "test-key"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"Function": "GetContact", "Parameters": {"ContactId": "1"}}


@pytest.mark.asyncio
async def test_call_without_parameters_sends_empty_object(client, backend) -> None:
    await client.call("GetUsers")
    assert backend.last_call() == {"Function": "GetUsers", "Parameters": {}}


@pytest.mark.asyncio
async def test_call_acquires_rate_limit_slot(client) -> None:
    await client.call("GetUsers")
    await client.call("GetGroups")
    assert client.rate_limiter.in_window() == 2


@pytest.mark.asyncio
async def test_error_code_in_200_raises_remote_error(client, backend) -> None:
    backend.reply("EditContact", {"ErrorCode": "InvalidId", "ErrorDescription": "Bad id"})
    with pytest.raises(RemoteError) as exc_info:
        await client.call("EditContact", {"ContactId": "x"})
    assert exc_info.value.code == "InvalidId"


@pytest.mark.asyncio
async def test_unauthorized_raises_authentication_error(fake_clock) -> None:
    lacrm = _client(lambda request: httpx.Response(401, text="denied"), fake_clock)
    with pytest.raises(AuthenticationError):
        await lacrm.call("GetUsers")
    await lacrm.aclose()


@pytest.mark.asyncio
async def test_server_error_with_plain_body(fake_clock) -> None:
    lacrm = _client(lambda request: httpx.Response(503, text="down"), fake_clock)
    with pytest.raises(RemoteError) as exc_info:
        await lacrm.call("GetUsers")
    assert exc_info.value.code == "HTTP_503"
    assert exc_info.value.description == "HTTP error: 503 Service Unavailable"
    await lacrm.aclose()


@pytest.mark.asyncio
async def test_transport_errors_propagate_unclassified(fake_clock) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    lacrm = _client(handler, fake_clock)
    with pytest.raises(httpx.ConnectError):
        await lacrm.call("GetUsers")
    await lacrm.aclose()


@pytest.mark.asyncio
async def test_call_with_file_sends_multipart(client, backend) -> None:
    backend.reply("CreateFile", {"FileId": "f-1"})
    upload = UploadFile(name="report.pdf", content=b"%PDF-1.4 data", mime_type="application/pdf")

    result = await client.call_with_file("CreateFile", {"ContactId": "c-1"}, upload)

    assert result == {"FileId": "f-1"}
    request = backend.requests[-1]
    assert request.headers["authorization"] == "test-key"
    assert request.headers["content-type"].startswith("multipart/form-data; boundary=")
    body = request.content
    assert b'name="Function"' in body
    assert b"CreateFile" in body
    assert b'name="Parameters"' in body
    assert json.dumps({"ContactId": "c-1"}).encode() in body
    assert b'name="File"; filename="report.pdf"' in body
    assert b"Content-Type: application/pdf" in body
    assert b"%PDF-1.4 data" in body


@pytest.mark.asyncio
async def test_owned_http_client_closed_on_exit() -> None:
    async with LacrmClient("key") as lacrm:
        http = lacrm._http
    assert http.is_closed
