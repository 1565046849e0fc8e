from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .errors import AuthenticationError, RemoteError
from .rate_limits import SlidingWindowRateLimiter
from .responses import classify


API_URL = "https://api.lessannoyingcrm.com/v2/"
DEFAULT_MIME_TYPE = "application/octet-stream"

logger = logging.getLogger("lacrm_mcp.client")


@dataclass
class UploadFile:
    name: str
    content: bytes
    mime_type: str = DEFAULT_MIME_TYPE


class LacrmClient:
    """
    Single-endpoint client for the LACRM v2 API.

    Every call is a POST of {"Function", "Parameters"} to one URL. The raw API
    key goes in the Authorization header. One attempt per call, no retries.
    """

    def __init__(
        self,
        api_key: str,
        *,
        rate_limiter: Optional[SlidingWindowRateLimiter] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        api_url: str = API_URL,
        timeout: Optional[httpx.Timeout] = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise AuthenticationError()
        self._api_key = api_key.strip()
        self._api_url = api_url
        self.rate_limiter = rate_limiter or SlidingWindowRateLimiter()
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=timeout or httpx.Timeout(30.0, connect=5.0),
            follow_redirects=False,
        )

    async def __aenter__(self) -> "LacrmClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def call(self, function_name: str, parameters: Optional[Dict[str, Any]] = None) -> Any:
        params = parameters or {}
        await self.rate_limiter.acquire()
        logger.debug("API call: %s", function_name, extra={"function": function_name})
        response = await self._http.post(
            self._api_url,
            headers={
                "Authorization": self._api_key,
                "Content-Type": "application/json",
            },
            content=json.dumps({"Function": function_name, "Parameters": params}),
        )
        return self._handle(function_name, response)

    async def call_with_file(
        self,
        function_name: str,
        parameters: Dict[str, Any],
        file: UploadFile,
    ) -> Any:
        await self.rate_limiter.acquire()
        logger.debug(
            "API call with file: %s (%s, %d bytes)",
            function_name,
            file.name,
            len(file.content),
            extra={"function": function_name},
        )
        # httpx sets the multipart Content-Type with its boundary
        response = await self._http.post(
            self._api_url,
            headers={"Authorization": self._api_key},
            data={"Function": function_name, "Parameters": json.dumps(parameters)},
            files={"File": (file.name, file.content, file.mime_type or DEFAULT_MIME_TYPE)},
        )
        return self._handle(function_name, response)

    def _handle(self, function_name: str, response: httpx.Response) -> Any:
        try:
            return classify(response.content, response.status_code, response.reason_phrase)
        except RemoteError as exc:
            logger.error(
                "API error in %s: %s (%s)",
                function_name,
                exc.description,
                exc.code,
                extra={"function": function_name},
            )
            raise
        except AuthenticationError:
            logger.error("API authentication failed in %s", function_name, extra={"function": function_name})
            raise
