"""
FastAPI wrapper for the streamable-HTTP transport.

- Bearer token auth on /mcp (MCP_SERVER_TOKEN, mandatory in production)
- Healthcheck under /health
- Tool metrics under /metrics
- MCP endpoint under /mcp
"""
from __future__ import annotations

import hmac
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse
from mcp.server.fastmcp import FastMCP
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .env_utils import is_production_env
from .observability import render_prometheus
from .server import AppContext


logger = logging.getLogger("lacrm_mcp.http_app")


class BearerTokenAuthMiddleware(BaseHTTPMiddleware):
    """Bearer token authentication for the MCP endpoint."""

    def __init__(self, app: ASGIApp, expected_token: Optional[str] = None):
        super().__init__(app)
        token = expected_token if expected_token is not None else os.getenv("MCP_SERVER_TOKEN", "")
        self.expected_token = token.strip()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if not path.startswith("/mcp"):
            return await call_next(request)

        if is_production_env() and not self.expected_token:
            logger.error("MCP_SERVER_TOKEN not set in production")
            return JSONResponse(
                {"error": "server_error", "message": "MCP_SERVER_TOKEN not configured"},
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        if self.expected_token:
            auth_header = request.headers.get("authorization", "")
            if not auth_header.startswith("Bearer "):
                logger.warning("Missing or invalid Authorization header for %s %s", request.method, path)
                return JSONResponse(
                    {"error": "unauthorized", "message": "Missing or invalid Authorization header"},
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    headers={"WWW-Authenticate": "Bearer"},
                )
            if not hmac.compare_digest(auth_header[len("Bearer "):], self.expected_token):
                logger.warning("Invalid token for %s %s", request.method, path)
                return JSONResponse(
                    {"error": "unauthorized", "message": "Invalid token"},
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    headers={"WWW-Authenticate": "Bearer"},
                )

        return await call_next(request)


def create_app(mcp: FastMCP, app_ctx: AppContext, token: Optional[str] = None) -> FastAPI:
    mcp_asgi = mcp.streamable_http_app()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with mcp.session_manager.run():
            logger.info("MCP streamable-http session manager started")
            yield

    app = FastAPI(
        title="LACRM MCP Server",
        description="MCP tools for the Less Annoying CRM API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(BearerTokenAuthMiddleware, expected_token=token)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"ok": True, "status": "healthy", "server": app_ctx.settings.name}

    @app.get("/metrics")
    async def metrics() -> Response:
        content = render_prometheus(
            app_ctx.metrics.snapshot(),
            app_ctx.client.rate_limiter.in_window(),
        )
        return PlainTextResponse(content, media_type="text/plain; version=0.0.4")

    # Mounted last: the inner app serves /mcp itself
    app.mount("/", mcp_asgi)
    return app
