from __future__ import annotations

import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from .client import LacrmClient
from .config import Settings
from .errors import RemoteError, format_error_for_llm
from .observability import InMemoryMetrics
from .resources import register_resources
from .responses import decode_records
from .tools import register_all_tools


logger = logging.getLogger("lacrm_mcp.server")

SERVER_INSTRUCTIONS = (
    "Tools for Less Annoying CRM. Before creating or editing contacts, companies or "
    "pipeline items, call the matching schema tool (get_contact_schema, "
    "get_company_schema, get_pipeline_item_schema) and read lacrm://workflows/overview."
)


@dataclass
class AppContext:
    settings: Settings
    client: LacrmClient
    metrics: InMemoryMetrics = field(default_factory=InMemoryMetrics)


def _generate_correlation_id() -> str:
    """Generate a unique correlation ID for log tracing."""
    return str(uuid.uuid4())


class ToolInvoker:
    """
    Shared wrapper around every tool body.

    Times the operation, records metrics and logs the outcome. Any failure is
    re-raised as a ToolError carrying an LLM-readable message, which the MCP
    SDK reports as a result with isError set.
    """

    def __init__(self, app: AppContext) -> None:
        self._app = app

    async def __call__(
        self,
        tool_name: str,
        function: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        return await self.run(tool_name, lambda client: client.call(function, params or {}))

    async def records(
        self,
        tool_name: str,
        function: str,
        params: Optional[Dict[str, Any]] = None,
        key: Optional[str] = None,
    ) -> Any:
        async def operation(client: LacrmClient) -> Any:
            payload = await client.call(function, params or {})
            return decode_records(payload, key=key).to_dict()

        return await self.run(tool_name, operation)

    async def run(self, tool_name: str, operation: Callable[[LacrmClient], Awaitable[Any]]) -> Any:
        correlation_id = _generate_correlation_id()
        start = time.perf_counter()
        error = False
        error_code: Optional[str] = None
        try:
            return await operation(self._app.client)
        except ToolError:
            error = True
            raise
        except Exception as exc:
            error = True
            if isinstance(exc, RemoteError):
                error_code = exc.code
            logger.warning(
                "Tool %s failed: %s",
                tool_name,
                exc,
                extra={"tool": tool_name, "correlation_id": correlation_id},
            )
            raise ToolError(format_error_for_llm(exc)) from exc
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            self._app.metrics.record(tool_name, duration_ms, error, error_code)
            logger.info(
                "Tool %s %s",
                tool_name,
                "error" if error else "ok",
                extra={
                    "tool": tool_name,
                    "correlation_id": correlation_id,
                    "duration_ms": f"{duration_ms:.1f}",
                },
            )


def create_server(app: AppContext) -> FastMCP:
    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
        # The client outlives MCP sessions; its owner closes it.
        yield app

    mcp = FastMCP(
        app.settings.name,
        instructions=SERVER_INSTRUCTIONS,
        lifespan=lifespan,
        host=app.settings.host,
        port=app.settings.port,
        log_level=app.settings.log_level,
    )
    register_all_tools(mcp, ToolInvoker(app))
    register_resources(mcp)
    return mcp
