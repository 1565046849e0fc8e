"""
Entry point for the LACRM MCP server.

stdio (default) serves one MCP client over stdin/stdout. http serves the
streamable-HTTP transport through the FastAPI app in http_app.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

import httpx
import uvicorn

from .client import LacrmClient
from .config import Settings, load_api_key, load_settings
from .env_utils import debug_enabled
from .errors import LacrmError
from .observability import setup_logger
from .server import AppContext, create_server


logger = logging.getLogger("lacrm_mcp.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lacrm-mcp", description="MCP server for Less Annoying CRM")
    parser.add_argument("--transport", choices=("stdio", "http"), default="stdio")
    parser.add_argument("--host", default=None, help="HTTP bind host (http transport)")
    parser.add_argument("--port", type=int, default=None, help="HTTP bind port (http transport)")
    parser.add_argument("--config", type=Path, default=None, help="Path to server YAML settings")
    return parser


def build_client(settings: Settings, api_key: str) -> LacrmClient:
    timeouts = settings.timeouts
    return LacrmClient(
        api_key,
        api_url=settings.api_url,
        timeout=httpx.Timeout(
            connect=timeouts["connect"],
            read=timeouts["read"],
            write=timeouts["write"],
            pool=timeouts["pool"],
        ),
    )


async def serve(settings: Settings, api_key: str, transport: str) -> None:
    async with build_client(settings, api_key) as client:
        app_ctx = AppContext(settings=settings, client=client)
        mcp = create_server(app_ctx)
        if transport == "stdio":
            logger.info("LACRM MCP server running on stdio")
            await mcp.run_stdio_async()
            return

        from .http_app import create_app

        app = create_app(mcp, app_ctx)
        logger.info("LACRM MCP server on http://%s:%s/mcp", settings.host, settings.port)
        config = uvicorn.Config(
            app,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            server_header=False,
        )
        await uvicorn.Server(config).serve()


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(args.config)
    except (OSError, ValueError) as exc:
        print(f"Failed to load settings: {exc}", file=sys.stderr)
        sys.exit(1)
    if debug_enabled():
        settings.log_level = "DEBUG"
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    setup_logger(settings.log_level)

    try:
        api_key = load_api_key()
        asyncio.run(serve(settings, api_key, args.transport))
    except LacrmError as exc:
        logger.error("Failed to start LACRM MCP server: %s", exc)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")


if __name__ == "__main__":
    main()
