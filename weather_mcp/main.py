"""Container entrypoint for the weather MCP server (HTTP), plus a stdio runner."""

import asyncio
import sys

import uvicorn
from loguru import logger

from weather_mcp.config import settings
from weather_mcp.servers.tool_registry import McpServersRegistry

logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL)

registry = McpServersRegistry()
_inner_app = registry.get_registry().http_app(stateless_http=True)


async def app(scope, receive, send):
    """ASGI app that forwards lifespan, lazily initializes the registry and closes it on shutdown."""
    if scope["type"] == "lifespan":

        async def send_with_shutdown(message):
            if message["type"] == "lifespan.shutdown.complete":
                await registry.shutdown()
            await send(message)

        await _inner_app(scope, receive, send_with_shutdown)
        return
    if not registry._is_initialized:
        await registry.initialize()
    await _inner_app(scope, receive, send)


async def _serve_stdio() -> None:
    await registry.initialize()
    try:
        await registry.get_registry().run_async(transport="stdio")
    finally:
        await registry.shutdown()


def run_stdio() -> None:
    """Console entrypoint: serve the tools over stdio for local MCP clients."""
    asyncio.run(_serve_stdio())


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
