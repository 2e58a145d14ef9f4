"""
Weather gateway assembly.

Builds the upstream clients, response cache, status reporter and tool
registry for one process from Settings. The MCP server registry owns the
gateway and closes it at shutdown.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel

from weather_mcp.clients.nws_client import NwsClient
from weather_mcp.clients.open_meteo_client import OpenMeteoClient
from weather_mcp.clients.rainviewer_client import RainViewerClient
from weather_mcp.config import Settings
from weather_mcp.gateway.descriptors import ToolSelection
from weather_mcp.gateway.handlers import UpstreamClients, WeatherHandlers
from weather_mcp.gateway.registry import ToolRegistry
from weather_mcp.gateway.status import StatusReporter
from weather_mcp.infrastructure.response_cache import ResponseCache


class WeatherGateway:
    """Owns every stateful component behind the weather tools."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.selection = ToolSelection.parse(settings.ENABLED_TOOLS)

        client_options: dict[str, Any] = {
            "timeout": settings.UPSTREAM_TIMEOUT_SECONDS,
            "retry_attempts": settings.UPSTREAM_RETRY_ATTEMPTS,
            "retry_backoff": settings.UPSTREAM_RETRY_BACKOFF_SECONDS,
            "transport": transport,
        }
        self.clients = UpstreamClients(
            nws=NwsClient(user_agent=settings.NWS_USER_AGENT, **client_options),
            open_meteo=OpenMeteoClient(**client_options),
            rainviewer=RainViewerClient(**client_options),
        )
        self.cache = ResponseCache(max_entries=settings.CACHE_MAX_ENTRIES)
        self.status = StatusReporter(self.clients.all(), self.cache, self.selection)
        self.registry = ToolRegistry(
            handlers=WeatherHandlers(self.clients, self.status).as_mapping(),
            cache=self.cache,
            selection=self.selection,
            ttls=settings.cache_ttls(),
        )

        logger.info(
            f"Weather gateway ready: ENABLED_TOOLS={self.selection}, "
            f"tools={self.registry.enabled_tools()}"
        )

    async def dispatch(self, tool_name: str, params: dict[str, Any] | None = None) -> BaseModel:
        return await self.registry.dispatch(tool_name, params)

    async def aclose(self) -> None:
        """Cancel in-flight fetches, drop the cache and close the HTTP clients."""
        await self.cache.aclose()
        await self.clients.close()
        logger.info("Weather gateway closed")
