"""
MCP Tool Registry.

Aggregates the MCP servers into a single FastMCP instance. The weather
server is mounted without a prefix so its tools keep their exact names
(get_forecast, search_location, ...). Owns the WeatherGateway, so the
response cache lives exactly as long as the registry.
"""

from loguru import logger
from fastmcp import FastMCP

from weather_mcp.config import settings
from weather_mcp.gateway.gateway import WeatherGateway
from weather_mcp.infrastructure.observability import initialize_observability
from weather_mcp.servers.weather_server import create_weather_server


class McpServersRegistry:
    def __init__(self, gateway: WeatherGateway | None = None) -> None:
        self.registry = FastMCP("tool_registry")
        self.gateway = gateway or WeatherGateway(settings)
        self._is_initialized = False

    async def initialize(self) -> None:
        """Mount the weather server into the registry."""
        if self._is_initialized:
            return

        logger.info("Initializing MCP tool registry...")

        # --- Initialize observability ---
        initialize_observability(
            service_name=settings.OTEL_SERVICE_NAME,
            enabled=settings.AGENT_OBSERVABILITY_ENABLED,
        )

        # --- Mount servers ---
        self.registry.mount(create_weather_server(self.gateway))

        self._is_initialized = True

        all_tools = await self.registry.list_tools()
        tool_names = [t.name for t in all_tools]
        logger.info(f"Registry initialized with {len(all_tools)} tools: {tool_names}")

    async def shutdown(self) -> None:
        """Release the gateway's HTTP clients and cache."""
        await self.gateway.aclose()

    def get_registry(self) -> FastMCP:
        return self.registry
