"""
Weather MCP Server.

FastMCP instance exposing the twelve weather tools over a WeatherGateway.
Tools not enabled by ENABLED_TOOLS are not registered at all. Mounted into
the registry via tool_registry.py.
"""

from typing import Annotated, Callable

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from loguru import logger
from pydantic import BaseModel, Field

from weather_mcp.errors import WeatherToolError
from weather_mcp.gateway.gateway import WeatherGateway
from weather_mcp.infrastructure.trace_decorator import traced
from weather_mcp.schemas.hazards import (
    AirQualityResponse,
    LightningActivityResponse,
    MarineConditionsResponse,
    RiverConditionsResponse,
    WeatherImageryResponse,
    WildfireInfoResponse,
)
from weather_mcp.schemas.location import LocationSearchResponse
from weather_mcp.schemas.status import ServiceStatusResponse
from weather_mcp.schemas.weather import (
    AlertsResponse,
    CurrentConditionsResponse,
    ForecastResponse,
    HistoricalWeatherResponse,
)

# Numeric strings are coerced by the tool schema; range checks stay in the validator
Latitude = Annotated[float, Field(description="Latitude in decimal degrees, -90 to 90 (e.g. 47.6062 for Seattle).")]
Longitude = Annotated[float, Field(description="Longitude in decimal degrees, -180 to 180 (e.g. -122.3321 for Seattle).")]


def create_weather_server(gateway: WeatherGateway) -> FastMCP:
    """Build the weather FastMCP server bound to one gateway."""
    weather_mcp = FastMCP("weather")

    def weather_tool(name: str, title: str, description: str, tags: set[str]) -> Callable:
        """Register a read-only tool under its exact name if ENABLED_TOOLS allows it."""

        def decorator(func: Callable) -> Callable:
            if not gateway.registry.is_enabled(name):
                logger.info(f"Tool {name} disabled by ENABLED_TOOLS={gateway.selection}")
                return func
            return weather_mcp.tool(
                name=name,
                title=title,
                description=description,
                tags=tags,
                annotations={
                    "title": title,
                    "readOnlyHint": True,
                    "destructiveHint": False,
                    "idempotentHint": True,
                    "openWorldHint": True,
                },
            )(traced(span_name=f"mcp.tool.{name}")(func))

        return decorator

    async def dispatch(tool_name: str, **params) -> BaseModel:
        try:
            return await gateway.dispatch(tool_name, params)
        except WeatherToolError as e:
            raise ToolError(str(e)) from e

    # -----------------------------------------------------------------------
    # Core weather
    # -----------------------------------------------------------------------

    @weather_tool(
        "get_forecast",
        title="Get Weather Forecast",
        description=(
            "Get a daily weather forecast for any location on Earth, 1 to 16 days ahead. "
            "Returns high/low temperatures, conditions, precipitation, wind, UV index, "
            "and sunrise/sunset times."
        ),
        tags={"weather", "forecast"},
    )
    async def get_forecast(latitude: Latitude, longitude: Longitude, days: int = 7) -> ForecastResponse:
        """Get the daily forecast for a location.

        Args:
            latitude: Location latitude (e.g. 47.6062 for Seattle).
            longitude: Location longitude (e.g. -122.3321 for Seattle).
            days: Number of forecast days (1-16, default 7).
        """
        return await dispatch("get_forecast", latitude=latitude, longitude=longitude, days=days)

    @weather_tool(
        "get_current_conditions",
        title="Get Current Conditions",
        description=(
            "Get the latest observed weather from the nearest NOAA station. "
            "US locations only. Returns temperature, humidity, wind, pressure and visibility."
        ),
        tags={"weather", "current", "noaa", "us-only"},
    )
    async def get_current_conditions(latitude: Latitude, longitude: Longitude) -> CurrentConditionsResponse:
        """Get current observed conditions (US only)."""
        return await dispatch("get_current_conditions", latitude=latitude, longitude=longitude)

    @weather_tool(
        "search_location",
        title="Search Location",
        description=(
            "Find coordinates for a place name such as 'Seattle, WA' or 'Paris, France'. "
            "Use this first when the user gives a place instead of coordinates."
        ),
        tags={"location", "geocoding"},
    )
    async def search_location(query: str) -> LocationSearchResponse:
        """Resolve a free-text place name to coordinates.

        Args:
            query: Place name, optionally qualified by state or country.
        """
        return await dispatch("search_location", query=query)

    @weather_tool(
        "get_alerts",
        title="Get Weather Alerts",
        description=(
            "Get active NOAA/NWS watches, warnings and advisories for a US location, "
            "most severe first."
        ),
        tags={"weather", "alerts", "noaa", "us-only"},
    )
    async def get_alerts(latitude: Latitude, longitude: Longitude) -> AlertsResponse:
        """Get active weather alerts (US only)."""
        return await dispatch("get_alerts", latitude=latitude, longitude=longitude)

    @weather_tool(
        "get_historical_weather",
        title="Get Historical Weather",
        description=(
            "Get daily observed weather for a past date range (1940 to yesterday) "
            "from the Open-Meteo reanalysis archive."
        ),
        tags={"weather", "historical", "archive"},
    )
    async def get_historical_weather(
        latitude: float,
        longitude: float,
        start_date: str,
        end_date: str,
    ) -> HistoricalWeatherResponse:
        """Get daily archive records for a date range.

        Args:
            latitude: Location latitude.
            longitude: Location longitude.
            start_date: First day, YYYY-MM-DD.
            end_date: Last day, YYYY-MM-DD (no later than yesterday).
        """
        return await dispatch(
            "get_historical_weather",
            latitude=latitude,
            longitude=longitude,
            start_date=start_date,
            end_date=end_date,
        )

    # -----------------------------------------------------------------------
    # Environment and hazards
    # -----------------------------------------------------------------------

    @weather_tool(
        "get_air_quality",
        title="Get Air Quality",
        description="Get current US and European AQI with pollutant concentrations and UV index.",
        tags={"air-quality", "environment"},
    )
    async def get_air_quality(latitude: Latitude, longitude: Longitude) -> AirQualityResponse:
        return await dispatch("get_air_quality", latitude=latitude, longitude=longitude)

    @weather_tool(
        "get_marine_conditions",
        title="Get Marine Conditions",
        description="Get wave height, period and swell for a coastal or offshore location.",
        tags={"marine", "waves"},
    )
    async def get_marine_conditions(latitude: Latitude, longitude: Longitude) -> MarineConditionsResponse:
        return await dispatch("get_marine_conditions", latitude=latitude, longitude=longitude)

    @weather_tool(
        "get_weather_imagery",
        title="Get Weather Radar Imagery",
        description="Get recent and nowcast precipitation radar tile URLs covering a location.",
        tags={"radar", "imagery"},
    )
    async def get_weather_imagery(latitude: Latitude, longitude: Longitude) -> WeatherImageryResponse:
        return await dispatch("get_weather_imagery", latitude=latitude, longitude=longitude)

    @weather_tool(
        "get_lightning_activity",
        title="Get Lightning Activity",
        description="Get the thunderstorm and lightning risk for the next 24 hours.",
        tags={"lightning", "thunderstorm", "hazards"},
    )
    async def get_lightning_activity(latitude: Latitude, longitude: Longitude) -> LightningActivityResponse:
        return await dispatch("get_lightning_activity", latitude=latitude, longitude=longitude)

    @weather_tool(
        "get_river_conditions",
        title="Get River Conditions",
        description="Get modelled river discharge for the nearest river with a flood-watch flag.",
        tags={"river", "flood", "hazards"},
    )
    async def get_river_conditions(latitude: Latitude, longitude: Longitude) -> RiverConditionsResponse:
        return await dispatch("get_river_conditions", latitude=latitude, longitude=longitude)

    @weather_tool(
        "get_wildfire_info",
        title="Get Wildfire Danger",
        description="Get a 7-day fire-weather danger outlook from heat, humidity, wind and dryness.",
        tags={"wildfire", "fire-weather", "hazards"},
    )
    async def get_wildfire_info(latitude: Latitude, longitude: Longitude) -> WildfireInfoResponse:
        return await dispatch("get_wildfire_info", latitude=latitude, longitude=longitude)

    # -----------------------------------------------------------------------
    # Service status
    # -----------------------------------------------------------------------

    @weather_tool(
        "check_service_status",
        title="Check Service Status",
        description="Report upstream provider health, cache statistics and the enabled tools.",
        tags={"status", "diagnostics"},
    )
    async def check_service_status() -> ServiceStatusResponse:
        return await dispatch("check_service_status")

    return weather_mcp
