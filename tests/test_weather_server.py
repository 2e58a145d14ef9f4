"""Tests for the MCP surface: registered tools, annotations and error mapping."""

import pytest
import pytest_asyncio
from fastmcp import Client
from fastmcp.exceptions import ToolError

from weather_mcp.gateway.gateway import WeatherGateway
from weather_mcp.servers.tool_registry import McpServersRegistry
from weather_mcp.servers.weather_server import create_weather_server

BASIC_TOOLS = {"get_forecast", "get_current_conditions", "search_location", "get_alerts", "check_service_status"}


@pytest_asyncio.fixture
async def registry(make_settings, seattle_upstream):
    gateway = WeatherGateway(make_settings(ENABLED_TOOLS="basic"), transport=seattle_upstream.transport)
    registry = McpServersRegistry(gateway=gateway)
    await registry.initialize()
    yield registry
    await registry.shutdown()


@pytest.mark.asyncio
async def test_only_enabled_tools_are_listed(registry):
    async with Client(registry.get_registry()) as client:
        tools = await client.list_tools()

    assert {t.name for t in tools} == BASIC_TOOLS


@pytest.mark.asyncio
async def test_overrides_change_listed_tools(make_settings, seattle_upstream):
    gateway = WeatherGateway(
        make_settings(ENABLED_TOOLS="basic,+get_river_conditions,-get_alerts"),
        transport=seattle_upstream.transport,
    )
    try:
        async with Client(create_weather_server(gateway)) as client:
            names = {t.name for t in await client.list_tools()}
    finally:
        await gateway.aclose()

    assert names == (BASIC_TOOLS - {"get_alerts"}) | {"get_river_conditions"}


@pytest.mark.asyncio
async def test_all_twelve_tools_under_all(make_settings, seattle_upstream):
    gateway = WeatherGateway(make_settings(ENABLED_TOOLS="all"), transport=seattle_upstream.transport)
    try:
        async with Client(create_weather_server(gateway)) as client:
            tools = await client.list_tools()
    finally:
        await gateway.aclose()

    assert len(tools) == 12
    assert all(t.annotations.readOnlyHint for t in tools)


@pytest.mark.asyncio
async def test_forecast_call_returns_structured_content(registry):
    async with Client(registry.get_registry()) as client:
        result = await client.call_tool("get_forecast", {"latitude": 47.6062, "longitude": -122.3321, "days": 3})

    assert len(result.structured_content["days"]) == 3
    assert result.structured_content["source"] == "Open-Meteo"


@pytest.mark.asyncio
async def test_validation_failure_surfaces_error_kind(registry):
    async with Client(registry.get_registry()) as client:
        with pytest.raises(ToolError, match="InvalidRange"):
            await client.call_tool("get_forecast", {"latitude": 47.6062, "longitude": -122.3321, "days": 30})


@pytest.mark.asyncio
async def test_region_failure_surfaces_error_kind(registry, seattle_upstream):
    async with Client(registry.get_registry()) as client:
        with pytest.raises(ToolError, match="NoDataForRegion"):
            await client.call_tool("get_alerts", {"latitude": 48.8566, "longitude": 2.3522})
    assert seattle_upstream.calls == []


@pytest.mark.asyncio
async def test_coordinate_schema_documents_ranges(registry):
    async with Client(registry.get_registry()) as client:
        tools = {t.name: t for t in await client.list_tools()}

    properties = tools["get_forecast"].inputSchema["properties"]
    assert "-90 to 90" in properties["latitude"]["description"]
    assert "-180 to 180" in properties["longitude"]["description"]
    assert properties["latitude"]["type"] == "number"


@pytest.mark.asyncio
async def test_non_numeric_latitude_rejected_before_dispatch(registry, seattle_upstream):
    async with Client(registry.get_registry()) as client:
        with pytest.raises(ToolError):
            await client.call_tool("get_forecast", {"latitude": "north", "longitude": -122.3321})
    assert seattle_upstream.calls == []


@pytest.mark.asyncio
async def test_out_of_range_latitude_surfaces_error_kind(registry, seattle_upstream):
    async with Client(registry.get_registry()) as client:
        with pytest.raises(ToolError, match="InvalidCoordinate"):
            await client.call_tool("get_forecast", {"latitude": 95.0, "longitude": -122.3321})
    assert seattle_upstream.calls == []
