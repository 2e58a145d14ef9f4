"""Tests for the tool table, ENABLED_TOOLS parsing and settings."""

import pytest
from pydantic import ValidationError

from weather_mcp.config import Settings
from weather_mcp.gateway.descriptors import (
    TOOL_DESCRIPTORS,
    ToolDescriptor,
    ToolSelection,
    ToolTier,
    register_tool,
)
from weather_mcp.schemas.status import ServiceStatusResponse

TIER_TOOLS = {
    ToolTier.BASIC: {"get_forecast", "get_current_conditions", "search_location", "get_alerts", "check_service_status"},
    ToolTier.STANDARD: {"get_historical_weather"},
    ToolTier.FULL: {"get_air_quality", "get_marine_conditions", "get_weather_imagery", "get_lightning_activity"},
    ToolTier.ALL: {"get_river_conditions", "get_wildfire_info"},
}


def test_twelve_tools_registered():
    assert len(TOOL_DESCRIPTORS) == 12
    for tier, names in TIER_TOOLS.items():
        assert {n for n, d in TOOL_DESCRIPTORS.items() if d.tier is tier} == names


def test_every_cacheable_tool_has_a_ttl():
    ttls = Settings(_env_file=None).cache_ttls()
    for descriptor in TOOL_DESCRIPTORS.values():
        if descriptor.cacheable:
            assert descriptor.ttl_family in ttls
    assert not TOOL_DESCRIPTORS["check_service_status"].cacheable


def test_duplicate_registration_rejected():
    with pytest.raises(ValueError, match="Duplicate"):
        register_tool(ToolDescriptor(
            name="get_forecast",
            tier=ToolTier.BASIC,
            response_model=ServiceStatusResponse,
        ))


def test_optional_param_defaults_are_read_only():
    defaults = {"days": 7}
    descriptor = ToolDescriptor(
        name="get_example",
        tier=ToolTier.BASIC,
        response_model=ServiceStatusResponse,
        optional_params=defaults,
    )
    defaults["days"] = 1

    assert descriptor.optional_params["days"] == 7
    with pytest.raises(TypeError):
        descriptor.optional_params["days"] = 16
    with pytest.raises(TypeError):
        TOOL_DESCRIPTORS["get_forecast"].optional_params["days"] = 16
    assert TOOL_DESCRIPTORS["get_forecast"].optional_params["days"] == 7


class TestToolSelection:
    @pytest.mark.parametrize(
        "value, expected_count",
        [("basic", 5), ("standard", 6), ("full", 10), ("all", 12), (" FULL ", 10)],
    )
    def test_tiers_are_cumulative(self, value, expected_count):
        assert len(ToolSelection.parse(value).enabled_names()) == expected_count

    def test_overrides(self):
        selection = ToolSelection.parse("standard,+get_air_quality,-get_alerts")
        names = selection.enabled_names()
        assert "get_air_quality" in names
        assert "get_alerts" not in names
        assert "get_marine_conditions" not in names

    def test_last_override_wins(self):
        selection = ToolSelection.parse("basic,+get_wildfire_info,-get_wildfire_info")
        assert "get_wildfire_info" not in selection.enabled_names()

    def test_str_round_trips(self):
        text = "basic,+get_air_quality,-get_alerts"
        assert str(ToolSelection.parse(text)) == text
        assert ToolSelection.parse(str(ToolSelection.parse(text))) == ToolSelection.parse(text)

    @pytest.mark.parametrize(
        "value",
        ["", "everything", "basic,get_air_quality", "basic,+get_weather", "basic,+", "basic,*get_alerts"],
    )
    def test_invalid_values(self, value):
        with pytest.raises(ValueError):
            ToolSelection.parse(value)


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.ENABLED_TOOLS == "standard"
        assert settings.UPSTREAM_RETRY_ATTEMPTS == 1
        assert settings.cache_ttls()["alerts"] == 120

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("ENABLED_TOOLS", "full,-get_marine_conditions")
        monkeypatch.setenv("CACHE_TTL_FORECAST_SECONDS", "60")
        settings = Settings(_env_file=None)
        assert settings.ENABLED_TOOLS == "full,-get_marine_conditions"
        assert settings.cache_ttls()["forecast"] == 60

    def test_invalid_enabled_tools_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, ENABLED_TOOLS="premium")
