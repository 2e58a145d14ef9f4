"""
Tool descriptors.

Static table of the twelve weather tools: which parameters each accepts,
which ENABLED_TOOLS tier unlocks it, whether its upstream only covers the
US, and which cache TTL family its responses belong to. Each descriptor is
registered at import time into TOOL_DESCRIPTORS and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel

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


class ToolTier(IntEnum):
    """ENABLED_TOOLS levels; each one includes every tool of the levels below it."""

    BASIC = 1
    STANDARD = 2
    FULL = 3
    ALL = 4

    @classmethod
    def parse(cls, value: str) -> ToolTier:
        try:
            return cls[value.strip().upper()]
        except KeyError:
            allowed = ", ".join(t.name.lower() for t in cls)
            raise ValueError(f"Unknown tool tier {value!r} (expected one of: {allowed})") from None


class Region(str, Enum):
    GLOBAL = "global"
    US = "us"


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """Static description of one dispatchable tool."""

    name: str
    tier: ToolTier
    response_model: type[BaseModel]
    required_params: frozenset[str] = frozenset()
    optional_params: Mapping[str, Any] = field(default_factory=dict)

    # Upstream coverage; US-only tools are rejected outside the US boxes
    region: Region = Region.GLOBAL

    # Settings.cache_ttls() key; None means the response is never cached
    ttl_family: str | None = None

    def __post_init__(self) -> None:
        # read-only copy
        object.__setattr__(self, "optional_params", MappingProxyType(dict(self.optional_params)))

    @property
    def cacheable(self) -> bool:
        return self.ttl_family is not None

    @property
    def accepted_params(self) -> frozenset[str]:
        return self.required_params | frozenset(self.optional_params)


# Global registry: name -> ToolDescriptor
TOOL_DESCRIPTORS: dict[str, ToolDescriptor] = {}


def register_tool(descriptor: ToolDescriptor) -> ToolDescriptor:
    """Register a tool descriptor. Called at module import time."""
    if descriptor.name in TOOL_DESCRIPTORS:
        raise ValueError(f"Duplicate tool name: {descriptor.name!r}")
    TOOL_DESCRIPTORS[descriptor.name] = descriptor
    return descriptor


_POINT = frozenset({"latitude", "longitude"})

register_tool(ToolDescriptor(
    name="get_forecast",
    tier=ToolTier.BASIC,
    response_model=ForecastResponse,
    required_params=_POINT,
    optional_params={"days": 7},
    ttl_family="forecast",
))
register_tool(ToolDescriptor(
    name="get_current_conditions",
    tier=ToolTier.BASIC,
    response_model=CurrentConditionsResponse,
    required_params=_POINT,
    region=Region.US,
    ttl_family="current",
))
register_tool(ToolDescriptor(
    name="search_location",
    tier=ToolTier.BASIC,
    response_model=LocationSearchResponse,
    required_params=frozenset({"query"}),
    ttl_family="location",
))
register_tool(ToolDescriptor(
    name="get_alerts",
    tier=ToolTier.BASIC,
    response_model=AlertsResponse,
    required_params=_POINT,
    region=Region.US,
    ttl_family="alerts",
))
register_tool(ToolDescriptor(
    name="check_service_status",
    tier=ToolTier.BASIC,
    response_model=ServiceStatusResponse,
))
register_tool(ToolDescriptor(
    name="get_historical_weather",
    tier=ToolTier.STANDARD,
    response_model=HistoricalWeatherResponse,
    required_params=_POINT | {"start_date", "end_date"},
    ttl_family="historical",
))
register_tool(ToolDescriptor(
    name="get_air_quality",
    tier=ToolTier.FULL,
    response_model=AirQualityResponse,
    required_params=_POINT,
    ttl_family="air_quality",
))
register_tool(ToolDescriptor(
    name="get_marine_conditions",
    tier=ToolTier.FULL,
    response_model=MarineConditionsResponse,
    required_params=_POINT,
    ttl_family="marine",
))
register_tool(ToolDescriptor(
    name="get_weather_imagery",
    tier=ToolTier.FULL,
    response_model=WeatherImageryResponse,
    required_params=_POINT,
    ttl_family="imagery",
))
register_tool(ToolDescriptor(
    name="get_lightning_activity",
    tier=ToolTier.FULL,
    response_model=LightningActivityResponse,
    required_params=_POINT,
    ttl_family="lightning",
))
register_tool(ToolDescriptor(
    name="get_river_conditions",
    tier=ToolTier.ALL,
    response_model=RiverConditionsResponse,
    required_params=_POINT,
    ttl_family="river",
))
register_tool(ToolDescriptor(
    name="get_wildfire_info",
    tier=ToolTier.ALL,
    response_model=WildfireInfoResponse,
    required_params=_POINT,
    ttl_family="wildfire",
))


@dataclass(frozen=True, slots=True)
class ToolSelection:
    """Parsed ENABLED_TOOLS value: a tier plus explicit per-tool overrides.

    "full" enables every tool up to the full tier; "basic,+get_air_quality,-get_alerts"
    enables the basic tier, adds get_air_quality and removes get_alerts.
    """

    tier: ToolTier
    added: frozenset[str] = frozenset()
    removed: frozenset[str] = frozenset()

    @classmethod
    def parse(cls, value: str) -> ToolSelection:
        parts = [p.strip() for p in value.split(",") if p.strip()]
        if not parts:
            raise ValueError("ENABLED_TOOLS is empty")

        tier = ToolTier.parse(parts[0])
        added: set[str] = set()
        removed: set[str] = set()
        for part in parts[1:]:
            sign, name = part[0], part[1:].strip()
            if sign not in "+-" or not name:
                raise ValueError(f"Invalid ENABLED_TOOLS override {part!r} (expected +tool or -tool)")
            if name not in TOOL_DESCRIPTORS:
                raise ValueError(f"Unknown tool in ENABLED_TOOLS: {name!r}")
            if sign == "+":
                added.add(name)
                removed.discard(name)
            else:
                removed.add(name)
                added.discard(name)

        return cls(tier=tier, added=frozenset(added), removed=frozenset(removed))

    def allows(self, descriptor: ToolDescriptor) -> bool:
        if descriptor.name in self.removed:
            return False
        if descriptor.name in self.added:
            return True
        return descriptor.tier <= self.tier

    def enabled_names(self) -> list[str]:
        return [name for name, d in TOOL_DESCRIPTORS.items() if self.allows(d)]

    def __str__(self) -> str:
        overrides = [f"+{n}" for n in sorted(self.added)] + [f"-{n}" for n in sorted(self.removed)]
        return ",".join([self.tier.name.lower(), *overrides])
