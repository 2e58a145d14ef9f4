"""
Tool handlers.

One coroutine per tool: takes the validated, normalized params, calls the
upstream adapter(s) and returns the tool's response model. Handlers know
nothing about gating or caching; the ToolRegistry wraps them.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from loguru import logger
from pydantic import BaseModel

from weather_mcp.clients.base_client import UpstreamClient
from weather_mcp.clients.nws_client import NwsClient
from weather_mcp.clients.open_meteo_client import OpenMeteoClient
from weather_mcp.clients.rainviewer_client import RainViewerClient
from weather_mcp.errors import NoDataForRegionError, UpstreamError
from weather_mcp.gateway.status import StatusReporter
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
from weather_mcp.utils.hazard_formatters import (
    format_air_quality,
    format_imagery,
    format_lightning,
    format_marine,
    format_river,
    format_wildfire,
)
from weather_mcp.utils.location_formatters import format_location_search, rank_locations, split_query
from weather_mcp.utils.weather_formatters import (
    format_alerts,
    format_current_conditions,
    format_forecast,
    format_historical,
)

Handler = Callable[[dict[str, Any]], Awaitable[BaseModel]]

# ---------------------------------------------------------------------------
# Upstream variables per tool
# ---------------------------------------------------------------------------

FORECAST_DAILY = [
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_sum",
    "precipitation_probability_max",
    "wind_speed_10m_max",
    "wind_gusts_10m_max",
    "wind_direction_10m_dominant",
    "uv_index_max",
    "sunrise",
    "sunset",
]

ARCHIVE_DAILY = [
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "temperature_2m_mean",
    "precipitation_sum",
    "snowfall_sum",
    "wind_speed_10m_max",
]

AIR_QUALITY_CURRENT = [
    "us_aqi",
    "european_aqi",
    "pm2_5",
    "pm10",
    "ozone",
    "nitrogen_dioxide",
    "sulphur_dioxide",
    "carbon_monoxide",
    "uv_index",
]

MARINE_CURRENT = [
    "wave_height",
    "wave_direction",
    "wave_period",
    "swell_wave_height",
    "swell_wave_direction",
    "swell_wave_period",
    "wind_wave_height",
]
MARINE_DAILY = ["wave_height_max", "swell_wave_height_max", "wave_period_max"]

LIGHTNING_HOURLY = ["weather_code", "cape", "lightning_potential"]
LIGHTNING_WINDOW_HOURS = 24

RIVER_DAILY = ["river_discharge", "river_discharge_mean", "river_discharge_max"]
RIVER_OUTLOOK_DAYS = 7

FIRE_WEATHER_DAILY = [
    "temperature_2m_max",
    "relative_humidity_2m_min",
    "wind_speed_10m_max",
    "wind_gusts_10m_max",
    "precipitation_sum",
    "et0_fao_evapotranspiration",
]
FIRE_WEATHER_DAYS = 7

# Nearest stations tried before giving up on a usable observation
MAX_OBSERVATION_STATIONS = 3


@dataclass
class UpstreamClients:
    """The provider adapters shared by every handler."""

    nws: NwsClient
    open_meteo: OpenMeteoClient
    rainviewer: RainViewerClient

    def all(self) -> list[UpstreamClient]:
        return [self.nws, self.open_meteo, self.rainviewer]

    async def close(self) -> None:
        await asyncio.gather(*(client.close() for client in self.all()))


class WeatherHandlers:
    """Binds each tool name to a coroutine over the shared upstream clients."""

    def __init__(self, clients: UpstreamClients, status: StatusReporter) -> None:
        self._clients = clients
        self._status = status

    def as_mapping(self) -> dict[str, Handler]:
        return {
            "get_forecast": self.get_forecast,
            "get_current_conditions": self.get_current_conditions,
            "search_location": self.search_location,
            "get_alerts": self.get_alerts,
            "get_historical_weather": self.get_historical_weather,
            "get_air_quality": self.get_air_quality,
            "get_marine_conditions": self.get_marine_conditions,
            "get_weather_imagery": self.get_weather_imagery,
            "get_lightning_activity": self.get_lightning_activity,
            "get_river_conditions": self.get_river_conditions,
            "get_wildfire_info": self.get_wildfire_info,
            "check_service_status": self.check_service_status,
        }

    # ------------------------------------------------------------------
    # Forecast and observations
    # ------------------------------------------------------------------

    async def get_forecast(self, params: dict[str, Any]) -> ForecastResponse:
        data = await self._clients.open_meteo.get_forecast(
            latitude=params["latitude"],
            longitude=params["longitude"],
            daily=FORECAST_DAILY,
            forecast_days=params["days"],
        )
        return format_forecast(data, days=params["days"])

    async def get_current_conditions(self, params: dict[str, Any]) -> CurrentConditionsResponse:
        nws = self._clients.nws
        point = await nws.get_point(params["latitude"], params["longitude"])
        stations_url = (point.get("properties") or {}).get("observationStations")
        if not stations_url:
            raise NoDataForRegionError("NOAA/NWS returned no observation stations for this location")

        stations = await nws.get_observation_stations(stations_url)
        if not stations:
            raise NoDataForRegionError("No NOAA/NWS observation stations near this location")

        # Nearest station first; skip stations with no recent temperature
        fallback = None
        for station in stations[:MAX_OBSERVATION_STATIONS]:
            station_id = (station.get("properties") or {}).get("stationIdentifier")
            if not station_id:
                continue
            try:
                observation = await nws.get_latest_observation(station_id)
            except UpstreamError as e:
                if e.status_code == 404:
                    logger.debug(f"Station {station_id} has no latest observation")
                    continue
                raise

            temperature = ((observation.get("properties") or {}).get("temperature") or {}).get("value")
            if temperature is not None:
                return format_current_conditions(observation, station)
            fallback = fallback or (observation, station)

        if fallback is not None:
            return format_current_conditions(*fallback)
        raise NoDataForRegionError("No recent observations from NOAA/NWS stations near this location")

    async def search_location(self, params: dict[str, Any]) -> LocationSearchResponse:
        name, qualifiers = split_query(params["query"])
        results = await self._clients.open_meteo.geocode(name)
        return format_location_search(params["query"], rank_locations(results, qualifiers))

    async def get_alerts(self, params: dict[str, Any]) -> AlertsResponse:
        data = await self._clients.nws.get_active_alerts(params["latitude"], params["longitude"])
        return format_alerts(data, latitude=params["latitude"], longitude=params["longitude"])

    async def get_historical_weather(self, params: dict[str, Any]) -> HistoricalWeatherResponse:
        data = await self._clients.open_meteo.get_archive(
            latitude=params["latitude"],
            longitude=params["longitude"],
            start_date=params["start_date"],
            end_date=params["end_date"],
            daily=ARCHIVE_DAILY,
        )
        return format_historical(data, start_date=params["start_date"], end_date=params["end_date"])

    # ------------------------------------------------------------------
    # Environment and hazards
    # ------------------------------------------------------------------

    async def get_air_quality(self, params: dict[str, Any]) -> AirQualityResponse:
        data = await self._clients.open_meteo.get_air_quality(
            latitude=params["latitude"],
            longitude=params["longitude"],
            current=AIR_QUALITY_CURRENT,
        )
        return format_air_quality(data)

    async def get_marine_conditions(self, params: dict[str, Any]) -> MarineConditionsResponse:
        data = await self._clients.open_meteo.get_marine(
            latitude=params["latitude"],
            longitude=params["longitude"],
            current=MARINE_CURRENT,
            daily=MARINE_DAILY,
        )
        return format_marine(data)

    async def get_weather_imagery(self, params: dict[str, Any]) -> WeatherImageryResponse:
        data = await self._clients.rainviewer.get_weather_maps()
        return format_imagery(data, latitude=params["latitude"], longitude=params["longitude"])

    async def get_lightning_activity(self, params: dict[str, Any]) -> LightningActivityResponse:
        data = await self._clients.open_meteo.get_forecast(
            latitude=params["latitude"],
            longitude=params["longitude"],
            hourly=LIGHTNING_HOURLY,
            forecast_hours=LIGHTNING_WINDOW_HOURS,
        )
        return format_lightning(data)

    async def get_river_conditions(self, params: dict[str, Any]) -> RiverConditionsResponse:
        data = await self._clients.open_meteo.get_flood(
            latitude=params["latitude"],
            longitude=params["longitude"],
            daily=RIVER_DAILY,
            forecast_days=RIVER_OUTLOOK_DAYS,
        )
        return format_river(data)

    async def get_wildfire_info(self, params: dict[str, Any]) -> WildfireInfoResponse:
        data = await self._clients.open_meteo.get_forecast(
            latitude=params["latitude"],
            longitude=params["longitude"],
            daily=FIRE_WEATHER_DAILY,
            forecast_days=FIRE_WEATHER_DAYS,
        )
        return format_wildfire(data)

    # ------------------------------------------------------------------
    # Service status
    # ------------------------------------------------------------------

    async def check_service_status(self, params: dict[str, Any]) -> ServiceStatusResponse:
        return self._status.snapshot()
