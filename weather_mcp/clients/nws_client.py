"""
NOAA / National Weather Service API HTTP client.

Wraps the endpoints behind the US-only tools:
- GET /points/{lat},{lon}                      (grid metadata, station list URL)
- GET {observationStations}                    (stations near a grid point)
- GET /stations/{id}/observations/latest       (latest observation)
- GET /alerts/active?point={lat},{lon}         (active alerts)

api.weather.gov is keyless but rejects requests without a User-Agent.
"""

from loguru import logger

from weather_mcp.clients.base_client import UpstreamClient
from weather_mcp.errors import NoDataForRegionError, UpstreamError

BASE_URL = "https://api.weather.gov"


def _format_point(latitude: float, longitude: float) -> str:
    """NWS redirects points with more than 4 decimals or trailing zeros."""
    lat = f"{latitude:.4f}".rstrip("0").rstrip(".")
    lon = f"{longitude:.4f}".rstrip("0").rstrip(".")
    return f"{lat},{lon}"


class NwsClient(UpstreamClient):
    """Async client for api.weather.gov."""

    name = "nws"

    def __init__(self, user_agent: str, **kwargs) -> None:
        if not user_agent:
            raise ValueError("NWS_USER_AGENT is not set.")
        super().__init__(
            base_url=BASE_URL,
            headers={
                "User-Agent": user_agent,
                "Accept": "application/geo+json",
            },
            **kwargs,
        )

    async def get_point(self, latitude: float, longitude: float) -> dict:
        """Resolve a coordinate to its NWS grid point metadata."""
        point = _format_point(latitude, longitude)
        logger.debug(f"NWS point lookup: {point}")
        try:
            return await self.fetch(f"/points/{point}")
        except UpstreamError as e:
            if e.status_code == 404:
                raise NoDataForRegionError(
                    f"NOAA/NWS has no forecast grid for {point}; it only covers the United States"
                ) from e
            raise

    async def get_observation_stations(self, stations_url: str) -> list[dict]:
        """List observation stations for a grid point, nearest first."""
        data = await self.fetch(stations_url)
        return data.get("features") or []

    async def get_latest_observation(self, station_id: str) -> dict:
        """Get the latest observation reported by a station."""
        logger.debug(f"NWS latest observation: station={station_id}")
        return await self.fetch(f"/stations/{station_id}/observations/latest")

    async def get_active_alerts(self, latitude: float, longitude: float) -> dict:
        """Get active alerts whose area contains the coordinate."""
        point = _format_point(latitude, longitude)
        logger.debug(f"NWS active alerts: {point}")
        return await self.fetch("/alerts/active", params={"point": point})
