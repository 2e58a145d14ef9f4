"""
Open-Meteo API HTTP client.

One adapter for all Open-Meteo hosts (all keyless):
- GET api.open-meteo.com/v1/forecast              (forecast, lightning, fire weather)
- GET archive-api.open-meteo.com/v1/archive       (historical reanalysis)
- GET air-quality-api.open-meteo.com/v1/air-quality
- GET marine-api.open-meteo.com/v1/marine
- GET flood-api.open-meteo.com/v1/flood           (GloFAS river discharge)
- GET geocoding-api.open-meteo.com/v1/search      (location search)

All values are requested in metric units (°C, km/h, mm).
"""

from loguru import logger

from weather_mcp.clients.base_client import UpstreamClient

BASE_URL = "https://api.open-meteo.com"
ARCHIVE_URL = "https://archive-api.open-meteo.com/v1/archive"
AIR_QUALITY_URL = "https://air-quality-api.open-meteo.com/v1/air-quality"
MARINE_URL = "https://marine-api.open-meteo.com/v1/marine"
FLOOD_URL = "https://flood-api.open-meteo.com/v1/flood"
GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"


def _join(variables: list[str] | None) -> str | None:
    return ",".join(variables) if variables else None


def _point_params(latitude: float, longitude: float, **extra) -> dict:
    params = {"latitude": latitude, "longitude": longitude, **extra}
    return {k: v for k, v in params.items() if v is not None}


class OpenMeteoClient(UpstreamClient):
    """Async client for the Open-Meteo family of APIs."""

    name = "open-meteo"

    def __init__(self, **kwargs) -> None:
        super().__init__(base_url=BASE_URL, **kwargs)

    async def geocode(self, name: str, count: int = 10, language: str = "en") -> list[dict]:
        """Search places by name; returns raw result dicts, best first."""
        logger.debug(f"Geocode: name={name!r}, count={count}")
        data = await self.fetch(
            GEOCODING_URL,
            params={"name": name, "count": min(count, 100), "language": language, "format": "json"},
        )
        return data.get("results") or []

    async def get_forecast(
        self,
        latitude: float,
        longitude: float,
        daily: list[str] | None = None,
        hourly: list[str] | None = None,
        forecast_days: int | None = None,
        forecast_hours: int | None = None,
    ) -> dict:
        """Get forecast variables for a location (up to 16 days)."""
        logger.debug(
            f"Forecast: lat={latitude}, lon={longitude}, days={forecast_days}, hours={forecast_hours}"
        )
        return await self.fetch(
            "/v1/forecast",
            params=_point_params(
                latitude,
                longitude,
                daily=_join(daily),
                hourly=_join(hourly),
                forecast_days=forecast_days,
                forecast_hours=forecast_hours,
                timezone="auto",
            ),
        )

    async def get_archive(
        self,
        latitude: float,
        longitude: float,
        start_date: str,
        end_date: str,
        daily: list[str],
    ) -> dict:
        """Get daily reanalysis records for a past date range."""
        logger.debug(f"Archive: lat={latitude}, lon={longitude}, {start_date}..{end_date}")
        return await self.fetch(
            ARCHIVE_URL,
            params=_point_params(
                latitude,
                longitude,
                start_date=start_date,
                end_date=end_date,
                daily=_join(daily),
                timezone="auto",
            ),
        )

    async def get_air_quality(
        self,
        latitude: float,
        longitude: float,
        current: list[str],
    ) -> dict:
        """Get current air-quality indices and pollutant concentrations."""
        logger.debug(f"Air quality: lat={latitude}, lon={longitude}")
        return await self.fetch(
            AIR_QUALITY_URL,
            params=_point_params(latitude, longitude, current=_join(current), timezone="auto"),
        )

    async def get_marine(
        self,
        latitude: float,
        longitude: float,
        current: list[str],
        daily: list[str],
        forecast_days: int = 7,
    ) -> dict:
        """Get current and daily wave/swell conditions."""
        logger.debug(f"Marine: lat={latitude}, lon={longitude}")
        return await self.fetch(
            MARINE_URL,
            params=_point_params(
                latitude,
                longitude,
                current=_join(current),
                daily=_join(daily),
                forecast_days=forecast_days,
                timezone="auto",
            ),
        )

    async def get_flood(
        self,
        latitude: float,
        longitude: float,
        daily: list[str],
        forecast_days: int = 14,
    ) -> dict:
        """Get modelled daily river discharge for the nearest river cell."""
        logger.debug(f"Flood: lat={latitude}, lon={longitude}, days={forecast_days}")
        return await self.fetch(
            FLOOD_URL,
            params=_point_params(
                latitude,
                longitude,
                daily=_join(daily),
                forecast_days=forecast_days,
            ),
        )
