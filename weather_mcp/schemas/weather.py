"""Pydantic response models for forecast, observation, archive and alert tools."""

from pydantic import BaseModel, Field


class Wind(BaseModel):
    speed_kmh: float | None = Field(None, description="Sustained wind speed in km/h.")
    direction_degrees: float | None = Field(None, description="Wind direction in degrees (meteorological).")
    direction_cardinal: str | None = Field(None, description="Wind direction as cardinal (e.g. NW).")
    gust_kmh: float | None = Field(None, description="Wind gust speed in km/h.")


class CurrentConditionsResponse(BaseModel):
    station_id: str | None = Field(None, description="NWS observation station identifier.")
    station_name: str | None = Field(None, description="Observation station display name.")
    observation_time: str | None = Field(None, description="Timestamp of the observation.")
    condition: str | None = Field(None, description="Weather condition description.")
    temperature_c: float | None = Field(None, description="Air temperature in Celsius.")
    dew_point_c: float | None = Field(None, description="Dew point temperature in Celsius.")
    feels_like_c: float | None = Field(None, description="Heat index or wind chill in Celsius.")
    humidity_percent: float | None = Field(None, description="Relative humidity percentage.")
    wind: Wind | None = Field(None, description="Wind conditions.")
    pressure_hpa: float | None = Field(None, description="Barometric pressure in hectopascals.")
    visibility_km: float | None = Field(None, description="Visibility in kilometres.")
    precipitation_last_hour_mm: float | None = Field(None, description="Precipitation in the last hour (mm).")
    source: str = Field("NOAA/NWS", description="Upstream data provider.")


class DailyForecast(BaseModel):
    date: str = Field(description="Forecast date (YYYY-MM-DD).")
    condition: str | None = Field(None, description="Weather condition description.")
    weather_code: int | None = Field(None, description="WMO weather interpretation code.")
    max_temperature_c: float | None = Field(None, description="Maximum temperature in Celsius.")
    min_temperature_c: float | None = Field(None, description="Minimum temperature in Celsius.")
    precipitation_mm: float | None = Field(None, description="Total precipitation (mm).")
    precipitation_probability_percent: float | None = Field(None, description="Max precipitation probability (0-100).")
    wind_speed_max_kmh: float | None = Field(None, description="Maximum wind speed in km/h.")
    wind_gusts_max_kmh: float | None = Field(None, description="Maximum wind gust in km/h.")
    wind_direction_degrees: float | None = Field(None, description="Dominant wind direction in degrees.")
    uv_index_max: float | None = Field(None, description="Maximum UV index.")
    sunrise: str | None = Field(None, description="Sunrise time (local).")
    sunset: str | None = Field(None, description="Sunset time (local).")


class ForecastResponse(BaseModel):
    latitude: float = Field(description="Latitude of the forecast grid point.")
    longitude: float = Field(description="Longitude of the forecast grid point.")
    timezone: str | None = Field(None, description="Timezone identifier.")
    days: list[DailyForecast] = Field(description="Daily forecast entries.")
    source: str = Field("Open-Meteo", description="Upstream data provider.")


class HistoricalDay(BaseModel):
    date: str = Field(description="Observation date (YYYY-MM-DD).")
    condition: str | None = Field(None, description="Weather condition description.")
    weather_code: int | None = Field(None, description="WMO weather interpretation code.")
    max_temperature_c: float | None = Field(None, description="Maximum temperature in Celsius.")
    min_temperature_c: float | None = Field(None, description="Minimum temperature in Celsius.")
    mean_temperature_c: float | None = Field(None, description="Mean temperature in Celsius.")
    precipitation_mm: float | None = Field(None, description="Total precipitation (mm).")
    snowfall_cm: float | None = Field(None, description="Total snowfall (cm).")
    wind_speed_max_kmh: float | None = Field(None, description="Maximum wind speed in km/h.")


class HistoricalWeatherResponse(BaseModel):
    latitude: float = Field(description="Latitude of the archive grid point.")
    longitude: float = Field(description="Longitude of the archive grid point.")
    timezone: str | None = Field(None, description="Timezone identifier.")
    start_date: str = Field(description="First day of the range (YYYY-MM-DD).")
    end_date: str = Field(description="Last day of the range (YYYY-MM-DD).")
    days: list[HistoricalDay] = Field(description="Daily archive records.")
    source: str = Field("Open-Meteo Archive", description="Upstream data provider.")


class WeatherAlert(BaseModel):
    id: str | None = Field(None, description="Alert identifier.")
    event: str | None = Field(None, description="Alert event type (e.g. Winter Storm Warning).")
    headline: str | None = Field(None, description="Alert headline.")
    severity: str | None = Field(None, description="Severity (Extreme, Severe, Moderate, Minor, Unknown).")
    urgency: str | None = Field(None, description="Urgency (Immediate, Expected, Future, ...).")
    certainty: str | None = Field(None, description="Certainty (Observed, Likely, Possible, ...).")
    area: str | None = Field(None, description="Affected area description.")
    onset: str | None = Field(None, description="When the hazard begins.")
    expires: str | None = Field(None, description="When the alert expires.")
    sender: str | None = Field(None, description="Issuing office.")
    description: str | None = Field(None, description="Full alert text.")
    instruction: str | None = Field(None, description="Recommended actions.")


class AlertsResponse(BaseModel):
    latitude: float = Field(description="Queried latitude.")
    longitude: float = Field(description="Queried longitude.")
    count: int = Field(description="Number of active alerts.")
    alerts: list[WeatherAlert] = Field(description="Active alerts, most severe first.")
    source: str = Field("NOAA/NWS", description="Upstream data provider.")
