"""Pydantic response models for air quality, marine, imagery and hazard tools."""

from pydantic import BaseModel, Field


class AirQualityResponse(BaseModel):
    latitude: float = Field(description="Latitude of the grid point.")
    longitude: float = Field(description="Longitude of the grid point.")
    observation_time: str | None = Field(None, description="Timestamp of the values.")
    us_aqi: float | None = Field(None, description="United States Air Quality Index.")
    us_aqi_category: str | None = Field(None, description="US AQI category (Good ... Hazardous).")
    european_aqi: float | None = Field(None, description="European Air Quality Index.")
    pm2_5: float | None = Field(None, description="Fine particulate matter (μg/m³).")
    pm10: float | None = Field(None, description="Coarse particulate matter (μg/m³).")
    ozone: float | None = Field(None, description="Ozone (μg/m³).")
    nitrogen_dioxide: float | None = Field(None, description="Nitrogen dioxide (μg/m³).")
    sulphur_dioxide: float | None = Field(None, description="Sulphur dioxide (μg/m³).")
    carbon_monoxide: float | None = Field(None, description="Carbon monoxide (μg/m³).")
    uv_index: float | None = Field(None, description="UV index.")
    source: str = Field("Open-Meteo Air Quality", description="Upstream data provider.")


class MarineDay(BaseModel):
    date: str = Field(description="Date (YYYY-MM-DD).")
    wave_height_max_m: float | None = Field(None, description="Maximum wave height (m).")
    swell_wave_height_max_m: float | None = Field(None, description="Maximum swell height (m).")
    wave_period_max_s: float | None = Field(None, description="Maximum wave period (s).")


class MarineConditionsResponse(BaseModel):
    latitude: float = Field(description="Latitude of the grid point.")
    longitude: float = Field(description="Longitude of the grid point.")
    observation_time: str | None = Field(None, description="Timestamp of the current values.")
    wave_height_m: float | None = Field(None, description="Significant wave height (m).")
    wave_direction_degrees: float | None = Field(None, description="Mean wave direction in degrees.")
    wave_period_s: float | None = Field(None, description="Mean wave period (s).")
    swell_wave_height_m: float | None = Field(None, description="Swell wave height (m).")
    swell_wave_direction_degrees: float | None = Field(None, description="Swell direction in degrees.")
    swell_wave_period_s: float | None = Field(None, description="Swell period (s).")
    wind_wave_height_m: float | None = Field(None, description="Wind wave height (m).")
    days: list[MarineDay] = Field(default_factory=list, description="Daily marine outlook.")
    source: str = Field("Open-Meteo Marine", description="Upstream data provider.")


class RadarFrame(BaseModel):
    time: str = Field(description="Frame timestamp (ISO 8601, UTC).")
    kind: str = Field(description="'past' for observed radar, 'nowcast' for extrapolated frames.")
    tile_url: str = Field(description="PNG tile URL covering the requested location.")


class WeatherImageryResponse(BaseModel):
    latitude: float = Field(description="Queried latitude.")
    longitude: float = Field(description="Queried longitude.")
    zoom: int = Field(description="Slippy-map zoom level of the tiles.")
    tile_x: int = Field(description="Tile column containing the location.")
    tile_y: int = Field(description="Tile row containing the location.")
    generated_at: str | None = Field(None, description="When the upstream frame index was generated.")
    latest_frame_url: str | None = Field(None, description="Most recent observed radar tile.")
    frames: list[RadarFrame] = Field(description="Radar frames, oldest first.")
    source: str = Field("RainViewer", description="Upstream data provider.")


class LightningHour(BaseModel):
    time: str = Field(description="Hour (local, ISO 8601).")
    weather_code: int | None = Field(None, description="WMO weather interpretation code.")
    cape_j_per_kg: float | None = Field(None, description="Convective available potential energy (J/kg).")
    lightning_potential_j_per_kg: float | None = Field(None, description="Lightning potential index (J/kg).")
    thunderstorm: bool = Field(description="Whether a thunderstorm is forecast for this hour.")


class LightningActivityResponse(BaseModel):
    latitude: float = Field(description="Latitude of the grid point.")
    longitude: float = Field(description="Longitude of the grid point.")
    timezone: str | None = Field(None, description="Timezone identifier.")
    risk_level: str = Field(description="Lightning risk over the next 24 hours (none, low, moderate, high).")
    max_cape_j_per_kg: float | None = Field(None, description="Peak CAPE over the window.")
    thunderstorm_hours: int = Field(description="Hours with a thunderstorm weather code.")
    hours: list[LightningHour] = Field(description="Hourly outlook for the next 24 hours.")
    source: str = Field("Open-Meteo", description="Upstream data provider.")


class RiverDay(BaseModel):
    date: str = Field(description="Date (YYYY-MM-DD).")
    discharge_m3s: float | None = Field(None, description="Modelled river discharge (m³/s).")
    mean_discharge_m3s: float | None = Field(None, description="Climatological mean discharge (m³/s).")
    max_discharge_m3s: float | None = Field(None, description="Ensemble maximum discharge (m³/s).")
    ratio_to_mean: float | None = Field(None, description="Discharge divided by mean discharge.")


class RiverConditionsResponse(BaseModel):
    latitude: float = Field(description="Latitude of the river grid cell.")
    longitude: float = Field(description="Longitude of the river grid cell.")
    current_discharge_m3s: float | None = Field(None, description="Discharge for today (m³/s).")
    trend: str = Field(description="rising, falling or steady over the outlook.")
    flood_watch: bool = Field(description="Whether any day exceeds twice the mean discharge.")
    days: list[RiverDay] = Field(description="Daily discharge outlook.")
    source: str = Field("Open-Meteo Flood (GloFAS)", description="Upstream data provider.")


class FireWeatherDay(BaseModel):
    date: str = Field(description="Date (YYYY-MM-DD).")
    max_temperature_c: float | None = Field(None, description="Maximum temperature in Celsius.")
    min_humidity_percent: float | None = Field(None, description="Minimum relative humidity.")
    wind_speed_max_kmh: float | None = Field(None, description="Maximum wind speed in km/h.")
    wind_gusts_max_kmh: float | None = Field(None, description="Maximum wind gust in km/h.")
    precipitation_mm: float | None = Field(None, description="Total precipitation (mm).")
    evapotranspiration_mm: float | None = Field(None, description="FAO reference evapotranspiration (mm).")
    danger_score: int = Field(description="Composite fire-weather score (0-12).")
    danger_rating: str = Field(description="low, moderate, high, very high or extreme.")


class WildfireInfoResponse(BaseModel):
    latitude: float = Field(description="Latitude of the grid point.")
    longitude: float = Field(description="Longitude of the grid point.")
    timezone: str | None = Field(None, description="Timezone identifier.")
    peak_danger_rating: str = Field(description="Highest daily danger rating in the outlook.")
    days: list[FireWeatherDay] = Field(description="Daily fire-weather outlook.")
    source: str = Field("Open-Meteo", description="Upstream data provider.")
