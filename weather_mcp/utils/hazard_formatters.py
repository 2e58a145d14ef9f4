"""Formatting helpers for air quality, marine, radar, lightning, river and fire-weather responses."""

import math
from datetime import datetime, timezone

from weather_mcp.errors import MalformedResponseError, NoDataForRegionError
from weather_mcp.schemas.hazards import (
    AirQualityResponse,
    FireWeatherDay,
    LightningActivityResponse,
    LightningHour,
    MarineConditionsResponse,
    MarineDay,
    RadarFrame,
    RiverConditionsResponse,
    RiverDay,
    WeatherImageryResponse,
    WildfireInfoResponse,
)
from weather_mcp.utils.units import THUNDERSTORM_CODES
from weather_mcp.utils.weather_formatters import column, time_series

# ---------------------------------------------------------------------------
# Air quality
# ---------------------------------------------------------------------------

US_AQI_CATEGORIES = [
    (50, "Good"),
    (100, "Moderate"),
    (150, "Unhealthy for Sensitive Groups"),
    (200, "Unhealthy"),
    (300, "Very Unhealthy"),
]


def us_aqi_category(aqi: float | None) -> str | None:
    if aqi is None:
        return None
    for upper, label in US_AQI_CATEGORIES:
        if aqi <= upper:
            return label
    return "Hazardous"


def format_air_quality(data: dict) -> AirQualityResponse:
    """Format Open-Meteo current air quality into an AirQualityResponse model."""
    current = data.get("current")
    if not isinstance(current, dict):
        raise MalformedResponseError("Open-Meteo air-quality response has no 'current' block")

    return AirQualityResponse(
        latitude=data.get("latitude"),
        longitude=data.get("longitude"),
        observation_time=current.get("time"),
        us_aqi=current.get("us_aqi"),
        us_aqi_category=us_aqi_category(current.get("us_aqi")),
        european_aqi=current.get("european_aqi"),
        pm2_5=current.get("pm2_5"),
        pm10=current.get("pm10"),
        ozone=current.get("ozone"),
        nitrogen_dioxide=current.get("nitrogen_dioxide"),
        sulphur_dioxide=current.get("sulphur_dioxide"),
        carbon_monoxide=current.get("carbon_monoxide"),
        uv_index=current.get("uv_index"),
    )


# ---------------------------------------------------------------------------
# Marine
# ---------------------------------------------------------------------------


def format_marine(data: dict) -> MarineConditionsResponse:
    """Format Open-Meteo marine data; inland points come back all-null."""
    current = data.get("current") or {}
    daily = time_series(data, "daily")

    days = [
        MarineDay(
            date=day,
            wave_height_max_m=column(daily, "wave_height_max", i),
            swell_wave_height_max_m=column(daily, "swell_wave_height_max", i),
            wave_period_max_s=column(daily, "wave_period_max", i),
        )
        for i, day in enumerate(daily["time"])
    ]

    has_current = any(v is not None for k, v in current.items() if k not in ("time", "interval"))
    has_daily = any(d.wave_height_max_m is not None for d in days)
    if not has_current and not has_daily:
        raise NoDataForRegionError(
            f"No marine data for ({data.get('latitude')}, {data.get('longitude')}); "
            "the location is not over open water"
        )

    return MarineConditionsResponse(
        latitude=data.get("latitude"),
        longitude=data.get("longitude"),
        observation_time=current.get("time"),
        wave_height_m=current.get("wave_height"),
        wave_direction_degrees=current.get("wave_direction"),
        wave_period_s=current.get("wave_period"),
        swell_wave_height_m=current.get("swell_wave_height"),
        swell_wave_direction_degrees=current.get("swell_wave_direction"),
        swell_wave_period_s=current.get("swell_wave_period"),
        wind_wave_height_m=current.get("wind_wave_height"),
        days=days,
    )


# ---------------------------------------------------------------------------
# Radar imagery
# ---------------------------------------------------------------------------

RADAR_ZOOM = 6
RADAR_TILE_SIZE = 256
RADAR_COLOR_SCHEME = 2
MAX_MERCATOR_LATITUDE = 85.05112878


def tile_for(latitude: float, longitude: float, zoom: int) -> tuple[int, int]:
    """Slippy-map (Web Mercator) tile containing the coordinate."""
    n = 2 ** zoom
    lat = max(-MAX_MERCATOR_LATITUDE, min(MAX_MERCATOR_LATITUDE, latitude))
    lat_rad = math.radians(lat)
    x = int((longitude + 180.0) / 360.0 * n)
    y = int((1.0 - math.asinh(math.tan(lat_rad)) / math.pi) / 2.0 * n)
    return min(max(x, 0), n - 1), min(max(y, 0), n - 1)


def _iso(timestamp: int | None) -> str | None:
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


def format_imagery(data: dict, latitude: float, longitude: float) -> WeatherImageryResponse:
    """Format the RainViewer frame index into tile URLs for the location."""
    host = data.get("host")
    radar = data.get("radar")
    if not host or not isinstance(radar, dict):
        raise MalformedResponseError("RainViewer response has no radar frame index")

    x, y = tile_for(latitude, longitude, RADAR_ZOOM)

    def tile_url(path: str) -> str:
        return f"{host}{path}/{RADAR_TILE_SIZE}/{RADAR_ZOOM}/{x}/{y}/{RADAR_COLOR_SCHEME}/1_1.png"

    frames = [
        RadarFrame(time=_iso(frame["time"]), kind=kind, tile_url=tile_url(frame["path"]))
        for kind in ("past", "nowcast")
        for frame in radar.get(kind) or []
        if frame.get("path") and frame.get("time") is not None
    ]
    past = [f for f in frames if f.kind == "past"]

    return WeatherImageryResponse(
        latitude=latitude,
        longitude=longitude,
        zoom=RADAR_ZOOM,
        tile_x=x,
        tile_y=y,
        generated_at=_iso(data.get("generated")),
        latest_frame_url=past[-1].tile_url if past else None,
        frames=frames,
    )


# ---------------------------------------------------------------------------
# Lightning
# ---------------------------------------------------------------------------

HIGH_CAPE = 1000.0
LOW_CAPE = 300.0


def lightning_risk(thunderstorm_hours: int, max_cape: float | None, max_lpi: float | None) -> str:
    cape = max_cape or 0.0
    if thunderstorm_hours and cape >= HIGH_CAPE:
        return "high"
    if thunderstorm_hours or cape >= HIGH_CAPE or (max_lpi or 0.0) > 0:
        return "moderate"
    if cape >= LOW_CAPE:
        return "low"
    return "none"


def format_lightning(data: dict) -> LightningActivityResponse:
    """Format Open-Meteo hourly convective variables into a lightning outlook."""
    hourly = time_series(data, "hourly")

    hours = []
    for i, hour in enumerate(hourly["time"]):
        code = column(hourly, "weather_code", i)
        hours.append(LightningHour(
            time=hour,
            weather_code=code,
            cape_j_per_kg=column(hourly, "cape", i),
            lightning_potential_j_per_kg=column(hourly, "lightning_potential", i),
            thunderstorm=code in THUNDERSTORM_CODES,
        ))

    capes = [h.cape_j_per_kg for h in hours if h.cape_j_per_kg is not None]
    lpis = [h.lightning_potential_j_per_kg for h in hours if h.lightning_potential_j_per_kg is not None]
    thunderstorm_hours = sum(1 for h in hours if h.thunderstorm)
    max_cape = max(capes) if capes else None

    return LightningActivityResponse(
        latitude=data.get("latitude"),
        longitude=data.get("longitude"),
        timezone=data.get("timezone"),
        risk_level=lightning_risk(thunderstorm_hours, max_cape, max(lpis) if lpis else None),
        max_cape_j_per_kg=max_cape,
        thunderstorm_hours=thunderstorm_hours,
        hours=hours,
    )


# ---------------------------------------------------------------------------
# River discharge
# ---------------------------------------------------------------------------

FLOOD_WATCH_RATIO = 2.0
TREND_THRESHOLD = 0.10


def discharge_trend(values: list[float]) -> str:
    if len(values) < 2 or values[0] == 0:
        return "steady"
    change = (values[-1] - values[0]) / values[0]
    if change > TREND_THRESHOLD:
        return "rising"
    if change < -TREND_THRESHOLD:
        return "falling"
    return "steady"


def format_river(data: dict) -> RiverConditionsResponse:
    """Format Open-Meteo flood (GloFAS) discharge into a river outlook."""
    daily = time_series(data, "daily")

    days = []
    for i, day in enumerate(daily["time"]):
        discharge = column(daily, "river_discharge", i)
        mean = column(daily, "river_discharge_mean", i)
        days.append(RiverDay(
            date=day,
            discharge_m3s=discharge,
            mean_discharge_m3s=mean,
            max_discharge_m3s=column(daily, "river_discharge_max", i),
            ratio_to_mean=round(discharge / mean, 2) if discharge is not None and mean else None,
        ))

    discharges = [d.discharge_m3s for d in days if d.discharge_m3s is not None]
    if not discharges:
        raise NoDataForRegionError(
            f"No modelled river near ({data.get('latitude')}, {data.get('longitude')})"
        )

    return RiverConditionsResponse(
        latitude=data.get("latitude"),
        longitude=data.get("longitude"),
        current_discharge_m3s=days[0].discharge_m3s,
        trend=discharge_trend(discharges),
        flood_watch=any((d.ratio_to_mean or 0.0) >= FLOOD_WATCH_RATIO for d in days),
        days=days,
    )


# ---------------------------------------------------------------------------
# Fire weather
# ---------------------------------------------------------------------------

DANGER_RATINGS = [
    (2, "low"),
    (5, "moderate"),
    (8, "high"),
    (10, "very high"),
    (12, "extreme"),
]


def _band(value: float | None, thresholds: tuple[float, float, float], descending: bool = False) -> int:
    """0-3 points depending on how many thresholds the value crosses."""
    if value is None:
        return 0
    if descending:
        return sum(1 for t in thresholds if value <= t)
    return sum(1 for t in thresholds if value >= t)


def fire_danger_score(
    max_temperature_c: float | None,
    min_humidity_percent: float | None,
    wind_speed_max_kmh: float | None,
    precipitation_mm: float | None,
    evapotranspiration_mm: float | None,
) -> int:
    """Composite 0-12 score from heat, dryness of air, wind and fuel drying."""
    score = _band(max_temperature_c, (25.0, 30.0, 35.0))
    score += _band(min_humidity_percent, (35.0, 25.0, 15.0), descending=True)
    score += _band(wind_speed_max_kmh, (20.0, 30.0, 40.0))
    if precipitation_mm is not None and precipitation_mm < 1.0:
        score += 1 + _band(evapotranspiration_mm, (4.0, 6.0, math.inf))
    return score


def danger_rating(score: int) -> str:
    for upper, label in DANGER_RATINGS:
        if score <= upper:
            return label
    return "extreme"


def format_wildfire(data: dict) -> WildfireInfoResponse:
    """Format Open-Meteo daily fire-weather inputs into a danger outlook."""
    daily = time_series(data, "daily")

    days = []
    for i, day in enumerate(daily["time"]):
        values = {
            "max_temperature_c": column(daily, "temperature_2m_max", i),
            "min_humidity_percent": column(daily, "relative_humidity_2m_min", i),
            "wind_speed_max_kmh": column(daily, "wind_speed_10m_max", i),
            "precipitation_mm": column(daily, "precipitation_sum", i),
            "evapotranspiration_mm": column(daily, "et0_fao_evapotranspiration", i),
        }
        score = fire_danger_score(**values)
        days.append(FireWeatherDay(
            date=day,
            wind_gusts_max_kmh=column(daily, "wind_gusts_10m_max", i),
            danger_score=score,
            danger_rating=danger_rating(score),
            **values,
        ))

    peak = max(days, key=lambda d: d.danger_score) if days else None
    return WildfireInfoResponse(
        latitude=data.get("latitude"),
        longitude=data.get("longitude"),
        timezone=data.get("timezone"),
        peak_danger_rating=peak.danger_rating if peak else "low",
        days=days,
    )
