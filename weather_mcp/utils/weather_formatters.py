"""Formatting helpers for forecast, archive, NWS observation and alert responses."""

from weather_mcp.errors import MalformedResponseError
from weather_mcp.schemas.weather import (
    AlertsResponse,
    CurrentConditionsResponse,
    DailyForecast,
    ForecastResponse,
    HistoricalDay,
    HistoricalWeatherResponse,
    WeatherAlert,
    Wind,
)
from weather_mcp.utils.units import cardinal_direction, describe_weather_code, quantity_value

SEVERITY_ORDER = {"Extreme": 0, "Severe": 1, "Moderate": 2, "Minor": 3, "Unknown": 4}


def time_series(data: dict, block: str) -> dict:
    """Return an Open-Meteo time-series block (daily/hourly), or raise if absent."""
    series = data.get(block)
    if not isinstance(series, dict) or not isinstance(series.get("time"), list):
        raise MalformedResponseError(f"Open-Meteo response has no {block!r} time series")
    return series


def column(series: dict, name: str, index: int):
    """Value of a variable at index, None when the variable or the slot is missing."""
    values = series.get(name) or []
    return values[index] if index < len(values) else None


def format_forecast(data: dict, days: int) -> ForecastResponse:
    """Format an Open-Meteo daily forecast into a ForecastResponse model."""
    daily = time_series(data, "daily")

    entries = []
    for i, day in enumerate(daily["time"][:days]):
        code = column(daily, "weather_code", i)
        entries.append(DailyForecast(
            date=day,
            condition=describe_weather_code(code),
            weather_code=code,
            max_temperature_c=column(daily, "temperature_2m_max", i),
            min_temperature_c=column(daily, "temperature_2m_min", i),
            precipitation_mm=column(daily, "precipitation_sum", i),
            precipitation_probability_percent=column(daily, "precipitation_probability_max", i),
            wind_speed_max_kmh=column(daily, "wind_speed_10m_max", i),
            wind_gusts_max_kmh=column(daily, "wind_gusts_10m_max", i),
            wind_direction_degrees=column(daily, "wind_direction_10m_dominant", i),
            uv_index_max=column(daily, "uv_index_max", i),
            sunrise=column(daily, "sunrise", i),
            sunset=column(daily, "sunset", i),
        ))

    return ForecastResponse(
        latitude=data.get("latitude"),
        longitude=data.get("longitude"),
        timezone=data.get("timezone"),
        days=entries,
    )


def format_historical(data: dict, start_date: str, end_date: str) -> HistoricalWeatherResponse:
    """Format an Open-Meteo archive response into a HistoricalWeatherResponse model."""
    daily = time_series(data, "daily")

    entries = []
    for i, day in enumerate(daily["time"]):
        code = column(daily, "weather_code", i)
        entries.append(HistoricalDay(
            date=day,
            condition=describe_weather_code(code),
            weather_code=code,
            max_temperature_c=column(daily, "temperature_2m_max", i),
            min_temperature_c=column(daily, "temperature_2m_min", i),
            mean_temperature_c=column(daily, "temperature_2m_mean", i),
            precipitation_mm=column(daily, "precipitation_sum", i),
            snowfall_cm=column(daily, "snowfall_sum", i),
            wind_speed_max_kmh=column(daily, "wind_speed_10m_max", i),
        ))

    return HistoricalWeatherResponse(
        latitude=data.get("latitude"),
        longitude=data.get("longitude"),
        timezone=data.get("timezone"),
        start_date=start_date,
        end_date=end_date,
        days=entries,
    )


def format_current_conditions(observation: dict, station: dict) -> CurrentConditionsResponse:
    """Format an NWS latest observation into a CurrentConditionsResponse model.

    Args:
        observation: GeoJSON feature from /stations/{id}/observations/latest.
        station: GeoJSON feature of the station, from the grid point station list.
    """
    props = observation.get("properties") or {}
    station_props = station.get("properties") or {}

    wind_direction = quantity_value(props.get("windDirection"), "degree_(angle)", digits=0)
    feels_like = (
        quantity_value(props.get("heatIndex"), "degC")
        if (props.get("heatIndex") or {}).get("value") is not None
        else quantity_value(props.get("windChill"), "degC")
    )

    return CurrentConditionsResponse(
        station_id=station_props.get("stationIdentifier"),
        station_name=station_props.get("name"),
        observation_time=props.get("timestamp"),
        condition=props.get("textDescription") or None,
        temperature_c=quantity_value(props.get("temperature"), "degC"),
        dew_point_c=quantity_value(props.get("dewpoint"), "degC"),
        feels_like_c=feels_like,
        humidity_percent=quantity_value(props.get("relativeHumidity"), "percent", digits=0),
        wind=Wind(
            speed_kmh=quantity_value(props.get("windSpeed"), "km_h-1"),
            direction_degrees=wind_direction,
            direction_cardinal=cardinal_direction(wind_direction),
            gust_kmh=quantity_value(props.get("windGust"), "km_h-1"),
        ),
        pressure_hpa=(
            quantity_value(props.get("barometricPressure"), "hPa")
            or quantity_value(props.get("seaLevelPressure"), "hPa")
        ),
        visibility_km=quantity_value(props.get("visibility"), "km"),
        precipitation_last_hour_mm=quantity_value(props.get("precipitationLastHour"), "mm"),
    )


def format_alerts(data: dict, latitude: float, longitude: float) -> AlertsResponse:
    """Format NWS active alerts into an AlertsResponse model, most severe first."""
    alerts = []
    for feature in data.get("features") or []:
        props = feature.get("properties") or {}
        alerts.append(WeatherAlert(
            id=props.get("id") or feature.get("id"),
            event=props.get("event"),
            headline=props.get("headline"),
            severity=props.get("severity"),
            urgency=props.get("urgency"),
            certainty=props.get("certainty"),
            area=props.get("areaDesc"),
            onset=props.get("onset") or props.get("effective"),
            expires=props.get("ends") or props.get("expires"),
            sender=props.get("senderName"),
            description=props.get("description"),
            instruction=props.get("instruction"),
        ))

    alerts.sort(key=lambda a: SEVERITY_ORDER.get(a.severity or "Unknown", len(SEVERITY_ORDER)))
    return AlertsResponse(
        latitude=latitude,
        longitude=longitude,
        count=len(alerts),
        alerts=alerts,
    )
