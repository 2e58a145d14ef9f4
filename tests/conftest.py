"""Shared fixtures: a fake upstream behind httpx.MockTransport and sample provider payloads."""

from datetime import date, timedelta

import httpx
import pytest

from weather_mcp.config import Settings


class FakeUpstream:
    """Routes requests by "host/path" to canned responses and records every call."""

    def __init__(self) -> None:
        self.routes: dict[str, object] = {}
        self.calls: list[httpx.Request] = []

    def add(self, route: str, response=None, *, json=None, status: int = 200) -> None:
        """Register a response, a list of responses (served in order), or a callable."""
        if response is None:
            response = lambda request: httpx.Response(status, json=json)
        self.routes[route] = response

    def count(self, route: str) -> int:
        return sum(1 for r in self.calls if f"{r.url.host}{r.url.path}" == route)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get(f"{request.url.host}{request.url.path}")
        if route is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        if isinstance(route, list):
            item = route.pop(0) if len(route) > 1 else route[0]
        else:
            item = route
        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item(request)
        return item

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def make_settings():
    def _make(**overrides) -> Settings:
        values = {"ENABLED_TOOLS": "all", "UPSTREAM_RETRY_BACKOFF_SECONDS": 0}
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


# ---------------------------------------------------------------------------
# Sample provider payloads
# ---------------------------------------------------------------------------


def forecast_payload(days: int = 7) -> dict:
    dates = [(date(2026, 10, 20) + timedelta(days=i)).isoformat() for i in range(days)]
    return {
        "latitude": 47.6,
        "longitude": -122.33,
        "timezone": "America/Los_Angeles",
        "daily": {
            "time": dates,
            "weather_code": [61, 3, 2, 1, 0, 80, 95][:days] + [3] * max(0, days - 7),
            "temperature_2m_max": [14.0 + i * 0.5 for i in range(days)],
            "temperature_2m_min": [7.0 + i * 0.2 for i in range(days)],
            "precipitation_sum": [4.2] + [0.0] * (days - 1),
            "precipitation_probability_max": [80] + [10] * (days - 1),
            "wind_speed_10m_max": [18.4] * days,
            "wind_gusts_10m_max": [33.1] * days,
            "wind_direction_10m_dominant": [200] * days,
            "uv_index_max": [1.5] * days,
            "sunrise": [f"{d}T07:35" for d in dates],
            "sunset": [f"{d}T18:12" for d in dates],
        },
    }


def open_meteo_forecast_route(request: httpx.Request) -> httpx.Response:
    """Honours forecast_days the way api.open-meteo.com does."""
    days = int(request.url.params.get("forecast_days", 7))
    return httpx.Response(200, json=forecast_payload(days))


SEATTLE_GEOCODE = {
    "results": [
        {
            "name": "Seattle",
            "latitude": -27.4,
            "longitude": 152.9,
            "country": "Australia",
            "country_code": "AU",
            "admin1": "Queensland",
        },
        {
            "name": "Seattle",
            "latitude": 47.60621,
            "longitude": -122.33207,
            "elevation": 56.0,
            "country": "United States",
            "country_code": "US",
            "admin1": "Washington",
            "timezone": "America/Los_Angeles",
            "population": 737015,
        },
    ]
}

NWS_POINT = {
    "properties": {
        "gridId": "SEW",
        "observationStations": "https://api.weather.gov/gridpoints/SEW/125,68/stations",
    }
}

NWS_STATIONS = {
    "features": [
        {"properties": {"stationIdentifier": "KBFI", "name": "Seattle, Boeing Field"}},
        {"properties": {"stationIdentifier": "KSEA", "name": "Seattle-Tacoma International Airport"}},
    ]
}

NWS_OBSERVATION = {
    "properties": {
        "timestamp": "2026-10-19T17:53:00+00:00",
        "textDescription": "Light Rain",
        "temperature": {"unitCode": "wmoUnit:degC", "value": 12.2},
        "dewpoint": {"unitCode": "wmoUnit:degC", "value": 9.4},
        "windDirection": {"unitCode": "wmoUnit:degree_(angle)", "value": 200},
        "windSpeed": {"unitCode": "wmoUnit:km_h-1", "value": 9.36},
        "windGust": {"unitCode": "wmoUnit:km_h-1", "value": None},
        "barometricPressure": {"unitCode": "wmoUnit:Pa", "value": 101320},
        "visibility": {"unitCode": "wmoUnit:m", "value": 16090},
        "relativeHumidity": {"unitCode": "wmoUnit:percent", "value": 82.7},
        "heatIndex": {"unitCode": "wmoUnit:degC", "value": None},
        "windChill": {"unitCode": "wmoUnit:degC", "value": 11.3},
        "precipitationLastHour": {"unitCode": "wmoUnit:mm", "value": 0.8},
    }
}

NWS_ALERTS = {
    "features": [
        {
            "properties": {
                "id": "urn:oid:2.49.0.1.840.0.minor",
                "event": "Wind Advisory",
                "headline": "Wind Advisory issued October 19",
                "severity": "Minor",
                "urgency": "Expected",
                "certainty": "Likely",
                "areaDesc": "Seattle and Vicinity",
                "effective": "2026-10-19T15:00:00-07:00",
                "expires": "2026-10-20T03:00:00-07:00",
                "senderName": "NWS Seattle WA",
            }
        },
        {
            "properties": {
                "id": "urn:oid:2.49.0.1.840.0.severe",
                "event": "Flood Warning",
                "headline": "Flood Warning issued October 19",
                "severity": "Severe",
                "urgency": "Immediate",
                "certainty": "Observed",
                "areaDesc": "King County",
                "onset": "2026-10-19T12:00:00-07:00",
                "ends": "2026-10-21T12:00:00-07:00",
                "senderName": "NWS Seattle WA",
            }
        },
    ]
}


@pytest.fixture
def seattle_upstream(upstream: FakeUpstream) -> FakeUpstream:
    """Fake upstream wired with Seattle geocoding, Open-Meteo forecast and NWS routes."""
    upstream.add("geocoding-api.open-meteo.com/v1/search", json=SEATTLE_GEOCODE)
    upstream.add("api.open-meteo.com/v1/forecast", open_meteo_forecast_route)
    upstream.add("api.weather.gov/points/47.6062,-122.3321", json=NWS_POINT)
    upstream.add("api.weather.gov/gridpoints/SEW/125,68/stations", json=NWS_STATIONS)
    upstream.add("api.weather.gov/stations/KBFI/observations/latest", json=NWS_OBSERVATION)
    upstream.add("api.weather.gov/alerts/active", json=NWS_ALERTS)
    return upstream
