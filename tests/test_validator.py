"""Tests for request validation."""

import math
from datetime import date

import pytest

from weather_mcp.errors import (
    InvalidCoordinateError,
    InvalidDateRangeError,
    InvalidParameterError,
    InvalidRangeError,
    NoDataForRegionError,
)
from weather_mcp.gateway.descriptors import TOOL_DESCRIPTORS
from weather_mcp.gateway.validator import (
    in_us_region,
    validate_coordinates,
    validate_date_range,
    validate_days,
    validate_request,
)
from weather_mcp.schemas.location import Coordinate

TODAY = date(2026, 10, 19)


class TestCoordinates:
    @pytest.mark.parametrize(
        "latitude, longitude",
        [
            (0, 0),
            (90, 180),
            (-90, -180),
            (47.6062, -122.3321),
            (-33.8688, 151.2093),
            ("48.8566", "2.3522"),
        ],
    )
    def test_accepts_in_range(self, latitude, longitude):
        coordinate = validate_coordinates(latitude, longitude)
        assert coordinate == Coordinate(latitude=float(latitude), longitude=float(longitude))

    @pytest.mark.parametrize(
        "latitude, longitude",
        [
            (90.0001, 0),
            (-91, 0),
            (0, 180.5),
            (0, -181),
            (math.nan, 0),
            (0, math.inf),
            (-math.inf, 0),
            (10**400, 0),
            (0, -(10**400)),
            (True, 0),
            ("north", 0),
            (None, 0),
        ],
    )
    def test_rejects_out_of_range_or_non_finite(self, latitude, longitude):
        with pytest.raises(InvalidCoordinateError):
            validate_coordinates(latitude, longitude)


class TestDays:
    @pytest.mark.parametrize("days", [1, 7, 16, 16.0, "3"])
    def test_accepts_boundaries(self, days):
        assert validate_days(days) == int(days)

    @pytest.mark.parametrize("days", [0, 17, -1, 100, 2.5, True, "seven"])
    def test_rejects_outside_range(self, days):
        with pytest.raises(InvalidRangeError):
            validate_days(days)


class TestDateRange:
    def test_accepts_past_range(self):
        start, end = validate_date_range("2024-01-01", "2024-01-31", today=TODAY)
        assert (start, end) == (date(2024, 1, 1), date(2024, 1, 31))

    def test_accepts_yesterday_as_end(self):
        _, end = validate_date_range("2026-10-01", "2026-10-18", today=TODAY)
        assert end == date(2026, 10, 18)

    def test_start_after_end_fails(self):
        with pytest.raises(InvalidDateRangeError, match="after"):
            validate_date_range("2024-02-01", "2024-01-01", today=TODAY)

    def test_end_today_fails(self):
        with pytest.raises(InvalidDateRangeError):
            validate_date_range("2026-10-01", "2026-10-19", today=TODAY)

    def test_before_archive_start_fails(self):
        with pytest.raises(InvalidDateRangeError):
            validate_date_range("1939-12-31", "1940-01-05", today=TODAY)

    @pytest.mark.parametrize("value", ["2024-13-01", "yesterday", "01/02/2024", 20240101])
    def test_unparseable_dates_fail(self, value):
        with pytest.raises(InvalidDateRangeError):
            validate_date_range(value, "2024-01-31", today=TODAY)


class TestValidateRequest:
    def test_applies_defaults_and_rounds_coordinates(self):
        params = validate_request(
            TOOL_DESCRIPTORS["get_forecast"],
            {"latitude": 47.606209, "longitude": -122.332071},
        )
        assert params == {"latitude": 47.6062, "longitude": -122.3321, "days": 7}

    def test_unexpected_param_rejected(self):
        with pytest.raises(InvalidParameterError, match="does not accept: units"):
            validate_request(
                TOOL_DESCRIPTORS["get_forecast"],
                {"latitude": 1, "longitude": 2, "units": "imperial"},
            )

    def test_missing_required_param_rejected(self):
        with pytest.raises(InvalidParameterError, match="requires: longitude"):
            validate_request(TOOL_DESCRIPTORS["get_air_quality"], {"latitude": 1})

    def test_blank_query_rejected(self):
        with pytest.raises(InvalidParameterError):
            validate_request(TOOL_DESCRIPTORS["search_location"], {"query": "   "})

    @pytest.mark.parametrize("query", [",", " , ", ", WA", ",,Seattle"])
    def test_query_without_place_name_rejected(self, query):
        with pytest.raises(InvalidParameterError, match="place name"):
            validate_request(TOOL_DESCRIPTORS["search_location"], {"query": query})

    def test_qualified_query_kept(self):
        normalized = validate_request(TOOL_DESCRIPTORS["search_location"], {"query": " Seattle, WA "})
        assert normalized == {"query": "Seattle, WA"}

    def test_historical_inverted_range(self):
        with pytest.raises(InvalidDateRangeError):
            validate_request(
                TOOL_DESCRIPTORS["get_historical_weather"],
                {"latitude": 1, "longitude": 2, "start_date": "2024-03-01", "end_date": "2024-02-01"},
                today=TODAY,
            )

    def test_status_takes_no_params(self):
        assert validate_request(TOOL_DESCRIPTORS["check_service_status"], None) == {}

    @pytest.mark.parametrize("tool", ["get_current_conditions", "get_alerts"])
    def test_us_only_tools_reject_foreign_points(self, tool):
        with pytest.raises(NoDataForRegionError):
            validate_request(TOOL_DESCRIPTORS[tool], {"latitude": 48.8566, "longitude": 2.3522})

    def test_global_tools_accept_foreign_points(self):
        params = validate_request(
            TOOL_DESCRIPTORS["get_air_quality"],
            {"latitude": 48.8566, "longitude": 2.3522},
        )
        assert params["latitude"] == 48.8566


class TestUsRegion:
    @pytest.mark.parametrize(
        "latitude, longitude",
        [
            (47.6062, -122.3321),  # Seattle
            (25.7617, -80.1918),  # Miami
            (61.2181, -149.9003),  # Anchorage
            (21.3069, -157.8583),  # Honolulu
            (18.4655, -66.1057),  # San Juan
            (13.4443, 144.7937),  # Hagåtña
        ],
    )
    def test_inside(self, latitude, longitude):
        assert in_us_region(Coordinate(latitude=latitude, longitude=longitude))

    @pytest.mark.parametrize(
        "latitude, longitude",
        [
            (51.5074, -0.1278),  # London
            (19.4326, -99.1332),  # Mexico City
            (-33.8688, 151.2093),  # Sydney
        ],
    )
    def test_outside(self, latitude, longitude):
        assert not in_us_region(Coordinate(latitude=latitude, longitude=longitude))
