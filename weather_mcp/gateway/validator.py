"""
Request validation.

Checks a tool request against its descriptor before anything touches the
cache or an upstream: parameter names, coordinate bounds, forecast length,
archive date ranges and regional coverage. Returns the normalized
parameters that the cache key and the handlers are built from.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Any

from weather_mcp.errors import (
    InvalidCoordinateError,
    InvalidDateRangeError,
    InvalidParameterError,
    InvalidRangeError,
    NoDataForRegionError,
)
from weather_mcp.gateway.descriptors import Region, ToolDescriptor
from weather_mcp.schemas.location import Coordinate

MIN_FORECAST_DAYS = 1
MAX_FORECAST_DAYS = 16

# Earliest day covered by the ERA5 reanalysis archive
ARCHIVE_START = date(1940, 1, 1)

# Coordinates are rounded before keying the cache (~11 m at the equator)
COORDINATE_PRECISION = 4

# (south, north, west, east) boxes covered by NWS products
US_REGIONS: dict[str, tuple[float, float, float, float]] = {
    "contiguous_us": (24.0, 49.5, -125.0, -66.5),
    "alaska": (51.0, 71.5, -180.0, -129.0),
    "aleutians_west": (51.0, 55.0, 172.0, 180.0),
    "hawaii": (18.5, 22.5, -160.5, -154.5),
    "puerto_rico_usvi": (17.5, 18.6, -67.5, -64.5),
    "guam_northern_marianas": (13.0, 20.7, 144.5, 146.1),
    "american_samoa": (-14.8, -11.0, -171.2, -168.0),
}


def in_us_region(coordinate: Coordinate) -> bool:
    """Return True when the coordinate falls inside any NWS coverage box."""
    for south, north, west, east in US_REGIONS.values():
        if south <= coordinate.latitude <= north and west <= coordinate.longitude <= east:
            return True
    return False


def _as_number(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise InvalidCoordinateError(f"{name} must be a number, got a boolean")
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            raise InvalidCoordinateError(f"{name} is out of range, got an integer too large for a float") from None
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            pass
    raise InvalidCoordinateError(f"{name} must be a number, got {value!r}")


def validate_coordinates(latitude: Any, longitude: Any) -> Coordinate:
    """Validate a latitude/longitude pair and return it as a Coordinate."""
    lat = _as_number(latitude, "latitude")
    lon = _as_number(longitude, "longitude")

    if not math.isfinite(lat) or not -90.0 <= lat <= 90.0:
        raise InvalidCoordinateError(f"latitude must be a finite number in [-90, 90], got {latitude!r}")
    if not math.isfinite(lon) or not -180.0 <= lon <= 180.0:
        raise InvalidCoordinateError(f"longitude must be a finite number in [-180, 180], got {longitude!r}")

    return Coordinate(latitude=lat, longitude=lon)


def validate_days(value: Any) -> int:
    """Validate the forecast length (1-16 days)."""
    if isinstance(value, bool):
        raise InvalidRangeError("days must be an integer, got a boolean")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())

    if not isinstance(value, int):
        raise InvalidRangeError(f"days must be an integer, got {value!r}")
    if not MIN_FORECAST_DAYS <= value <= MAX_FORECAST_DAYS:
        raise InvalidRangeError(
            f"days must be between {MIN_FORECAST_DAYS} and {MAX_FORECAST_DAYS}, got {value}"
        )
    return value


def _parse_date(value: Any, name: str) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise InvalidDateRangeError(f"{name} must be a date string (YYYY-MM-DD), got {value!r}")
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise InvalidDateRangeError(f"{name} is not a valid YYYY-MM-DD date: {value!r}") from None


def validate_date_range(
    start_date: Any,
    end_date: Any,
    today: date | None = None,
) -> tuple[date, date]:
    """Validate an archive range: start <= end <= yesterday, start >= 1940-01-01."""
    start = _parse_date(start_date, "start_date")
    end = _parse_date(end_date, "end_date")
    yesterday = (today or datetime.now(timezone.utc).date()) - timedelta(days=1)

    if start > end:
        raise InvalidDateRangeError(f"start_date {start} is after end_date {end}")
    if end > yesterday:
        raise InvalidDateRangeError(
            f"end_date {end} is not in the past; historical data is available up to {yesterday}"
        )
    if start < ARCHIVE_START:
        raise InvalidDateRangeError(f"start_date {start} is before the archive start {ARCHIVE_START}")
    return start, end


def validate_query(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidParameterError("query must be a non-empty string")
    # "City, Qualifier": the place name before the first comma is required
    if not value.split(",", 1)[0].strip():
        raise InvalidParameterError(f"query must start with a place name, got {value!r}")
    return value.strip()


def validate_request(
    descriptor: ToolDescriptor,
    params: dict[str, Any] | None,
    today: date | None = None,
) -> dict[str, Any]:
    """Validate a request against its descriptor and return normalized params.

    Raises:
        InvalidParameterError: unknown or missing parameters, empty query.
        InvalidCoordinateError: latitude/longitude not finite or out of range.
        InvalidRangeError: days outside 1-16.
        InvalidDateRangeError: malformed or out-of-order archive dates.
        NoDataForRegionError: US-only tool called outside US coverage.
    """
    params = {k: v for k, v in (params or {}).items() if v is not None}

    unexpected = sorted(set(params) - descriptor.accepted_params)
    if unexpected:
        raise InvalidParameterError(f"{descriptor.name} does not accept: {', '.join(unexpected)}")
    missing = sorted(descriptor.required_params - set(params))
    if missing:
        raise InvalidParameterError(f"{descriptor.name} requires: {', '.join(missing)}")

    normalized = {**descriptor.optional_params, **params}

    if "latitude" in descriptor.accepted_params:
        coordinate = validate_coordinates(normalized["latitude"], normalized["longitude"])
        normalized["latitude"] = round(coordinate.latitude, COORDINATE_PRECISION)
        normalized["longitude"] = round(coordinate.longitude, COORDINATE_PRECISION)

        if descriptor.region is Region.US and not in_us_region(coordinate):
            raise NoDataForRegionError(
                f"{descriptor.name} uses NOAA/NWS data, which only covers the United States "
                f"and its territories ({coordinate.latitude}, {coordinate.longitude} is outside)"
            )

    if "days" in normalized:
        normalized["days"] = validate_days(normalized["days"])

    if "start_date" in descriptor.accepted_params:
        start, end = validate_date_range(normalized["start_date"], normalized["end_date"], today=today)
        normalized["start_date"] = start.isoformat()
        normalized["end_date"] = end.isoformat()

    if "query" in descriptor.accepted_params:
        normalized["query"] = validate_query(normalized["query"])

    return normalized
