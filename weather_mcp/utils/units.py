"""Unit normalization helpers shared by the formatters.

Open-Meteo is queried in metric units already. NWS observations carry
WMO unit codes per value (e.g. {"unitCode": "wmoUnit:Pa", "value": 101320}),
which are converted here to the units every response model uses:
°C, km/h, hPa, km (visibility) and mm (precipitation).
"""

from typing import Callable

from loguru import logger

WMO_WEATHER_CODES: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}

THUNDERSTORM_CODES = frozenset({95, 96, 99})

_CARDINALS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]

# (source unit, target unit) -> converter
_CONVERSIONS: dict[tuple[str, str], Callable[[float], float]] = {
    ("degC", "degC"): lambda v: v,
    ("degF", "degC"): lambda v: (v - 32.0) * 5.0 / 9.0,
    ("K", "degC"): lambda v: v - 273.15,
    ("km_h-1", "km_h-1"): lambda v: v,
    ("m_s-1", "km_h-1"): lambda v: v * 3.6,
    ("kn", "km_h-1"): lambda v: v * 1.852,
    ("mi_h-1", "km_h-1"): lambda v: v * 1.609344,
    ("Pa", "hPa"): lambda v: v / 100.0,
    ("hPa", "hPa"): lambda v: v,
    ("m", "km"): lambda v: v / 1000.0,
    ("km", "km"): lambda v: v,
    ("m", "mm"): lambda v: v * 1000.0,
    ("mm", "mm"): lambda v: v,
    ("percent", "percent"): lambda v: v,
    ("degree_(angle)", "degree_(angle)"): lambda v: v,
}


def describe_weather_code(code: int | None) -> str | None:
    if code is None:
        return None
    return WMO_WEATHER_CODES.get(int(code), f"Unknown ({code})")


def cardinal_direction(degrees: float | None) -> str | None:
    """Convert a bearing in degrees to a 16-point compass direction."""
    if degrees is None:
        return None
    return _CARDINALS[int((degrees % 360) / 22.5 + 0.5) % 16]


def _strip_unit_prefix(unit_code: str) -> str:
    # "wmoUnit:degC" -> "degC", "unit:degF" -> "degF"
    return unit_code.split(":", 1)[-1]


def quantity_value(quantity: dict | None, target: str, digits: int = 1) -> float | None:
    """Convert an NWS quantity object to the target unit.

    Args:
        quantity: {"unitCode": "wmoUnit:...", "value": number | null}.
        target: Target unit code without prefix (degC, km_h-1, hPa, km, mm, percent).
        digits: Decimal places to round to.
    """
    if not quantity or quantity.get("value") is None:
        return None
    source = _strip_unit_prefix(quantity.get("unitCode", ""))
    converter = _CONVERSIONS.get((source, target))
    if converter is None:
        logger.warning(f"No conversion from {source!r} to {target!r}")
        return None
    return round(converter(float(quantity["value"])), digits)
