"""
Error taxonomy for weather tool requests.

Every failure is scoped to a single request. Validation errors are raised
before any upstream call; upstream errors are raised by the HTTP clients
after their retry budget is spent. The MCP layer turns them into ToolError
messages of the form "<kind>: <message>".
"""


class WeatherToolError(Exception):
    """Base class for all request-scoped weather tool failures."""

    kind = "WeatherToolError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class ToolDisabledError(WeatherToolError):
    kind = "ToolDisabled"


class UnknownToolError(WeatherToolError):
    kind = "UnknownTool"


class InvalidParameterError(WeatherToolError):
    kind = "InvalidParameter"


class InvalidCoordinateError(WeatherToolError):
    kind = "InvalidCoordinate"


class InvalidRangeError(WeatherToolError):
    kind = "InvalidRange"


class InvalidDateRangeError(WeatherToolError):
    kind = "InvalidDateRange"


class NoDataForRegionError(WeatherToolError):
    kind = "NoDataForRegion"


class UpstreamUnavailableError(WeatherToolError):
    """Network failure or timeout talking to an upstream provider."""

    kind = "UpstreamUnavailable"


class UpstreamError(WeatherToolError):
    """Upstream answered with a non-2xx status."""

    kind = "UpstreamError"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(WeatherToolError):
    """Upstream answered 2xx but the body is not the JSON we expect."""

    kind = "MalformedResponse"
