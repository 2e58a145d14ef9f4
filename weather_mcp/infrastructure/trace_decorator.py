"""
Trace decorator for MCP tool handlers.

Provides a @traced decorator that wraps an async MCP tool with an
OpenTelemetry span. Automatically captures:
- Span name (e.g. "mcp.tool.get_forecast")
- Tool arguments as span attributes
- Duration and success/failure as a span event
- The error kind of WeatherToolError failures

Usage:
    @mcp.tool(...)
    @traced(span_name="mcp.tool.get_forecast")
    async def get_forecast(latitude: float, longitude: float, days: int = 7):
        ...
"""

from __future__ import annotations

import functools
import inspect
import time
from typing import Any, Callable

from loguru import logger

from weather_mcp.errors import WeatherToolError
from weather_mcp.infrastructure.observability import get_observability_manager


def _error_kind(error: Exception) -> str:
    """Kind of the WeatherToolError behind an error; MCP tools re-raise it as ToolError."""
    for candidate in (error, error.__cause__):
        if isinstance(candidate, WeatherToolError):
            return candidate.kind
    return type(error).__name__


def traced(span_name: str) -> Callable:
    """
    Decorator that wraps an async MCP tool with an OpenTelemetry span.

    Args:
        span_name: The span name (e.g. "mcp.tool.get_forecast").
    """

    def decorator(func: Callable) -> Callable:
        sig = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            observability = get_observability_manager()

            bound = sig.bind(*args, **kwargs)
            bound.apply_defaults()

            span_attributes: dict[str, Any] = {"mcp.tool.name": func.__name__}
            for param_name, param_value in bound.arguments.items():
                span_attributes[f"mcp.tool.param.{param_name}"] = str(param_value)

            start_time = time.monotonic()

            with observability.create_span(name=span_name, attributes=span_attributes):
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    duration_ms = round((time.monotonic() - start_time) * 1000, 2)
                    observability.record_tool_call(
                        tool_name=func.__name__,
                        duration_ms=duration_ms,
                        success=False,
                        error_kind=_error_kind(e),
                    )
                    logger.error(f"[trace] {span_name} failed after {duration_ms:.1f}ms: {e}")
                    raise

                duration_ms = round((time.monotonic() - start_time) * 1000, 2)
                observability.record_tool_call(
                    tool_name=func.__name__,
                    duration_ms=duration_ms,
                )
                logger.debug(f"[trace] {span_name} completed in {duration_ms:.1f}ms")
                return result

        return wrapper

    return decorator
