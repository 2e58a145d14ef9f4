"""
Observability configuration for the weather MCP server.

Provides OpenTelemetry-based tracing for:
- A span per MCP tool invocation (see trace_decorator.traced)
- Span events recording tool outcome and duration
- Error status and exception details on failed tool calls

Spans are exported by whatever tracer provider the process is configured
with (e.g. `opentelemetry-instrument python -m weather_mcp.main`); without
one, the API's no-op provider is used.

Environment Variables:
    AGENT_OBSERVABILITY_ENABLED: Enable tracing (default: true)
    OTEL_SERVICE_NAME: Service name on spans (default: weather-mcp)
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Optional

from loguru import logger
from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode


class ObservabilityManager:
    """
    Manages OpenTelemetry tracing for the weather tools.

    Provides utilities for:
    - Custom span creation for tool invocations
    - Span events describing tool outcomes
    """

    def __init__(
        self,
        service_name: str = "weather-mcp",
        enabled: bool = True,
    ) -> None:
        self.service_name = service_name
        self.enabled = enabled
        self._tracer = None

        if self.enabled:
            self._tracer = trace.get_tracer(
                instrumenting_module_name=service_name,
                tracer_provider=trace.get_tracer_provider(),
            )
            logger.info(f"Observability initialized for service: {service_name}")
        else:
            logger.info("Observability disabled")

    # ------------------------------------------------------------------
    # Span creation
    # ------------------------------------------------------------------

    @contextmanager
    def create_span(
        self,
        name: str,
        kind: SpanKind = SpanKind.INTERNAL,
        attributes: Optional[dict] = None,
    ):
        """
        Create a custom span for detailed tracing.

        Args:
            name: Span name (e.g. "mcp.tool.get_forecast").
            kind: SpanKind (defaults to INTERNAL).
            attributes: Custom attributes to attach.
        """
        if not self.enabled or self._tracer is None:
            yield None
            return

        with self._tracer.start_as_current_span(
            name=name,
            kind=kind,
            attributes=attributes or {},
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            try:
                yield span
            except Exception as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                span.record_exception(e)
                raise

    def add_span_event(
        self,
        name: str,
        attributes: Optional[dict] = None,
    ) -> None:
        """Add an event to the current span."""
        if not self.enabled:
            return

        current_span = trace.get_current_span()
        if current_span.is_recording():
            current_span.add_event(name, attributes=attributes or {})

    def record_tool_call(
        self,
        tool_name: str,
        duration_ms: float,
        success: bool = True,
        error_kind: Optional[str] = None,
    ) -> None:
        """Record a tool outcome as a span event with standard attributes."""
        attributes: dict = {
            "weather.tool.name": tool_name,
            "weather.tool.duration_ms": duration_ms,
            "weather.tool.success": success,
        }
        if error_kind:
            attributes["weather.tool.error_kind"] = error_kind

        self.add_span_event(f"tool.{tool_name}", attributes)


# ------------------------------------------------------------------
# Singleton
# ------------------------------------------------------------------

_observability_manager: ObservabilityManager | None = None


def get_observability_manager() -> ObservabilityManager:
    """Return the global ObservabilityManager singleton (lazy-init)."""
    global _observability_manager

    if _observability_manager is None:
        from weather_mcp.config import settings

        _observability_manager = ObservabilityManager(
            service_name=settings.OTEL_SERVICE_NAME,
            enabled=settings.AGENT_OBSERVABILITY_ENABLED,
        )

    return _observability_manager


def initialize_observability(
    service_name: str = "weather-mcp",
    enabled: bool = True,
) -> ObservabilityManager:
    """Initialize the global observability manager at startup."""
    global _observability_manager

    _observability_manager = ObservabilityManager(
        service_name=service_name,
        enabled=enabled,
    )

    return _observability_manager
