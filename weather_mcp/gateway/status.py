"""Read-only service status snapshot: upstream health plus cache statistics."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from weather_mcp.clients.base_client import UpstreamClient
from weather_mcp.gateway.descriptors import ToolSelection
from weather_mcp.infrastructure.response_cache import ResponseCache
from weather_mcp.schemas.status import ServiceStatusResponse


class StatusReporter:
    """Builds check_service_status snapshots without touching any upstream."""

    def __init__(
        self,
        clients: Iterable[UpstreamClient],
        cache: ResponseCache,
        selection: ToolSelection,
    ) -> None:
        self._clients = list(clients)
        self._cache = cache
        self._selection = selection

    def snapshot(self) -> ServiceStatusResponse:
        upstreams = [client.health.to_status() for client in self._clients]
        degraded = any(u.status == "error" for u in upstreams)
        return ServiceStatusResponse(
            status="degraded" if degraded else "operational",
            generated_at=datetime.now(timezone.utc).isoformat(),
            enabled_selection=str(self._selection),
            enabled_tools=self._selection.enabled_names(),
            upstreams=upstreams,
            cache=self._cache.stats(),
        )
