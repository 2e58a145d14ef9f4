"""
Tool registry.

Single entry point for every weather tool call:
    dispatch(name) -> gate (ENABLED_TOOLS) -> validate -> cache lookup
        -> (miss) single-flight handler call -> store -> response model

Cached payloads are the JSON-mode dump of the response model. A payload
that no longer validates against the model is treated as a miss.
"""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger
from pydantic import BaseModel, ValidationError

from weather_mcp.errors import MalformedResponseError, ToolDisabledError, UnknownToolError
from weather_mcp.gateway.descriptors import TOOL_DESCRIPTORS, ToolDescriptor, ToolSelection
from weather_mcp.gateway.handlers import Handler
from weather_mcp.gateway.validator import validate_request
from weather_mcp.infrastructure.response_cache import ResponseCache, make_cache_key


class ToolRegistry:
    """Gates, validates, caches and dispatches tool requests."""

    def __init__(
        self,
        handlers: Mapping[str, Handler],
        cache: ResponseCache,
        selection: ToolSelection,
        ttls: Mapping[str, int],
        descriptors: Mapping[str, ToolDescriptor] = TOOL_DESCRIPTORS,
    ) -> None:
        missing = sorted(set(descriptors) - set(handlers))
        if missing:
            raise ValueError(f"No handler registered for: {', '.join(missing)}")
        self._handlers = handlers
        self._cache = cache
        self._selection = selection
        self._ttls = ttls
        self._descriptors = descriptors

    @property
    def selection(self) -> ToolSelection:
        return self._selection

    def is_enabled(self, tool_name: str) -> bool:
        descriptor = self._descriptors.get(tool_name)
        return descriptor is not None and self._selection.allows(descriptor)

    def enabled_tools(self) -> list[str]:
        return [name for name in self._descriptors if self.is_enabled(name)]

    async def dispatch(self, tool_name: str, params: dict[str, Any] | None = None) -> BaseModel:
        """Run one tool request and return its response model.

        Raises:
            UnknownToolError: no tool with exactly this name.
            ToolDisabledError: tool not enabled by ENABLED_TOOLS.
            WeatherToolError: any validation or upstream failure.
        """
        descriptor = self._descriptors.get(tool_name)
        if descriptor is None:
            raise UnknownToolError(f"No tool named {tool_name!r}")
        if not self._selection.allows(descriptor):
            raise ToolDisabledError(
                f"{tool_name} is not enabled (ENABLED_TOOLS={self._selection}); "
                f"it requires the {descriptor.tier.name.lower()} tier"
            )

        normalized = validate_request(descriptor, params)
        logger.debug(f"Dispatching {tool_name} with {normalized}")

        if not descriptor.cacheable:
            return await self._run(descriptor, normalized)

        key = make_cache_key(tool_name, normalized)
        ttl = self._ttls[descriptor.ttl_family]

        async def fetch() -> dict:
            result = await self._run(descriptor, normalized)
            return result.model_dump(mode="json")

        payload = await self._cache.get_or_fetch(key, fetch, ttl)
        try:
            return descriptor.response_model.model_validate(payload)
        except ValidationError:
            logger.warning(f"Cached payload for {key} failed validation, refetching")
            self._cache.invalidate(key)
            payload = await self._cache.get_or_fetch(key, fetch, ttl)
            return descriptor.response_model.model_validate(payload)

    async def _run(self, descriptor: ToolDescriptor, params: dict[str, Any]) -> BaseModel:
        try:
            return await self._handlers[descriptor.name](params)
        except ValidationError as e:
            raise MalformedResponseError(
                f"Upstream payload for {descriptor.name} is missing required fields "
                f"({e.error_count()} validation error(s))"
            ) from e
        except (AttributeError, KeyError, TypeError, ValueError, IndexError) as e:
            raise MalformedResponseError(
                f"Upstream payload for {descriptor.name} has an unexpected shape "
                f"({type(e).__name__}: {e})"
            ) from e
