"""
In-memory response cache for weather tool payloads.

- Bounded LRU (cachetools) with a per-entry TTL; expired entries are
  treated as misses on read and left for LRU pressure to evict
- Single-flight: at most one upstream fetch per key is in flight, every
  concurrent caller for that key awaits the same asyncio.Task
- Fetches run in their own task and are awaited through asyncio.shield(),
  so a caller that gives up never cancels a fetch other callers share
- Failures are never stored; the next request for the key starts a new flight

The cache is owned by the WeatherGateway and injected into the ToolRegistry,
never reached through a module global.
"""

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from cachetools import LRUCache
from loguru import logger

from weather_mcp.schemas.status import CacheStats


@dataclass(frozen=True, slots=True)
class CacheEntry:
    key: str
    payload: Any
    fetched_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.fetched_at >= self.ttl


class _EvictionCountingLRUCache(LRUCache):
    """LRUCache that counts entries dropped to make room."""

    def __init__(self, maxsize: int) -> None:
        super().__init__(maxsize=maxsize)
        self.evictions = 0

    def popitem(self):
        key, value = super().popitem()
        self.evictions += 1
        logger.debug(f"Cache evicted {key}")
        return key, value


def make_cache_key(tool_name: str, params: dict[str, Any]) -> str:
    """Deterministic key: tool name plus canonical JSON of the normalized params."""
    canonical = json.dumps(params, sort_keys=True, separators=(",", ":"), default=str)
    return f"{tool_name}:{canonical}"


class ResponseCache:
    """LRU + TTL cache with single-flight coalescing of upstream fetches."""

    def __init__(
        self,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries = _EvictionCountingLRUCache(maxsize=max_entries)
        self._in_flight: dict[str, asyncio.Task] = {}
        self._clock = clock

        self._hits = 0
        self._misses = 0
        self._coalesced = 0

    # ------------------------------------------------------------------
    # Plain lookups
    # ------------------------------------------------------------------

    def get(self, key: str) -> Any | None:
        """Return the cached payload, or None on a miss or an expired entry."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not isinstance(entry, CacheEntry):
            logger.warning(f"Discarding corrupt cache entry for {key}")
            self._entries.pop(key, None)
            return None
        if entry.is_expired(self._clock()):
            return None
        return entry.payload

    def put(self, key: str, payload: Any, ttl: float) -> None:
        self._entries[key] = CacheEntry(
            key=key,
            payload=payload,
            fetched_at=self._clock(),
            ttl=ttl,
        )

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    # ------------------------------------------------------------------
    # Single-flight fetch
    # ------------------------------------------------------------------

    async def get_or_fetch(
        self,
        key: str,
        fetch: Callable[[], Awaitable[Any]],
        ttl: float,
    ) -> Any:
        """Return the cached payload for key, fetching it at most once concurrently.

        Args:
            key: Cache key (see make_cache_key).
            fetch: Zero-argument coroutine factory producing the payload.
            ttl: Seconds the fetched payload stays fresh.
        """
        payload = self.get(key)
        if payload is not None:
            self._hits += 1
            logger.debug(f"Cache hit: {key}")
            return payload

        task = self._in_flight.get(key)
        if task is None:
            self._misses += 1
            logger.debug(f"Cache miss: {key}")
            task = asyncio.create_task(self._fetch_and_store(key, fetch, ttl))
            self._in_flight[key] = task
            task.add_done_callback(lambda t, k=key: self._finish_flight(k, t))
        else:
            self._coalesced += 1
            logger.debug(f"Joining in-flight fetch: {key}")

        return await asyncio.shield(task)

    async def _fetch_and_store(
        self,
        key: str,
        fetch: Callable[[], Awaitable[Any]],
        ttl: float,
    ) -> Any:
        payload = await fetch()
        self.put(key, payload, ttl)
        return payload

    def _finish_flight(self, key: str, task: asyncio.Task) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Retrieve the exception so an abandoned flight does not log "never retrieved"
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"Fetch for {key} failed: {task.exception()}")

    async def aclose(self) -> None:
        """Cancel in-flight fetches and drop every entry."""
        tasks = list(self._in_flight.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._in_flight.clear()
        self.clear()

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def stats(self) -> CacheStats:
        lookups = self._hits + self._misses
        return CacheStats(
            size=len(self._entries),
            max_size=int(self._entries.maxsize),
            hits=self._hits,
            misses=self._misses,
            coalesced=self._coalesced,
            evictions=self._entries.evictions,
            in_flight=len(self._in_flight),
            hit_rate=round(self._hits / lookups, 4) if lookups else 0.0,
        )
