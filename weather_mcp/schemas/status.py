"""Pydantic response models for the service status tool."""

from pydantic import BaseModel, Field


class UpstreamStatus(BaseModel):
    name: str = Field(description="Upstream adapter name.")
    base_url: str = Field(description="Upstream base URL.")
    status: str = Field(description="Outcome of the last call: unknown, ok or error.")
    last_latency_ms: float | None = Field(None, description="Latency of the last call in milliseconds.")
    last_error: str | None = Field(None, description="Error text of the last failed call.")
    last_checked: str | None = Field(None, description="When the last call completed (ISO 8601, UTC).")
    successes: int = Field(0, description="Successful calls since start.")
    failures: int = Field(0, description="Failed calls since start.")


class CacheStats(BaseModel):
    size: int = Field(description="Entries currently held (expired entries included until evicted).")
    max_size: int = Field(description="Maximum number of entries.")
    hits: int = Field(description="Lookups served from the cache.")
    misses: int = Field(description="Lookups that required an upstream fetch.")
    coalesced: int = Field(description="Requests that joined an in-flight fetch.")
    evictions: int = Field(description="Entries dropped by LRU pressure.")
    in_flight: int = Field(description="Upstream fetches currently running.")
    hit_rate: float = Field(description="hits / (hits + misses), 0 when idle.")


class ServiceStatusResponse(BaseModel):
    status: str = Field(description="operational when no upstream's last call failed, else degraded.")
    generated_at: str = Field(description="Snapshot time (ISO 8601, UTC).")
    enabled_selection: str = Field(description="Configured ENABLED_TOOLS value.")
    enabled_tools: list[str] = Field(description="Tools currently dispatchable.")
    upstreams: list[UpstreamStatus] = Field(description="Per-upstream health.")
    cache: CacheStats = Field(description="Response cache statistics.")
