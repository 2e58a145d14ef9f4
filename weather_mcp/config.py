from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Tool gating ---
    ENABLED_TOOLS: str = Field(
        default="standard",
        description=(
            "Tool tier (basic, standard, full, all), optionally followed by "
            "comma-separated +tool_name / -tool_name overrides."
        ),
    )

    # --- Upstream HTTP ---
    NWS_USER_AGENT: str = Field(
        default="weather-mcp/0.1 (weather-mcp@example.com)",
        description="User-Agent sent to api.weather.gov (NWS rejects anonymous clients).",
    )
    UPSTREAM_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Per-call timeout for every upstream request.",
    )
    UPSTREAM_RETRY_ATTEMPTS: int = Field(
        default=1,
        ge=0,
        description="Retries for transient upstream failures (network, timeout, 5xx, 429).",
    )
    UPSTREAM_RETRY_BACKOFF_SECONDS: float = Field(
        default=0.5,
        ge=0,
        description="Delay before retrying a transient upstream failure.",
    )

    # --- Response cache ---
    CACHE_MAX_ENTRIES: int = Field(
        default=1000,
        gt=0,
        description="Maximum number of cached tool responses (LRU eviction).",
    )
    CACHE_TTL_CURRENT_SECONDS: int = Field(default=300, description="TTL for current conditions.")
    CACHE_TTL_ALERTS_SECONDS: int = Field(default=120, description="TTL for active alerts.")
    CACHE_TTL_FORECAST_SECONDS: int = Field(default=1800, description="TTL for forecasts.")
    CACHE_TTL_HISTORICAL_SECONDS: int = Field(default=86400, description="TTL for archive data.")
    CACHE_TTL_AIR_QUALITY_SECONDS: int = Field(default=900, description="TTL for air quality.")
    CACHE_TTL_MARINE_SECONDS: int = Field(default=1800, description="TTL for marine conditions.")
    CACHE_TTL_IMAGERY_SECONDS: int = Field(default=300, description="TTL for radar imagery frames.")
    CACHE_TTL_LIGHTNING_SECONDS: int = Field(default=300, description="TTL for lightning activity.")
    CACHE_TTL_RIVER_SECONDS: int = Field(default=3600, description="TTL for river discharge.")
    CACHE_TTL_WILDFIRE_SECONDS: int = Field(default=3600, description="TTL for fire weather.")
    CACHE_TTL_LOCATION_SECONDS: int = Field(default=86400, description="TTL for geocoding results.")

    # --- Observability ---
    AGENT_OBSERVABILITY_ENABLED: bool = Field(
        default=True,
        description="Enable OpenTelemetry spans for tool invocations.",
    )
    OTEL_SERVICE_NAME: str = Field(
        default="weather-mcp",
        description="Service name reported on traces.",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="loguru log level for the server process.",
    )

    @field_validator("ENABLED_TOOLS")
    @classmethod
    def _check_enabled_tools(cls, value: str) -> str:
        from weather_mcp.gateway.descriptors import ToolSelection

        ToolSelection.parse(value)
        return value

    def cache_ttls(self) -> dict[str, int]:
        """TTL per cache family, keyed the way ToolDescriptor.ttl_family names them."""
        return {
            "current": self.CACHE_TTL_CURRENT_SECONDS,
            "alerts": self.CACHE_TTL_ALERTS_SECONDS,
            "forecast": self.CACHE_TTL_FORECAST_SECONDS,
            "historical": self.CACHE_TTL_HISTORICAL_SECONDS,
            "air_quality": self.CACHE_TTL_AIR_QUALITY_SECONDS,
            "marine": self.CACHE_TTL_MARINE_SECONDS,
            "imagery": self.CACHE_TTL_IMAGERY_SECONDS,
            "lightning": self.CACHE_TTL_LIGHTNING_SECONDS,
            "river": self.CACHE_TTL_RIVER_SECONDS,
            "wildfire": self.CACHE_TTL_WILDFIRE_SECONDS,
            "location": self.CACHE_TTL_LOCATION_SECONDS,
        }


settings = Settings()
