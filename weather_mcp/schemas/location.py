"""Pydantic models for coordinates and location search."""

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90, allow_inf_nan=False, description="Latitude in degrees.")
    longitude: float = Field(ge=-180, le=180, allow_inf_nan=False, description="Longitude in degrees.")


class LocationMatch(BaseModel):
    name: str = Field(description="Place name.")
    latitude: float = Field(description="Latitude coordinate.")
    longitude: float = Field(description="Longitude coordinate.")
    country: str | None = Field(None, description="Country name.")
    country_code: str | None = Field(None, description="ISO 3166-1 alpha-2 country code.")
    admin1: str | None = Field(None, description="First-level administrative area (state, province).")
    timezone: str | None = Field(None, description="Timezone identifier.")
    population: int | None = Field(None, description="Population, when known.")
    elevation_m: float | None = Field(None, description="Elevation in metres.")


class LocationSearchResponse(BaseModel):
    query: str = Field(description="The query as received.")
    count: int = Field(description="Number of matches returned.")
    results: list[LocationMatch] = Field(description="Matches, best first.")
    source: str = Field("Open-Meteo Geocoding", description="Upstream data provider.")
