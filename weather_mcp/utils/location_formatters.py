"""Formatting helpers for Open-Meteo geocoding results."""

from weather_mcp.schemas.location import LocationMatch, LocationSearchResponse

MAX_LOCATION_RESULTS = 5

US_STATES: dict[str, str] = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas",
    "CA": "California", "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware",
    "FL": "Florida", "GA": "Georgia", "HI": "Hawaii", "ID": "Idaho",
    "IL": "Illinois", "IN": "Indiana", "IA": "Iowa", "KS": "Kansas",
    "KY": "Kentucky", "LA": "Louisiana", "ME": "Maine", "MD": "Maryland",
    "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota", "MS": "Mississippi",
    "MO": "Missouri", "MT": "Montana", "NE": "Nebraska", "NV": "Nevada",
    "NH": "New Hampshire", "NJ": "New Jersey", "NM": "New Mexico", "NY": "New York",
    "NC": "North Carolina", "ND": "North Dakota", "OH": "Ohio", "OK": "Oklahoma",
    "OR": "Oregon", "PA": "Pennsylvania", "RI": "Rhode Island", "SC": "South Carolina",
    "SD": "South Dakota", "TN": "Tennessee", "TX": "Texas", "UT": "Utah",
    "VT": "Vermont", "VA": "Virginia", "WA": "Washington", "WV": "West Virginia",
    "WI": "Wisconsin", "WY": "Wyoming", "DC": "District of Columbia", "PR": "Puerto Rico",
}

COUNTRY_ALIASES: dict[str, str] = {
    "usa": "us",
    "united states of america": "us",
    "uk": "gb",
    "england": "gb",
}


def split_query(query: str) -> tuple[str, list[str]]:
    """Split "Seattle, WA" into the place name and its qualifiers."""
    parts = [p.strip() for p in query.split(",") if p.strip()]
    return parts[0], parts[1:]


def _qualifier_terms(qualifier: str) -> set[str]:
    term = qualifier.lower()
    terms = {term}
    if qualifier.upper() in US_STATES:
        terms.add(US_STATES[qualifier.upper()].lower())
    if term in COUNTRY_ALIASES:
        terms.add(COUNTRY_ALIASES[term])
    return terms


def _qualifier_score(result: dict, qualifiers: list[str]) -> int:
    """Number of qualifiers matching the result's admin areas or country."""
    fields = {
        str(result.get(key, "")).lower()
        for key in ("admin1", "admin2", "country", "country_code")
        if result.get(key)
    }
    return sum(1 for q in qualifiers if _qualifier_terms(q) & fields)


def rank_locations(results: list[dict], qualifiers: list[str]) -> list[dict]:
    """Order geocoding results by qualifier matches, keeping upstream order on ties."""
    if not qualifiers:
        return results
    return sorted(results, key=lambda r: -_qualifier_score(r, qualifiers))


def format_location_search(query: str, results: list[dict]) -> LocationSearchResponse:
    """Format ranked geocoding results into a LocationSearchResponse model."""
    matches = [
        LocationMatch(
            name=r.get("name", "Unknown"),
            latitude=r["latitude"],
            longitude=r["longitude"],
            country=r.get("country"),
            country_code=r.get("country_code"),
            admin1=r.get("admin1"),
            timezone=r.get("timezone"),
            population=r.get("population"),
            elevation_m=r.get("elevation"),
        )
        for r in results[:MAX_LOCATION_RESULTS]
        if r.get("latitude") is not None and r.get("longitude") is not None
    ]
    return LocationSearchResponse(query=query, count=len(matches), results=matches)
