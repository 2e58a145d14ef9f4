"""
RainViewer API HTTP client.

Wraps the public radar frame index:
- GET /public/weather-maps.json   (past and nowcast radar frame paths)

Tiles are served from the host listed in the index; the client only
fetches the index, tile URLs are built by the imagery formatter.
"""

from loguru import logger

from weather_mcp.clients.base_client import UpstreamClient

BASE_URL = "https://api.rainviewer.com"


class RainViewerClient(UpstreamClient):
    """Async client for the RainViewer public API."""

    name = "rainviewer"

    def __init__(self, **kwargs) -> None:
        super().__init__(base_url=BASE_URL, **kwargs)

    async def get_weather_maps(self) -> dict:
        """Get the index of available radar frames."""
        logger.debug("RainViewer weather maps index")
        return await self.fetch("/public/weather-maps.json")
