"""Tests for the shared upstream HTTP adapter."""

import httpx
import pytest

from weather_mcp.clients.base_client import UpstreamClient
from weather_mcp.clients.nws_client import NwsClient
from weather_mcp.errors import (
    MalformedResponseError,
    NoDataForRegionError,
    UpstreamError,
    UpstreamUnavailableError,
)

ROUTE = "example.test/data"


def make_client(upstream, retry_attempts: int = 1) -> UpstreamClient:
    return UpstreamClient(
        "https://example.test",
        retry_attempts=retry_attempts,
        retry_backoff=0,
        transport=upstream.transport,
    )


@pytest.mark.asyncio
async def test_returns_json_object_and_records_success(upstream):
    upstream.add(ROUTE, json={"ok": True})
    client = make_client(upstream)

    assert await client.fetch("/data", {"q": "x"}) == {"ok": True}
    assert upstream.calls[0].url.params["q"] == "x"
    assert client.health.status == "ok"
    assert client.health.successes == 1
    await client.close()


@pytest.mark.asyncio
async def test_retries_once_on_server_error(upstream):
    upstream.add(ROUTE, [
        httpx.Response(503, json={"detail": "busy"}),
        httpx.Response(200, json={"ok": True}),
    ])
    client = make_client(upstream)

    assert await client.fetch("/data") == {"ok": True}
    assert upstream.count(ROUTE) == 2
    await client.close()


@pytest.mark.asyncio
async def test_persistent_server_error_surfaces_upstream_error(upstream):
    upstream.add(ROUTE, status=502, json={"reason": "bad gateway"})
    client = make_client(upstream)

    with pytest.raises(UpstreamError, match="bad gateway") as exc_info:
        await client.fetch("/data")
    assert exc_info.value.status_code == 502
    assert upstream.count(ROUTE) == 2
    assert client.health.status == "error"
    assert client.health.failures == 1
    await client.close()


@pytest.mark.asyncio
async def test_client_error_not_retried(upstream):
    upstream.add(ROUTE, status=400, json={"reason": "Parameter 'daily' is invalid"})
    client = make_client(upstream)

    with pytest.raises(UpstreamError, match="Parameter 'daily' is invalid"):
        await client.fetch("/data")
    assert upstream.count(ROUTE) == 1
    # The provider answered, so it is still reachable
    assert client.health.status == "ok"
    await client.close()


@pytest.mark.asyncio
async def test_network_failure_becomes_unavailable(upstream):
    upstream.add(ROUTE, httpx.ConnectError("connection refused"))
    client = make_client(upstream, retry_attempts=2)

    with pytest.raises(UpstreamUnavailableError):
        await client.fetch("/data")
    assert upstream.count(ROUTE) == 3
    assert "unreachable" in client.health.last_error
    await client.close()


@pytest.mark.asyncio
async def test_timeout_becomes_unavailable(upstream):
    upstream.add(ROUTE, httpx.ReadTimeout("read timed out"))
    client = make_client(upstream, retry_attempts=0)

    with pytest.raises(UpstreamUnavailableError, match="timed out"):
        await client.fetch("/data")
    assert upstream.count(ROUTE) == 1
    await client.close()


@pytest.mark.asyncio
async def test_invalid_json_is_malformed(upstream):
    upstream.add(ROUTE, httpx.Response(200, text="<html>maintenance</html>"))
    client = make_client(upstream)

    with pytest.raises(MalformedResponseError):
        await client.fetch("/data")
    assert upstream.count(ROUTE) == 1
    await client.close()


@pytest.mark.asyncio
async def test_non_object_json_is_malformed(upstream):
    upstream.add(ROUTE, json=[1, 2, 3])
    client = make_client(upstream)

    with pytest.raises(MalformedResponseError, match="list"):
        await client.fetch("/data")
    await client.close()


@pytest.mark.asyncio
async def test_nws_sends_user_agent_and_maps_unknown_point(upstream):
    client = NwsClient(user_agent="weather-mcp-tests", transport=upstream.transport, retry_backoff=0)

    with pytest.raises(NoDataForRegionError):
        await client.get_point(51.5074, -0.1278)

    request = upstream.calls[0]
    assert request.headers["User-Agent"] == "weather-mcp-tests"
    assert request.url.path == "/points/51.5074,-0.1278"
    await client.close()
