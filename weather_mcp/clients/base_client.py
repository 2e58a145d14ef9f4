"""
Base async HTTP adapter for upstream weather providers.

Every provider client inherits fetch(), which:
- retries transient failures (network errors, timeouts, 429, 5xx) once
  after a short fixed backoff; 4xx answers are never retried
- maps failures onto the request-scoped error taxonomy
  (UpstreamUnavailable / UpstreamError / MalformedResponse)
- records the outcome and latency of each call into UpstreamHealth for
  the service status tool
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from weather_mcp.errors import (
    MalformedResponseError,
    UpstreamError,
    UpstreamUnavailableError,
    WeatherToolError,
)
from weather_mcp.schemas.status import UpstreamStatus

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class _TransientUpstreamError(Exception):
    """Carries a retryable failure through tenacity."""

    def __init__(self, error: WeatherToolError) -> None:
        super().__init__(str(error))
        self.error = error


@dataclass
class UpstreamHealth:
    """Last-known health of one upstream adapter."""

    name: str
    base_url: str
    status: str = "unknown"
    last_latency_ms: float | None = None
    last_error: str | None = None
    last_checked: datetime | None = None
    successes: int = 0
    failures: int = 0

    def record_success(self, latency_ms: float) -> None:
        self.status = "ok"
        self.last_latency_ms = round(latency_ms, 2)
        self.last_error = None
        self.last_checked = datetime.now(timezone.utc)
        self.successes += 1

    def record_failure(self, latency_ms: float, error: str) -> None:
        self.status = "error"
        self.last_latency_ms = round(latency_ms, 2)
        self.last_error = error
        self.last_checked = datetime.now(timezone.utc)
        self.failures += 1

    def to_status(self) -> UpstreamStatus:
        return UpstreamStatus(
            name=self.name,
            base_url=self.base_url,
            status=self.status,
            last_latency_ms=self.last_latency_ms,
            last_error=self.last_error,
            last_checked=self.last_checked.isoformat() if self.last_checked else None,
            successes=self.successes,
            failures=self.failures,
        )


def _error_detail(response: httpx.Response) -> str:
    """Pull the provider's error message out of an error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        for field in ("reason", "detail", "title", "message"):
            if body.get(field):
                return str(body[field])
    return response.text[:200]


class UpstreamClient:
    """Async GET-only client shared by all provider adapters."""

    name = "upstream"

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        timeout: float = 10.0,
        retry_attempts: int = 1,
        retry_backoff: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._retry_attempts = retry_attempts
        self._retry_backoff = retry_backoff
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Accept": "application/json", **(headers or {})},
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )
        self.health = UpstreamHealth(name=self.name, base_url=base_url)

    async def fetch(self, endpoint: str, params: dict[str, Any] | None = None) -> dict:
        """GET endpoint and return its JSON object body.

        Args:
            endpoint: Path relative to the base URL, or an absolute URL.
            params: Query parameters.

        Raises:
            UpstreamUnavailableError: network failure or timeout after retries.
            UpstreamError: non-2xx answer.
            MalformedResponseError: 2xx answer whose body is not a JSON object.
        """
        start = time.monotonic()
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._retry_attempts + 1),
                wait=wait_fixed(self._retry_backoff),
                retry=retry_if_exception_type(_TransientUpstreamError),
                before_sleep=self._log_retry,
                reraise=True,
            ):
                with attempt:
                    payload = await self._request(endpoint, params)
        except _TransientUpstreamError as e:
            self.health.record_failure(self._elapsed_ms(start), str(e.error))
            raise e.error from e
        except UpstreamError:
            # A 4xx means the provider is up and rejected the request
            self.health.record_success(self._elapsed_ms(start))
            raise
        except WeatherToolError as e:
            self.health.record_failure(self._elapsed_ms(start), str(e))
            raise

        self.health.record_success(self._elapsed_ms(start))
        return payload

    async def _request(self, endpoint: str, params: dict[str, Any] | None) -> dict:
        logger.debug(f"{self.name} GET {endpoint} params={params}")
        try:
            response = await self._client.get(endpoint, params=params)
        except httpx.TimeoutException as e:
            raise _TransientUpstreamError(
                UpstreamUnavailableError(f"{self.name} timed out on {endpoint}")
            ) from e
        except httpx.TransportError as e:
            raise _TransientUpstreamError(
                UpstreamUnavailableError(f"{self.name} is unreachable: {e}")
            ) from e

        if response.status_code in RETRYABLE_STATUS_CODES:
            raise _TransientUpstreamError(UpstreamError(
                f"{self.name} returned HTTP {response.status_code} for {endpoint}: {_error_detail(response)}",
                status_code=response.status_code,
            ))
        if not response.is_success:
            raise UpstreamError(
                f"{self.name} returned HTTP {response.status_code} for {endpoint}: {_error_detail(response)}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"{self.name} returned invalid JSON for {endpoint}") from e
        if not isinstance(payload, dict):
            raise MalformedResponseError(
                f"{self.name} returned {type(payload).__name__} instead of a JSON object for {endpoint}"
            )
        return payload

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"{self.name} transient failure (attempt {retry_state.attempt_number}), "
            f"retrying in {self._retry_backoff}s: {error}"
        )

    @staticmethod
    def _elapsed_ms(start: float) -> float:
        return (time.monotonic() - start) * 1000

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
