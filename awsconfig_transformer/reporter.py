"""Delivery of transformed records to the stream appliance.

HTTPReporter POSTs JSON to a configured endpoint.  A request that fails
with a retryable status code or a transport error is retried on a fixed
backoff up to ``max_retries`` times.  The underlying httpx client is closed
and rebuilt once its TTL (plus random jitter) elapses, so long-running
processes pick up DNS changes behind the endpoint.
"""

from __future__ import annotations

import asyncio
import random
import time
from abc import ABC, abstractmethod

import httpx
import structlog

from awsconfig_transformer.errors import ReportError
from awsconfig_transformer.models.config import ReporterConfig
from awsconfig_transformer.models.output import Output

_log = structlog.get_logger(component="reporter")


class Reporter(ABC):
    """Delivers transformed records downstream."""

    @abstractmethod
    async def report(self, output: Output) -> None:
        """Deliver one record.  Raises ReportError on failure."""

    @abstractmethod
    async def report_batch(self, outputs: list[Output]) -> None:
        """Deliver several records as one JSON array.  Raises ReportError on failure."""

    async def aclose(self) -> None:
        return None


class HTTPReporter(Reporter):
    """Reporter that POSTs records to the stream appliance over HTTP.

    Args:
        config:    Endpoint, retry, pool and recycling settings.
        transport: Optional httpx transport, used by tests to stub the network.
    """

    def __init__(self, config: ReporterConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        if not config.endpoint:
            raise ValueError("Stream appliance endpoint must not be empty")
        self._config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._expires_at = 0.0
        self._lock = asyncio.Lock()

    async def report(self, output: Output) -> None:
        await self._post(output.to_dict())

    async def report_batch(self, outputs: list[Output]) -> None:
        if not outputs:
            return
        await self._post([o.to_dict() for o in outputs])

    async def aclose(self) -> None:
        async with self._lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None

    async def _get_client(self) -> httpx.AsyncClient:
        async with self._lock:
            now = time.monotonic()
            if self._client is not None and now >= self._expires_at:
                _log.debug("reporter_client_recycled")
                await self._client.aclose()
                self._client = None
            if self._client is None:
                limits = httpx.Limits(
                    max_connections=self._config.max_connections,
                    max_keepalive_connections=self._config.max_connections,
                )
                self._client = httpx.AsyncClient(
                    timeout=self._config.timeout_seconds,
                    limits=limits,
                    transport=self._transport,
                )
                jitter = random.uniform(0, self._config.recycle_jitter_seconds)
                self._expires_at = now + self._config.recycle_ttl_seconds + jitter
            return self._client

    async def _post(self, payload: object) -> None:
        attempts = self._config.max_retries + 1
        backoff = self._config.backoff_ms / 1000.0
        last_error: ReportError | None = None

        for attempt in range(1, attempts + 1):
            client = await self._get_client()
            try:
                response = await client.post(
                    self._config.endpoint,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
            except httpx.TransportError as exc:
                last_error = ReportError(f"request to stream appliance failed: {exc}")
                _log.warning("report_transport_error", attempt=attempt, error=str(exc))
            else:
                if response.status_code == httpx.codes.OK:
                    return
                last_error = ReportError(
                    f"unexpected response from streaming appliance: {response.status_code}",
                    status_code=response.status_code,
                )
                if response.status_code not in self._config.retry_status_codes:
                    raise last_error
                _log.warning("report_retryable_status", attempt=attempt, status_code=response.status_code)

            if attempt < attempts:
                await asyncio.sleep(backoff)

        assert last_error is not None
        raise last_error


def build_reporter(config: ReporterConfig) -> Reporter:
    """Factory used by the application bootstrap."""
    return HTTPReporter(config)
