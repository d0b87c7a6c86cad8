"""
clients/http_client.py
----------------------

httpx-based transports with connection pooling, timeouts, retries and
a simple circuit breaker. One instance is owned by each Recurly client
and closed together with it.

Retries are applied exclusively to GET requests, as these are
idempotent by definition, and only on transport errors (connection
refused, timeouts ...). Retries are off unless ``http_max_retries`` is
configured. For non-GET methods the request is sent once and any error
is propagated immediately. The circuit breaker short-circuits requests
to a host after several consecutive failures.

:class:`HTTPClient` is synchronous, :class:`AsyncHTTPClient` exposes the
same methods as coroutines.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, Optional

import httpx

from recurly_xml.core.config import get_settings
from recurly_xml.exceptions import CircuitOpenError


class CircuitBreaker:
    """Simple per-host circuit breaker.

    Tracks consecutive failures for each host and trips the breaker
    when the count reaches a threshold. The breaker resets after a
    cooldown period.
    """

    def __init__(self, failure_threshold: int = 5, reset_timeout: float = 60.0) -> None:
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self._failures: Dict[str, int] = {}
        self._open_until: Dict[str, float] = {}

    def record_failure(self, host: str) -> None:
        self._failures[host] = self._failures.get(host, 0) + 1
        if self._failures[host] >= self.failure_threshold:
            self._open_until[host] = time.monotonic() + self.reset_timeout

    def record_success(self, host: str) -> None:
        self._failures.pop(host, None)
        self._open_until.pop(host, None)

    def can_request(self, host: str) -> bool:
        until = self._open_until.get(host)
        if until is None:
            return True
        if time.monotonic() >= until:
            self._open_until.pop(host, None)
            self._failures.pop(host, None)
            return True
        return False

    def check(self, host: str) -> None:
        if not self.can_request(host):
            raise CircuitOpenError(f"Circuit breaker open for host {host}")

    def record_response(self, host: str, response: httpx.Response) -> None:
        # only 5xx count against the host; 4xx are the caller's problem
        if 500 <= response.status_code < 600:
            self.record_failure(host)
        else:
            self.record_success(host)


class _HTTPClientBase:
    def __init__(self, timeout: Optional[float] = None, max_retries: Optional[int] = None,
                 backoff_factor: Optional[float] = None,
                 breaker: Optional[CircuitBreaker] = None) -> None:
        settings = get_settings()
        self.timeout = settings.http_timeout if timeout is None else timeout
        self.max_retries = settings.http_max_retries if max_retries is None else max_retries
        self.backoff_factor = settings.http_backoff_factor if backoff_factor is None else backoff_factor
        self._breaker = breaker or CircuitBreaker()

    def _delay(self, attempt: int) -> float:
        return self.backoff_factor * (2 ** attempt)


class HTTPClient(_HTTPClientBase):
    """Synchronous httpx transport with retry and circuit breaker."""

    def __init__(self, timeout: Optional[float] = None, max_retries: Optional[int] = None,
                 backoff_factor: Optional[float] = None, *,
                 transport: Optional[httpx.BaseTransport] = None,
                 breaker: Optional[CircuitBreaker] = None) -> None:
        super().__init__(timeout, max_retries, backoff_factor, breaker)
        # pooled connections, shared by every call of the owning Recurly client
        self._client = httpx.Client(timeout=self.timeout, transport=transport)

    def close(self) -> None:
        """Close the underlying HTTPX client and release resources."""
        self._client.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Perform a single HTTP request without retries.

        :raises CircuitOpenError: if the breaker for the target host is open
        """
        host = httpx.URL(url).host
        self._breaker.check(host)
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.TransportError:
            self._breaker.record_failure(host)
            raise
        self._breaker.record_response(host, response)
        return response

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Perform a GET request with retries and exponential backoff."""
        for attempt in range(self.max_retries + 1):
            try:
                return self._request("GET", url, **kwargs)
            except httpx.TransportError:
                if attempt >= self.max_retries:
                    raise
                time.sleep(self._delay(attempt))
        raise RuntimeError("GET request failed but no exception captured")

    def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Public request method.

        For GET requests this applies retry logic. For other methods
        the request is performed once.
        """
        method_upper = method.upper()
        if method_upper == "GET":
            return self.get(url, **kwargs)
        return self._request(method_upper, url, **kwargs)


class AsyncHTTPClient(_HTTPClientBase):
    """Asynchronous counterpart of :class:`HTTPClient`."""

    def __init__(self, timeout: Optional[float] = None, max_retries: Optional[int] = None,
                 backoff_factor: Optional[float] = None, *,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 breaker: Optional[CircuitBreaker] = None) -> None:
        super().__init__(timeout, max_retries, backoff_factor, breaker)
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        host = httpx.URL(url).host
        self._breaker.check(host)
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TransportError:
            self._breaker.record_failure(host)
            raise
        self._breaker.record_response(host, response)
        return response

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        for attempt in range(self.max_retries + 1):
            try:
                return await self._request("GET", url, **kwargs)
            except httpx.TransportError:
                if attempt >= self.max_retries:
                    raise
                await asyncio.sleep(self._delay(attempt))
        raise RuntimeError("GET request failed but no exception captured")

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        method_upper = method.upper()
        if method_upper == "GET":
            return await self.get(url, **kwargs)
        return await self._request(method_upper, url, **kwargs)
