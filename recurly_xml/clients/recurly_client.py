"""
clients/recurly_client.py
-------------------------

Synchronous Recurly client.

The transport is chosen by the ``http_backend`` setting: ``httpx``
(default, :class:`~recurly_xml.clients.http_client.HTTPClient`) or
``requests`` (:class:`~recurly_xml.core.http_sync.RequestsHTTPClient`).
Any object with the same ``request``/``close`` methods can be passed as
``http_client``.

Example::

    with RecurlyClient("my-api-key") as client:
        account = client.get_account("1")
"""

from __future__ import annotations

import time
from typing import Any, Dict, Iterator, Optional, Type

import httpx
import requests

from recurly_xml.clients.base import RecurlyOperations, RecurlyRequest
from recurly_xml.clients.http_client import HTTPClient
from recurly_xml.core.config import get_settings
from recurly_xml.core.http_sync import RequestsHTTPClient
from recurly_xml.schemas.base import RecurlyObject
from recurly_xml.utils.pagination import paginate


def default_http_client() -> Any:
    if get_settings().http_backend == "requests":
        return RequestsHTTPClient()
    return HTTPClient()


class RecurlyClient(RecurlyOperations):
    """Blocking client; every operation returns the decoded value."""

    def open(self) -> None:
        """Create the transport if the client has none (or was closed)."""
        if self._http is None:
            self._http = default_http_client()

    def close(self) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> "RecurlyClient":
        self.open()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _send(self, call: RecurlyRequest) -> Any:
        self.open()
        kwargs = self._request_kwargs(call)
        start = time.perf_counter()
        try:
            response = self._http.request(call.method, call.url, **kwargs)
        except requests.RequestException as exc:
            raise self._transport_error(call, exc, logged=True) from exc
        except httpx.HTTPError as exc:
            raise self._transport_error(call, exc) from exc
        duration_ms = (time.perf_counter() - start) * 1000
        return response, self._check(call, response, duration_ms)

    def _call(self, call: RecurlyRequest) -> Any:
        _, body = self._send(call)
        return self._decode(call, body)

    def _iter(self, path: str, model: Type[RecurlyObject],
              params: Optional[Dict[str, Any]] = None) -> Iterator[Any]:
        def fetch_page(next_url: Optional[str]):
            call = self._first_page(path, model, params) if next_url is None else self._next_page(next_url, model)
            response, body = self._send(call)
            return self._page(call, response, body)

        return paginate(fetch_page, max_pages=self.max_pages, max_items=self.max_items)
