"""
clients/async_client.py
-----------------------

Asyncio Recurly client built on :class:`httpx.AsyncClient`.

Operations are the ones of :class:`~recurly_xml.clients.recurly_client.RecurlyClient`
but return coroutines, and ``iter_*`` return async iterators::

    async with AsyncRecurlyClient("my-api-key") as client:
        account = await client.get_account("1")
        async for plan in client.iter_plans():
            ...
"""

from __future__ import annotations

import time
from typing import Any, AsyncIterator, Dict, Optional, Type

import httpx

from recurly_xml.clients.base import RecurlyOperations, RecurlyRequest
from recurly_xml.clients.http_client import AsyncHTTPClient
from recurly_xml.schemas.base import RecurlyObject
from recurly_xml.utils.pagination import apaginate


class AsyncRecurlyClient(RecurlyOperations):
    """Non-blocking client; every operation returns an awaitable."""

    def open(self) -> None:
        if self._http is None:
            self._http = AsyncHTTPClient()

    async def close(self) -> None:
        if self._http is not None:
            await self._http.close()
            self._http = None

    async def __aenter__(self) -> "AsyncRecurlyClient":
        self.open()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _send(self, call: RecurlyRequest) -> Any:
        self.open()
        kwargs = self._request_kwargs(call)
        start = time.perf_counter()
        try:
            response = await self._http.request(call.method, call.url, **kwargs)
        except httpx.HTTPError as exc:
            raise self._transport_error(call, exc) from exc
        duration_ms = (time.perf_counter() - start) * 1000
        return response, self._check(call, response, duration_ms)

    async def _call(self, call: RecurlyRequest) -> Any:
        _, body = await self._send(call)
        return self._decode(call, body)

    def _iter(self, path: str, model: Type[RecurlyObject],
              params: Optional[Dict[str, Any]] = None) -> AsyncIterator[Any]:
        async def fetch_page(next_url: Optional[str]):
            call = self._first_page(path, model, params) if next_url is None else self._next_page(next_url, model)
            response, body = await self._send(call)
            return self._page(call, response, body)

        return apaginate(fetch_page, max_pages=self.max_pages, max_items=self.max_items)
