"""
utils/pagination.py
--------------------

Helpers for safely iterating through paginated API responses.

Recurly list endpoints return one page per request and point to the
next one with a ``Link: <...>; rel="next"`` header. ``paginate``
abstracts the control flow and enforces limits to avoid runaway loops.
Iteration stops when one of the following conditions is met:

* A page returns no items.
* The next token is missing from the response.
* The next token is identical to the current one.
* The configured maximum number of pages or items is reached.

``apaginate`` is the same loop for coroutine page fetchers.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Awaitable, Callable, Iterator, List, Optional, Tuple

from recurly_xml.core.config import get_settings

Page = Tuple[List[Any], Optional[Any]]


def _limits(max_pages: Optional[int], max_items: Optional[int]) -> Tuple[int, int]:
    settings = get_settings()
    return (max_pages or settings.max_pages, max_items or settings.max_items)


def paginate(
    fetch_page: Callable[[Any], Page],
    initial_token: Any = None,
    *,
    max_pages: Optional[int] = None,
    max_items: Optional[int] = None,
) -> Iterator[Any]:
    """Yield items page after page until a termination criterion is met.

    :param fetch_page: function accepting a page token and returning a tuple
        ``(items, next_token)``; ``next_token`` is ``None`` on the last page
    :param initial_token: token of the first page
    :param max_pages: page limit, defaults to the ``max_pages`` setting
    :param max_items: item limit, defaults to the ``max_items`` setting
    """
    page_limit, item_limit = _limits(max_pages, max_items)
    token = initial_token
    page_count = 0
    item_count = 0

    while True:
        page_count += 1
        if page_count > page_limit:
            return
        page_items, next_token = fetch_page(token)
        if not page_items:
            return
        for item in page_items:
            yield item
            item_count += 1
            if item_count >= item_limit:
                return
        if next_token is None or next_token == token:
            return
        token = next_token


async def apaginate(
    fetch_page: Callable[[Any], Awaitable[Page]],
    initial_token: Any = None,
    *,
    max_pages: Optional[int] = None,
    max_items: Optional[int] = None,
) -> AsyncIterator[Any]:
    """Asynchronous version of :func:`paginate`."""
    page_limit, item_limit = _limits(max_pages, max_items)
    token = initial_token
    page_count = 0
    item_count = 0

    while True:
        page_count += 1
        if page_count > page_limit:
            return
        page_items, next_token = await fetch_page(token)
        if not page_items:
            return
        for item in page_items:
            yield item
            item_count += 1
            if item_count >= item_limit:
                return
        if next_token is None or next_token == token:
            return
        token = next_token
