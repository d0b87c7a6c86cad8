"""
Synchronous ``requests`` transport for the Recurly client.

Alternative to the httpx transport for applications that already
standardise on ``requests``. It provides connection/read timeouts and,
when enabled, exponential backoff on transient answers such as 429
(Too Many Requests) and 502/503/504.

Usage example:

    from recurly_xml.core.http_sync import recurly_request
    resp = recurly_request("GET", url, headers=headers, params={"per_page": 20})

or select it for a client with ``RECURLY_HTTP_BACKEND=requests``.
"""

from __future__ import annotations

import json
import time
from typing import Any, Dict, Optional, Tuple, Union

import requests

from recurly_xml.core.config import get_settings
from recurly_xml.logging_config import logger

# Default timeouts for requests: (connect timeout, read timeout)
DEFAULT_TIMEOUT: Tuple[float, float] = (10.0, 30.0)

# HTTP status codes that should trigger a retry
RETRY_STATUS = {429, 502, 503, 504}


def recurly_request(
    method: str,
    url: str,
    *,
    headers: Dict[str, str],
    params: Optional[Dict[str, Any]] = None,
    content: Optional[Union[str, bytes]] = None,
    timeout: Union[float, Tuple[float, float]] = DEFAULT_TIMEOUT,
    retries: int = 0,
    backoff_base: float = 0.5,
    session: Optional[requests.Session] = None,
) -> requests.Response:
    """Send one request to Recurly, retrying transient answers.

    ``content`` is the XML document of POST/PUT calls; text is sent UTF-8
    encoded. ``timeout`` is a ``(connect, read)`` pair or a single number
    of seconds. Answers listed in ``RETRY_STATUS`` are re-sent up to
    ``retries`` times, waiting ``backoff_base * 2**n`` seconds in between;
    the last answer is returned whatever its status. ``session`` reuses
    its connection pool, the module-level ``requests`` API is used
    otherwise.

    :raises requests.RequestException: when no answer could be obtained
    """
    sender = session if session is not None else requests
    data = content.encode("utf-8") if isinstance(content, str) else content
    attempt = 0
    while True:
        try:
            resp = sender.request(method=method, url=url, headers=headers, params=params, data=data, timeout=timeout)
        except requests.RequestException as exc:
            logger.error(json.dumps({
                "event": "http_error",
                "method": method.upper(),
                "url": url,
                "detail": str(exc),
            }))
            raise
        if resp.status_code in RETRY_STATUS and attempt < retries:
            attempt += 1
            time.sleep(backoff_base * (2 ** (attempt - 1)))
            continue
        return resp


class RequestsHTTPClient:
    """Transport object wrapping :func:`recurly_request` around a session."""

    def __init__(self, timeout: Optional[float] = None, max_retries: Optional[int] = None,
                 backoff_factor: Optional[float] = None) -> None:
        settings = get_settings()
        self.timeout = settings.http_timeout if timeout is None else timeout
        self.max_retries = settings.http_max_retries if max_retries is None else max_retries
        self.backoff_factor = settings.http_backoff_factor if backoff_factor is None else backoff_factor
        self._session = requests.Session()

    def close(self) -> None:
        self._session.close()

    def request(self, method: str, url: str, *, headers: Dict[str, str],
                params: Optional[Dict[str, Any]] = None,
                content: Optional[Union[str, bytes]] = None) -> requests.Response:
        return recurly_request(
            method,
            url,
            headers=headers,
            params=params,
            content=content,
            timeout=self.timeout,
            retries=self.max_retries,
            backoff_base=self.backoff_factor,
            session=self._session,
        )
