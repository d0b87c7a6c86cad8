"""
logging_config.py
------------------

Shared logging utilities for the Recurly XML client.  Everything is
routed through Python's built-in ``logging`` module under the
``recurly`` logger so applications embedding the library decide where
records end up.  Messages are serialised as JSON so downstream systems
can parse them without regular expressions.

The library never touches the root logger on import.  Applications
(and the bundled webhook app in :mod:`recurly_xml.main`) call
:func:`configure_logging` when they want a ready-made stdout handler.

XML bodies exchanged with Recurly may contain card numbers or security
codes.  :func:`hide_xml_node_values` masks the values of selected nodes
before a body is logged.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from functools import wraps
from typing import Any, Callable, Dict, Iterable

logger = logging.getLogger("recurly")

_SENSITIVE_KEYWORDS = ("token", "password", "secret", "api_key")
_SENSITIVE_KEYS = {"number", "verification_value", "authorization"}

XML_HIDDEN_VALUE_MASK = "****"


def configure_logging(level: int = logging.INFO) -> None:
    """Install a stdout handler with a timestamped format on the root logger."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def hide_xml_node_values(xml: str | None, node_names: Iterable[str]) -> str | None:
    """Replace the content of every ``<node>...</node>`` in ``xml`` with a mask.

    Matching is case-insensitive and spans lines, so ``<Number>`` and a
    value broken over several lines are both hidden.  Attributes on the
    opening tag are dropped together with the value.

    >>> hide_xml_node_values("<a><number>4111</number></a>", ["number"])
    '<a><number>****</number></a>'
    """
    if not xml:
        return xml
    processed = xml
    for name in node_names:
        pattern = re.compile(
            r"<\s?{0}(\s[^>]*)?>.*?</\s?{0}\s*>".format(re.escape(name)),
            re.IGNORECASE | re.DOTALL,
        )
        processed = pattern.sub(f"<{name}>{XML_HIDDEN_VALUE_MASK}</{name}>", processed)
    return processed


def _sanitize(obj: Any) -> Any:
    """Recursively sanitise objects for logging.

    Dictionaries lose keys that look like credentials or card data.
    Lists and tuples are processed element-wise.  Pydantic models are
    dumped first so their fields go through the same filter.
    """
    if isinstance(obj, (bytes, bytearray)):
        return f"<binary {len(obj)} bytes>"
    if isinstance(obj, dict):
        clean: Dict[str, Any] = {}
        for k, v in obj.items():
            key = str(k).lower()
            if key in _SENSITIVE_KEYS or any(keyword in key for keyword in _SENSITIVE_KEYWORDS):
                continue
            clean[k] = _sanitize(v)
        return clean
    if isinstance(obj, (list, tuple)):
        return [_sanitize(i) for i in obj]
    if hasattr(obj, "model_dump"):
        try:
            return _sanitize(obj.model_dump(mode="json", exclude_none=True))
        except Exception:
            return repr(obj)
    try:
        return json.loads(json.dumps(obj))
    except (TypeError, ValueError):
        return str(obj)


def log_call(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to log entry and exit of functions at DEBUG level.

    Arguments and the return value pass through :func:`_sanitize`.
    Failures while building the log record never affect the call.

    >>> @log_call
    ... def add(a, b):
    ...     return a + b
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if logger.isEnabledFor(logging.DEBUG):
            try:
                logger.debug(json.dumps({
                    "event": "call_start",
                    "function": func.__name__,
                    "args": _sanitize(args),
                    "kwargs": _sanitize(kwargs),
                }))
            except (TypeError, ValueError):
                logger.debug(json.dumps({"event": "call_start", "function": func.__name__}))
        result = func(*args, **kwargs)
        if logger.isEnabledFor(logging.DEBUG):
            try:
                logger.debug(json.dumps({
                    "event": "call_end",
                    "function": func.__name__,
                    "result": _sanitize(result),
                }))
            except (TypeError, ValueError):
                logger.debug(json.dumps({"event": "call_end", "function": func.__name__}))
        return result

    return wrapper


def log_http_request(method: str, url: str, *, client_id: str | None = None,
                     headers: Dict[str, Any] | None = None,
                     params: Dict[str, Any] | None = None,
                     status: int | None = None, duration_ms: float | None = None) -> None:
    """Log an outbound HTTP request at DEBUG level.

    Only high-level information (method, URL, status and duration) is
    recorded.  The ``Authorization`` header is never written out.

    Parameters
    ----------
    method : str
        The HTTP method (GET, POST, etc.)
    url : str
        The URL being requested.
    client_id : str, optional
        Identifier of the client instance issuing the request.
    headers : dict, optional
        Request headers.  Sensitive keys are removed.
    params : dict, optional
        Query parameters.
    status : int, optional
        Response status code (log end only).
    duration_ms : float, optional
        Time taken in milliseconds (log end only).
    """
    data: Dict[str, Any] = {
        "event": "http_request",
        "method": method,
        "url": url,
    }
    if client_id is not None:
        data["client_id"] = client_id
    if headers is not None:
        data["headers"] = {k: v for k, v in headers.items() if k.lower() != "authorization"}
    if params:
        data["params"] = params
    if status is not None:
        data["status"] = status
    if duration_ms is not None:
        data["duration_ms"] = round(duration_ms, 2)
    logger.debug(json.dumps(data))
