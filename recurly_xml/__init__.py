"""
recurly_xml
-----------

Client for the Recurly v2 XML API.

``RecurlyClient`` performs blocking calls, ``AsyncRecurlyClient`` the
same operations as coroutines. Resource models live in
:mod:`recurly_xml.schemas`, the webhook receiver in :mod:`recurly_xml.main`.
"""

__version__ = "0.1.0"

from .exceptions import (  # noqa: E402
    CircuitOpenError,
    NotFoundException,
    RecurlyException,
    RequestException,
    TransactionException,
)
from .clients import AsyncRecurlyClient, RecurlyClient  # noqa: E402

__all__ = [
    "__version__",
    "AsyncRecurlyClient",
    "RecurlyClient",
    "CircuitOpenError",
    "NotFoundException",
    "RecurlyException",
    "RequestException",
    "TransactionException",
]
