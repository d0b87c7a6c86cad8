"""
Clients for the Recurly API and the HTTP transports they use.
"""

from .async_client import AsyncRecurlyClient
from .recurly_client import RecurlyClient

__all__ = ["AsyncRecurlyClient", "RecurlyClient"]
