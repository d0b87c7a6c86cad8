"""
exceptions.py
-------------

Exception hierarchy raised by the Recurly clients.

``RecurlyException`` covers failures that never produced a usable API
response (transport errors, undecodable bodies, bad arguments).
``RequestException`` and its subclasses are raised when Recurly answers
with a status of 300 or above.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from recurly_xml.schemas.errors import Errors
    from recurly_xml.schemas.invoice import Transaction, TransactionError


class RecurlyException(Exception):
    """Base class for every error raised by this package."""


class CircuitOpenError(RecurlyException):
    """Requests to a host are suspended after repeated failures."""


class RequestException(RecurlyException):
    """Recurly answered with an error status.

    ``message`` has the form ``"error code <status> (<detail>)"``; the
    string form of the exception also names the URL that was called.
    """

    URL_MESSAGE = "Recurly error while calling: {url}\n"
    BODY_MESSAGE = "Recurly error: {message}"

    def __init__(self, url: str, message: str, *, status_code: int, body: str = "",
                 errors: Optional["Errors"] = None) -> None:
        super().__init__(message)
        self.url = url
        self.message = message
        self.status_code = status_code
        self.body = body
        self.errors = errors

    def __str__(self) -> str:
        return self.URL_MESSAGE.format(url=self.url) + self.BODY_MESSAGE.format(message=self.message)


class NotFoundException(RequestException):
    """404 answer; ``symbol`` and ``description`` come from the error body."""

    def __init__(self, url: str, message: str, *, status_code: int = 404, body: str = "",
                 symbol: Optional[str] = None, description: Optional[str] = None) -> None:
        super().__init__(url, message, status_code=status_code, body=body)
        self.symbol = symbol
        self.description = description


class TransactionException(RequestException):
    """Error answer that carries a declined or failed transaction."""

    @property
    def transaction(self) -> Optional["Transaction"]:
        return self.errors.transaction if self.errors is not None else None

    @property
    def transaction_error(self) -> Optional["TransactionError"]:
        return self.errors.transaction_error if self.errors is not None else None
