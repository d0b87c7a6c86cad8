"""
schemas/errors.py
------------------

Error documents returned by the API.

* ``<errors>``: validation errors (``<error field="..." symbol="...">``)
  and, for declined payments, the transaction and its gateway error.
* ``<error>`` with ``<symbol>``/``<description>``: the 404 body.  Older
  responses put a bare message in the element text instead.
"""

from __future__ import annotations

from typing import ClassVar, List, Optional, Tuple

from pydantic import Field

from recurly_xml.schemas.base import RecurlyObject
from recurly_xml.schemas.invoice import Transaction, TransactionError

__all__ = ["RecurlyError", "Errors", "ErrorMessage404", "TransactionError"]


class RecurlyError(RecurlyObject):
    """One validation error, e.g. ``<error field="x" symbol="blank">can't be blank</error>``."""

    xml_root: ClassVar[str] = "error"
    xml_attributes: ClassVar[Tuple[str, ...]] = ("field", "symbol", "lang")
    xml_text: ClassVar[Optional[str]] = "value"

    field: Optional[str] = None
    symbol: Optional[str] = None
    lang: Optional[str] = None
    value: Optional[str] = None


class Errors(RecurlyObject):
    xml_root: ClassVar[str] = "errors"
    xml_inline: ClassVar[Tuple[str, ...]] = ("recurly_errors",)

    transaction_error: Optional[TransactionError] = None
    transaction: Optional[Transaction] = None
    recurly_errors: List[RecurlyError] = Field(default_factory=list, alias="error")


class ErrorMessage404(RecurlyObject):
    xml_root: ClassVar[str] = "error"
    xml_text: ClassVar[Optional[str]] = "error"

    symbol: Optional[str] = None
    description: Optional[str] = None
    error: Optional[str] = None

    @property
    def message(self) -> Optional[str]:
        return self.description or self.error
