"""
schemas/invoice.py
-------------------

Invoices, their line items and the transactions that settle them.

Invoices embed their transactions and transactions link back to their
invoice, so both live in this module and the forward reference is
resolved once both classes exist.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import ClassVar, List, Optional, Tuple

from pydantic import field_validator, model_validator

from recurly_xml.schemas.account import Account
from recurly_xml.schemas.base import RecurlyObject, last_path_segment

INVOICES_RESOURCE = "/invoices"
TRANSACTIONS_RESOURCE = "/transactions"

_INVOICE_NUMBER_FROM_HREF = re.compile(r"/invoices/(\d+)/?$")


class TransactionState(str, Enum):
    SUCCESSFUL = "successful"
    FAILED = "failed"
    VOIDED = "voided"


class TransactionType(str, Enum):
    AUTHORIZATION = "authorization"
    REFUND = "refund"
    PURCHASE = "purchase"


class AbstractInvoice(RecurlyObject):
    """Fields shared by API invoices and invoices pushed in notifications."""

    xml_root: ClassVar[str] = "invoice"

    uuid: Optional[str] = None
    state: Optional[str] = None
    invoice_number: Optional[int] = None
    po_number: Optional[str] = None
    vat_number: Optional[str] = None
    total_in_cents: Optional[int] = None
    currency: Optional[str] = None
    net_terms: Optional[int] = None
    collection_method: Optional[str] = None
    closed_at: Optional[datetime] = None


class Adjustment(RecurlyObject):
    xml_root: ClassVar[str] = "adjustment"

    href: Optional[str] = None
    uuid: Optional[str] = None
    description: Optional[str] = None
    accounting_code: Optional[str] = None
    origin: Optional[str] = None
    unit_amount_in_cents: Optional[int] = None
    quantity: Optional[int] = None
    discount_in_cents: Optional[int] = None
    tax_in_cents: Optional[int] = None
    total_in_cents: Optional[int] = None
    currency: Optional[str] = None
    taxable: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


class Invoice(AbstractInvoice):
    href: Optional[str] = None
    account: Optional[Account] = None
    subtotal_in_cents: Optional[int] = None
    tax_in_cents: Optional[int] = None
    created_at: Optional[datetime] = None
    line_items: Optional[List[Adjustment]] = None
    transactions: Optional[List[Transaction]] = None

    @model_validator(mode="after")
    def _invoice_number_from_href(self) -> "Invoice":
        if self.invoice_number is None and self.href:
            match = _INVOICE_NUMBER_FROM_HREF.search(self.href)
            if match:
                self.invoice_number = int(match.group(1))
        return self


class TransactionError(RecurlyObject):
    """Gateway explanation attached to a declined transaction."""

    xml_root: ClassVar[str] = "transaction_error"

    error_code: Optional[str] = None
    error_category: Optional[str] = None
    merchant_message: Optional[str] = None
    customer_message: Optional[str] = None


class VerificationResult(RecurlyObject):
    """CVV or AVS check, e.g. ``<cvv_result code="N">No Match</cvv_result>``."""

    xml_attributes: ClassVar[Tuple[str, ...]] = ("code",)
    xml_text: ClassVar[Optional[str]] = "value"

    code: Optional[str] = None
    value: Optional[str] = None


class TransactionDetails(RecurlyObject):
    xml_root: ClassVar[str] = "details"

    account: Optional[Account] = None


class Transaction(RecurlyObject):
    """A payment, refund or authorization.

    ``account`` is populated from the account link of the response; the
    full account snapshot Recurly stores with the transaction is under
    ``details.account``.  ``subscription`` holds the UUID of the linked
    subscription.
    """

    xml_root: ClassVar[str] = "transaction"
    xml_attributes: ClassVar[Tuple[str, ...]] = ("href", "type")
    xml_transient: ClassVar[Tuple[str, ...]] = ("href", "type", "details")

    href: Optional[str] = None
    type: Optional[str] = None
    account: Optional[Account] = None
    invoice: Optional[Invoice] = None
    subscription: Optional[str] = None
    uuid: Optional[str] = None
    action: Optional[str] = None
    amount_in_cents: Optional[int] = None
    tax_in_cents: Optional[int] = None
    currency: Optional[str] = None
    status: Optional[str] = None
    payment_method: Optional[str] = None
    reference: Optional[str] = None
    source: Optional[str] = None
    recurring: Optional[bool] = None
    test: Optional[bool] = None
    voidable: Optional[bool] = None
    refundable: Optional[bool] = None
    description: Optional[str] = None
    transaction_error: Optional[TransactionError] = None
    cvv_result: Optional[VerificationResult] = None
    avs_result: Optional[VerificationResult] = None
    avs_result_street: Optional[str] = None
    avs_result_postal: Optional[str] = None
    created_at: Optional[datetime] = None
    details: Optional[TransactionDetails] = None

    @field_validator("subscription", mode="before")
    @classmethod
    def _subscription_uuid(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str) and "/" in value:
            return last_path_segment(value)
        return value

    @field_validator("cvv_result", "avs_result", mode="after")
    @classmethod
    def _drop_empty_result(cls, value: Optional[VerificationResult]) -> Optional[VerificationResult]:
        # <cvv_result code="" nil="nil"></cvv_result> carries no information
        if value is not None and not value.code and value.value is None:
            return None
        return value


Invoice.model_rebuild()
