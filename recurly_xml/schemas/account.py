"""
schemas/account.py
-------------------

Accounts and the billing information attached to them.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import ClassVar, Optional, Tuple

from pydantic import model_validator

from recurly_xml.schemas.base import RecurlyObject

ACCOUNTS_RESOURCE = "/accounts"
BILLING_INFO_RESOURCE = "/billing_info"

_ACCOUNT_CODE_FROM_HREF = re.compile(r"/accounts/([^/]+)/?$")


class Account(RecurlyObject):
    xml_root: ClassVar[str] = "account"

    href: Optional[str] = None
    account_code: Optional[str] = None
    state: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company_name: Optional[str] = None
    accept_language: Optional[str] = None
    hosted_login_token: Optional[str] = None
    created_at: Optional[datetime] = None
    billing_info: Optional[BillingInfo] = None

    @model_validator(mode="after")
    def _account_code_from_href(self) -> "Account":
        # links such as <account href=".../accounts/verena100"/> only carry the URL
        if self.account_code is None and self.href:
            match = _ACCOUNT_CODE_FROM_HREF.search(self.href)
            if match:
                self.account_code = match.group(1)
        return self


class BillingInfo(RecurlyObject):
    """Card and address details of an account.

    ``number`` and ``verification_value`` are write-only: Recurly never
    returns them, it answers with ``first_six``/``last_four`` instead.
    ``account`` is only used to route a create/update request.
    """

    xml_root: ClassVar[str] = "billing_info"
    xml_attributes: ClassVar[Tuple[str, ...]] = ("href", "type")
    xml_transient: ClassVar[Tuple[str, ...]] = ("href", "type")

    href: Optional[str] = None
    type: Optional[str] = None
    account: Optional[Account] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    vat_number: Optional[str] = None
    ip_address: Optional[str] = None
    ip_address_country: Optional[str] = None
    card_type: Optional[str] = None
    year: Optional[int] = None
    month: Optional[int] = None
    first_six: Optional[str] = None
    last_four: Optional[str] = None
    number: Optional[str] = None
    verification_value: Optional[str] = None


Account.model_rebuild()
