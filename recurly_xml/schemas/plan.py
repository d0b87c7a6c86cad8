"""
schemas/plan.py
----------------

Plans and their add-ons.

Prices are per currency: ``unit_amount_in_cents`` is a mapping such
as ``{"USD": 1000, "EUR": 800}``.
"""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Dict, Optional

from recurly_xml.schemas.base import RecurlyObject

PLANS_RESOURCE = "/plans"
ADD_ONS_RESOURCE = "/add_ons"


class Plan(RecurlyObject):
    xml_root: ClassVar[str] = "plan"

    href: Optional[str] = None
    plan_code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    success_url: Optional[str] = None
    cancel_url: Optional[str] = None
    display_donation_amounts: Optional[bool] = None
    display_quantity: Optional[bool] = None
    display_phone_number: Optional[bool] = None
    bypass_hosted_confirmation: Optional[bool] = None
    unit_name: Optional[str] = None
    payment_page_tos_link: Optional[str] = None
    plan_interval_length: Optional[int] = None
    plan_interval_unit: Optional[str] = None
    trial_interval_length: Optional[int] = None
    trial_interval_unit: Optional[str] = None
    accounting_code: Optional[str] = None
    created_at: Optional[datetime] = None
    unit_amount_in_cents: Optional[Dict[str, int]] = None
    setup_fee_in_cents: Optional[Dict[str, int]] = None


class AddOn(RecurlyObject):
    xml_root: ClassVar[str] = "add_on"

    href: Optional[str] = None
    add_on_code: Optional[str] = None
    name: Optional[str] = None
    display_quantity_on_hosted_page: Optional[bool] = None
    default_quantity: Optional[int] = None
    unit_amount_in_cents: Optional[Dict[str, int]] = None
    created_at: Optional[datetime] = None
