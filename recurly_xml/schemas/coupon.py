"""
schemas/coupon.py
------------------

Coupons.  A coupon either takes a percentage off (``discount_type``
``percent``) or a fixed amount per currency (``dollars``).
"""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Dict, List, Optional

from recurly_xml.schemas.base import RecurlyObject

COUPONS_RESOURCE = "/coupons"


class Coupon(RecurlyObject):
    xml_root: ClassVar[str] = "coupon"
    xml_items: ClassVar[Dict[str, str]] = {"plan_codes": "plan_code"}

    href: Optional[str] = None
    coupon_code: Optional[str] = None
    name: Optional[str] = None
    state: Optional[str] = None
    discount_type: Optional[str] = None
    discount_percent: Optional[int] = None
    discount_in_cents: Optional[Dict[str, int]] = None
    redeem_by_date: Optional[datetime] = None
    single_use: Optional[bool] = None
    applies_for_months: Optional[int] = None
    max_redemptions: Optional[int] = None
    applies_to_all_plans: Optional[bool] = None
    created_at: Optional[datetime] = None
    plan_codes: Optional[List[str]] = None
