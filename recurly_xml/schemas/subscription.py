"""
schemas/subscription.py
------------------------

Subscriptions, their add-ons and the payload used to change them.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import ClassVar, List, Optional

from recurly_xml.schemas.account import Account
from recurly_xml.schemas.base import RecurlyObject

SUBSCRIPTIONS_RESOURCE = "/subscriptions"


class SubscriptionState(str, Enum):
    ACTIVE = "active"
    CANCELED = "canceled"
    EXPIRED = "expired"
    FUTURE = "future"
    IN_TRIAL = "in_trial"
    LIVE = "live"
    PAST_DUE = "past_due"


class Timeframe(str, Enum):
    NOW = "now"
    RENEWAL = "renewal"


class SubscriptionPlan(RecurlyObject):
    xml_root: ClassVar[str] = "plan"

    href: Optional[str] = None
    plan_code: Optional[str] = None
    name: Optional[str] = None


class SubscriptionAddOn(RecurlyObject):
    xml_root: ClassVar[str] = "subscription_add_on"

    add_on_code: Optional[str] = None
    unit_amount_in_cents: Optional[int] = None
    quantity: Optional[int] = None


class Subscription(RecurlyObject):
    """A plan subscribed by an account.

    When creating a subscription set ``plan_code`` and ``account``; the
    API answers with the nested ``plan`` instead.
    """

    xml_root: ClassVar[str] = "subscription"

    href: Optional[str] = None
    account: Optional[Account] = None
    plan: Optional[SubscriptionPlan] = None
    plan_code: Optional[str] = None
    uuid: Optional[str] = None
    state: Optional[str] = None
    unit_amount_in_cents: Optional[int] = None
    currency: Optional[str] = None
    quantity: Optional[int] = None
    activated_at: Optional[datetime] = None
    canceled_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    current_period_started_at: Optional[datetime] = None
    current_period_ends_at: Optional[datetime] = None
    trial_started_at: Optional[datetime] = None
    trial_ends_at: Optional[datetime] = None
    starts_at: Optional[datetime] = None
    total_billing_cycles: Optional[int] = None
    first_renewal_date: Optional[date] = None
    coupon_code: Optional[str] = None
    collection_method: Optional[str] = None
    net_terms: Optional[int] = None
    po_number: Optional[str] = None
    subscription_add_ons: Optional[List[SubscriptionAddOn]] = None


class SubscriptionUpdate(RecurlyObject):
    """Changes applied to a subscription, immediately or at renewal."""

    xml_root: ClassVar[str] = "subscription"

    timeframe: Optional[Timeframe] = None
    plan_code: Optional[str] = None
    quantity: Optional[int] = None
    unit_amount_in_cents: Optional[int] = None
    subscription_add_ons: Optional[List[SubscriptionAddOn]] = None
