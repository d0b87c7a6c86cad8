"""
Resource models for the Recurly v2 XML API.

Each model maps one XML document type; see :mod:`recurly_xml.schemas.base`
for the mapping rules.
"""

from .base import RecurlyObject
from .account import Account, BillingInfo
from .subscription import (
    Subscription,
    SubscriptionAddOn,
    SubscriptionPlan,
    SubscriptionState,
    SubscriptionUpdate,
    Timeframe,
)
from .invoice import (
    AbstractInvoice,
    Adjustment,
    Invoice,
    Transaction,
    TransactionDetails,
    TransactionError,
    TransactionState,
    TransactionType,
    VerificationResult,
)
from .plan import AddOn, Plan
from .coupon import Coupon
from .errors import ErrorMessage404, Errors, RecurlyError
from .params import PagingParams, TransactionFilter
from .push import (
    Notification,
    NotificationType,
    PushAccount,
    PushInvoice,
    PushSubscription,
    PushTransaction,
    detect,
    parse_notification,
    read,
)

__all__ = [
    "RecurlyObject",
    "Account",
    "BillingInfo",
    "Subscription",
    "SubscriptionAddOn",
    "SubscriptionPlan",
    "SubscriptionState",
    "SubscriptionUpdate",
    "Timeframe",
    "AbstractInvoice",
    "Adjustment",
    "Invoice",
    "Transaction",
    "TransactionDetails",
    "TransactionError",
    "TransactionState",
    "TransactionType",
    "VerificationResult",
    "AddOn",
    "Plan",
    "Coupon",
    "ErrorMessage404",
    "Errors",
    "RecurlyError",
    "PagingParams",
    "TransactionFilter",
    "Notification",
    "NotificationType",
    "PushAccount",
    "PushInvoice",
    "PushSubscription",
    "PushTransaction",
    "detect",
    "parse_notification",
    "read",
]
