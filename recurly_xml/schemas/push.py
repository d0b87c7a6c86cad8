"""
schemas/push.py
----------------

Webhook ("push") notifications.

Recurly posts one XML document per event.  The root element names the
event (``<new_invoice_notification>``) and the body carries trimmed
down snapshots of the account and of the invoice, transaction or
subscription concerned.  Those snapshots differ from the API resources
(e.g. a pushed transaction has ``invoice_number`` instead of an invoice
link), hence the dedicated ``Push*`` models.

Typical use::

    notification_type = detect(payload)
    notification = read(payload, notification_type.model)

or simply ``parse_notification(payload)``.
"""

from __future__ import annotations

import json
import re
from datetime import datetime
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Tuple, Type, TypeVar, Union

from recurly_xml.logging_config import logger
from recurly_xml.schemas.base import RecurlyObject
from recurly_xml.schemas.invoice import AbstractInvoice, VerificationResult
from recurly_xml.schemas.subscription import SubscriptionAddOn, SubscriptionPlan

N = TypeVar("N", bound="Notification")

_ROOT_NAME = re.compile(r"<([0-9A-Za-z_]*_notification)[\s/>]")


class NotificationType(str, Enum):
    NEW_ACCOUNT = "new_account_notification"
    CANCELED_ACCOUNT = "canceled_account_notification"
    REACTIVATED_ACCOUNT = "reactivated_account_notification"
    BILLING_INFO_UPDATED = "billing_info_updated_notification"
    SUCCESSFUL_PAYMENT = "successful_payment_notification"
    FAILED_PAYMENT = "failed_payment_notification"
    SUCCESSFUL_REFUND = "successful_refund_notification"
    VOID_PAYMENT = "void_payment_notification"
    NEW_SUBSCRIPTION = "new_subscription_notification"
    UPDATED_SUBSCRIPTION = "updated_subscription_notification"
    CANCELED_SUBSCRIPTION = "canceled_subscription_notification"
    EXPIRED_SUBSCRIPTION = "expired_subscription_notification"
    RENEWED_SUBSCRIPTION = "renewed_subscription_notification"
    NEW_INVOICE = "new_invoice_notification"
    CLOSED_INVOICE = "closed_invoice_notification"
    PAST_DUE_INVOICE = "past_due_invoice_notification"

    @property
    def model(self) -> Type["Notification"]:
        return NOTIFICATION_MODELS[self]


class PushAccount(RecurlyObject):
    xml_root: ClassVar[str] = "account"

    account_code: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company_name: Optional[str] = None


class PushTransaction(RecurlyObject):
    xml_root: ClassVar[str] = "transaction"

    id: Optional[str] = None
    invoice_id: Optional[str] = None
    invoice_number: Optional[int] = None
    subscription_id: Optional[str] = None
    action: Optional[str] = None
    date: Optional[datetime] = None
    amount_in_cents: Optional[int] = None
    status: Optional[str] = None
    message: Optional[str] = None
    reference: Optional[str] = None
    source: Optional[str] = None
    cvv_result: Optional[VerificationResult] = None
    avs_result: Optional[VerificationResult] = None
    avs_result_street: Optional[str] = None
    avs_result_postal: Optional[str] = None
    test: Optional[bool] = None
    voidable: Optional[bool] = None
    refundable: Optional[bool] = None


class PushSubscription(RecurlyObject):
    xml_root: ClassVar[str] = "subscription"

    plan: Optional[SubscriptionPlan] = None
    uuid: Optional[str] = None
    state: Optional[str] = None
    quantity: Optional[int] = None
    total_amount_in_cents: Optional[int] = None
    activated_at: Optional[datetime] = None
    canceled_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    current_period_started_at: Optional[datetime] = None
    current_period_ends_at: Optional[datetime] = None
    trial_started_at: Optional[datetime] = None
    trial_ends_at: Optional[datetime] = None
    subscription_add_ons: Optional[List[SubscriptionAddOn]] = None


class PushInvoice(AbstractInvoice):
    subscription_id: Optional[str] = None
    date: Optional[datetime] = None


class Notification(RecurlyObject):
    notification_type: ClassVar[NotificationType]

    account: Optional[PushAccount] = None


class AccountNotification(Notification):
    pass


class PaymentNotification(Notification):
    transaction: Optional[PushTransaction] = None


class SubscriptionNotification(Notification):
    subscription: Optional[PushSubscription] = None


class InvoiceNotification(Notification):
    invoice: Optional[PushInvoice] = None


class NewAccountNotification(AccountNotification):
    xml_root: ClassVar[str] = NotificationType.NEW_ACCOUNT.value
    notification_type: ClassVar[NotificationType] = NotificationType.NEW_ACCOUNT


class CanceledAccountNotification(AccountNotification):
    xml_root: ClassVar[str] = NotificationType.CANCELED_ACCOUNT.value
    notification_type: ClassVar[NotificationType] = NotificationType.CANCELED_ACCOUNT


class ReactivatedAccountNotification(AccountNotification):
    xml_root: ClassVar[str] = NotificationType.REACTIVATED_ACCOUNT.value
    notification_type: ClassVar[NotificationType] = NotificationType.REACTIVATED_ACCOUNT


class BillingInfoUpdatedNotification(AccountNotification):
    xml_root: ClassVar[str] = NotificationType.BILLING_INFO_UPDATED.value
    notification_type: ClassVar[NotificationType] = NotificationType.BILLING_INFO_UPDATED


class SuccessfulPaymentNotification(PaymentNotification):
    xml_root: ClassVar[str] = NotificationType.SUCCESSFUL_PAYMENT.value
    notification_type: ClassVar[NotificationType] = NotificationType.SUCCESSFUL_PAYMENT


class FailedPaymentNotification(PaymentNotification):
    xml_root: ClassVar[str] = NotificationType.FAILED_PAYMENT.value
    notification_type: ClassVar[NotificationType] = NotificationType.FAILED_PAYMENT


class SuccessfulRefundNotification(PaymentNotification):
    xml_root: ClassVar[str] = NotificationType.SUCCESSFUL_REFUND.value
    notification_type: ClassVar[NotificationType] = NotificationType.SUCCESSFUL_REFUND


class VoidPaymentNotification(PaymentNotification):
    xml_root: ClassVar[str] = NotificationType.VOID_PAYMENT.value
    xml_root_aliases: ClassVar[Tuple[str, ...]] = ("voided_payment_notification",)
    notification_type: ClassVar[NotificationType] = NotificationType.VOID_PAYMENT


class NewSubscriptionNotification(SubscriptionNotification):
    xml_root: ClassVar[str] = NotificationType.NEW_SUBSCRIPTION.value
    notification_type: ClassVar[NotificationType] = NotificationType.NEW_SUBSCRIPTION


class UpdatedSubscriptionNotification(SubscriptionNotification):
    xml_root: ClassVar[str] = NotificationType.UPDATED_SUBSCRIPTION.value
    notification_type: ClassVar[NotificationType] = NotificationType.UPDATED_SUBSCRIPTION


class CanceledSubscriptionNotification(SubscriptionNotification):
    xml_root: ClassVar[str] = NotificationType.CANCELED_SUBSCRIPTION.value
    notification_type: ClassVar[NotificationType] = NotificationType.CANCELED_SUBSCRIPTION


class ExpiredSubscriptionNotification(SubscriptionNotification):
    xml_root: ClassVar[str] = NotificationType.EXPIRED_SUBSCRIPTION.value
    notification_type: ClassVar[NotificationType] = NotificationType.EXPIRED_SUBSCRIPTION


class RenewedSubscriptionNotification(SubscriptionNotification):
    xml_root: ClassVar[str] = NotificationType.RENEWED_SUBSCRIPTION.value
    notification_type: ClassVar[NotificationType] = NotificationType.RENEWED_SUBSCRIPTION


class NewInvoiceNotification(InvoiceNotification):
    xml_root: ClassVar[str] = NotificationType.NEW_INVOICE.value
    notification_type: ClassVar[NotificationType] = NotificationType.NEW_INVOICE


class ClosedInvoiceNotification(InvoiceNotification):
    xml_root: ClassVar[str] = NotificationType.CLOSED_INVOICE.value
    notification_type: ClassVar[NotificationType] = NotificationType.CLOSED_INVOICE


class PastDueInvoiceNotification(InvoiceNotification):
    xml_root: ClassVar[str] = NotificationType.PAST_DUE_INVOICE.value
    notification_type: ClassVar[NotificationType] = NotificationType.PAST_DUE_INVOICE


NOTIFICATION_MODELS: Dict[NotificationType, Type[Notification]] = {
    model.notification_type: model
    for model in (
        NewAccountNotification,
        CanceledAccountNotification,
        ReactivatedAccountNotification,
        BillingInfoUpdatedNotification,
        SuccessfulPaymentNotification,
        FailedPaymentNotification,
        SuccessfulRefundNotification,
        VoidPaymentNotification,
        NewSubscriptionNotification,
        UpdatedSubscriptionNotification,
        CanceledSubscriptionNotification,
        ExpiredSubscriptionNotification,
        RenewedSubscriptionNotification,
        NewInvoiceNotification,
        ClosedInvoiceNotification,
        PastDueInvoiceNotification,
    )
}

# root names accepted besides the canonical ones
NOTIFICATION_ALIASES: Dict[str, NotificationType] = {
    alias: model.notification_type
    for model in NOTIFICATION_MODELS.values()
    for alias in model.xml_root_aliases
}


def detect(payload: Union[str, bytes]) -> Optional[NotificationType]:
    """Detect the notification type from the XML root name.

    :return: the notification type, or ``None`` if no ``*_notification``
        element is found or the name is not a known notification
    """
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8", errors="replace")
    match = _ROOT_NAME.search(payload)
    if match is None:
        logger.warning(json.dumps({"event": "notification_detect_failed", "detail": "no notification root"}))
        return None
    root = match.group(1)
    if root in NOTIFICATION_ALIASES:
        return NOTIFICATION_ALIASES[root]
    try:
        return NotificationType(root)
    except ValueError:
        logger.warning(json.dumps({"event": "notification_detect_failed", "root": root}))
        return None


def read(payload: Union[str, bytes], model: Type[N]) -> Optional[N]:
    """Deserialize ``payload`` into ``model``; ``None`` when it cannot be read."""
    try:
        return model.from_xml(payload)
    except ValueError as exc:
        logger.warning(json.dumps({
            "event": "notification_read_failed",
            "model": model.__name__,
            "detail": str(exc),
        }))
        return None


def parse_notification(payload: Union[str, bytes]) -> Optional[Notification]:
    """Detect the type of ``payload`` and deserialize it."""
    notification_type = detect(payload)
    if notification_type is None:
        return None
    return read(payload, notification_type.model)
