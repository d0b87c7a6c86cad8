from __future__ import annotations

import logging
from datetime import datetime, timezone

import pytest

from recurly_xml.schemas import NotificationType, detect, parse_notification, read
from recurly_xml.schemas.push import (
    InvoiceNotification,
    NewInvoiceNotification,
    PaymentNotification,
    SuccessfulPaymentNotification,
    VoidPaymentNotification,
)

NEW_INVOICE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<new_invoice_notification>
  <account>
    <account_code>1</account_code>
    <username>username</username>
    <email>email@example.com</email>
    <first_name>firstname</first_name>
    <last_name>lastname</last_name>
    <company_name>companyName</company_name>
  </account>
  <invoice>
    <uuid>ffc64d71d4b5404e93f13aac9c63b007</uuid>
    <subscription_id>subscriptionId</subscription_id>
    <state>open</state>
    <invoice_number type="integer">1000</invoice_number>
    <po_number>poNumber</po_number>
    <vat_number>vatNumber</vat_number>
    <total_in_cents type="integer">1100</total_in_cents>
    <currency>USD</currency>
    <date type="datetime">2014-01-01T20:20:29Z</date>
    <closed_at type="datetime">2014-01-01T20:24:02Z</closed_at>
    <net_terms type="integer">0</net_terms>    <collection_method>manual</collection_method>  </invoice>
</new_invoice_notification>
"""

SUCCESSFUL_PAYMENT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<successful_payment_notification>
  <account>
    <account_code>1</account_code>
    <email>verena@example.com</email>
  </account>
  <transaction>
    <id>a5143c1d3a6f4a8287d0e2cc1d4c0427</id>
    <invoice_number type="integer">2059</invoice_number>
    <subscription_id>1974a098jhlkjasdfljkha898326881c</subscription_id>
    <action>purchase</action>
    <date type="datetime">2009-11-22T13:10:38Z</date>
    <amount_in_cents type="integer">1000</amount_in_cents>
    <status>success</status>
    <message>Bogus Gateway: Forced success</message>
    <cvv_result code="M">Match</cvv_result>
    <test type="boolean">true</test>
    <voidable type="boolean">true</voidable>
    <refundable type="boolean">true</refundable>
  </transaction>
</successful_payment_notification>
"""


def test_new_invoice_notification():
    notification = read(NEW_INVOICE_XML, NewInvoiceNotification)

    assert isinstance(notification, InvoiceNotification)
    assert notification.account.account_code == "1"
    assert notification.account.username == "username"
    assert notification.account.email == "email@example.com"
    assert notification.account.first_name == "firstname"
    assert notification.account.last_name == "lastname"
    assert notification.account.company_name == "companyName"
    invoice = notification.invoice
    assert invoice.uuid == "ffc64d71d4b5404e93f13aac9c63b007"
    assert invoice.subscription_id == "subscriptionId"
    assert invoice.state == "open"
    assert invoice.invoice_number == 1000
    assert invoice.po_number == "poNumber"
    assert invoice.vat_number == "vatNumber"
    assert invoice.total_in_cents == 1100
    assert invoice.currency == "USD"
    assert invoice.date == datetime(2014, 1, 1, 20, 20, 29, tzinfo=timezone.utc)
    assert invoice.closed_at == datetime(2014, 1, 1, 20, 24, 2, tzinfo=timezone.utc)
    assert invoice.net_terms == 0
    assert invoice.collection_method == "manual"


def test_detect_known_notifications():
    assert detect(NEW_INVOICE_XML) is NotificationType.NEW_INVOICE
    assert detect(SUCCESSFUL_PAYMENT_XML.encode("utf-8")) is NotificationType.SUCCESSFUL_PAYMENT
    assert detect("<void_payment_notification/>") is NotificationType.VOID_PAYMENT


@pytest.mark.parametrize("payload", [
    "<unknown_thing_notification></unknown_thing_notification>",
    "<account><account_code>1</account_code></account>",
    "",
])
def test_detect_unknown_payload_logs_warning(payload, caplog):
    with caplog.at_level(logging.WARNING, logger="recurly"):
        assert detect(payload) is None
    assert "notification_detect_failed" in caplog.text


def test_every_type_has_a_model():
    for notification_type in NotificationType:
        model = notification_type.model
        assert model.xml_root == notification_type.value
        assert model.notification_type is notification_type


def test_parse_payment_notification():
    notification = parse_notification(SUCCESSFUL_PAYMENT_XML)

    assert isinstance(notification, SuccessfulPaymentNotification)
    assert isinstance(notification, PaymentNotification)
    transaction = notification.transaction
    assert transaction.id == "a5143c1d3a6f4a8287d0e2cc1d4c0427"
    assert transaction.invoice_number == 2059
    assert transaction.amount_in_cents == 1000
    assert transaction.message == "Bogus Gateway: Forced success"
    assert transaction.cvv_result.code == "M"
    assert transaction.cvv_result.value == "Match"


def test_read_malformed_payload_returns_none(caplog):
    with caplog.at_level(logging.WARNING, logger="recurly"):
        assert read("<new_invoice_notification><account>", NewInvoiceNotification) is None
    assert "notification_read_failed" in caplog.text


def test_read_wrong_root_returns_none():
    assert read(SUCCESSFUL_PAYMENT_XML, NewInvoiceNotification) is None


def test_voided_payment_root_is_accepted():
    payload = """<voided_payment_notification>
  <account><account_code>1</account_code></account>
  <transaction><id>a5143c1d3a6f4a8287d0e2cc1d4c0427</id><status>void</status></transaction>
</voided_payment_notification>"""

    assert detect(payload) is NotificationType.VOID_PAYMENT
    notification = parse_notification(payload)
    assert isinstance(notification, VoidPaymentNotification)
    assert notification.transaction.status == "void"
