from __future__ import annotations

from datetime import datetime, timezone

from recurly_xml.schemas import Invoice, Transaction

TRANSACTION_XML = """<?xml version="1.0" encoding="UTF-8"?>
<transaction href="https://your-subdomain.recurly.com/v2/transactions/a13acd8fe4294916b79aec87b7ea441f" type="credit_card">
  <account href="https://your-subdomain.recurly.com/v2/accounts/verena100"/>
  <invoice href="https://your-subdomain.recurly.com/v2/invoices/1108"/>
  <subscription href="https://your-subdomain.recurly.com/v2/subscriptions/17caaca1716f33572edc8146e0aaefde"/>
  <uuid>a13acd8fe4294916b79aec87b7ea441f</uuid>
  <action>purchase</action>
  <amount_in_cents type="integer">1000</amount_in_cents>
  <tax_in_cents type="integer">0</tax_in_cents>
  <currency>USD</currency>
  <status>success</status>
  <payment_method>credit_card</payment_method>
  <reference nil="nil"></reference>
  <source>subscription</source>
  <recurring type="boolean">true</recurring>
  <test type="boolean">true</test>
  <voidable type="boolean">true</voidable>
  <refundable type="boolean">true</refundable>
  <cvv_result code="" nil="nil"></cvv_result>
  <avs_result code="" nil="nil"></avs_result>
  <avs_result_street nil="nil"></avs_result_street>
  <avs_result_postal nil="nil"></avs_result_postal>
  <created_at type="datetime">2011-06-27T12:34:56Z</created_at>
  <details>
    <account>
      <account_code>verena100</account_code>
      <first_name>Verena</first_name>
      <last_name>Example</last_name>
      <company nil="nil"></company>
      <email>verena@test.com</email>
      <billing_info type="credit_card">
        <first_name nil="nil"></first_name>
        <last_name nil="nil"></last_name>
        <address1 nil="nil"></address1>
        <city nil="nil"></city>
        <country nil="nil"></country>
        <card_type>Visa</card_type>
        <year type="integer">2015</year>
        <month type="integer">11</month>
        <first_six>411111</first_six>
        <last_four>1111</last_four>
      </billing_info>
    </account>
  </details>
  <a name="refund" href="http://api.test.host/v2/transactions/a13acd8fe4294916b79aec87b7ea441f" method="delete"/>
</transaction>
"""


def test_transaction_scalars():
    transaction = Transaction.from_xml(TRANSACTION_XML)

    assert transaction.uuid == "a13acd8fe4294916b79aec87b7ea441f"
    assert transaction.type == "credit_card"
    assert transaction.action == "purchase"
    assert transaction.amount_in_cents == 1000
    assert transaction.tax_in_cents == 0
    assert transaction.currency == "USD"
    assert transaction.status == "success"
    assert transaction.payment_method == "credit_card"
    assert transaction.reference is None
    assert transaction.source == "subscription"
    assert transaction.recurring is True
    assert transaction.test is True
    assert transaction.voidable is True
    assert transaction.refundable is True
    assert transaction.created_at == datetime(2011, 6, 27, 12, 34, 56, tzinfo=timezone.utc)


def test_transaction_links():
    transaction = Transaction.from_xml(TRANSACTION_XML)

    assert transaction.account.account_code == "verena100"
    assert transaction.account.href.endswith("/accounts/verena100")
    assert transaction.invoice.invoice_number == 1108
    assert transaction.subscription == "17caaca1716f33572edc8146e0aaefde"


def test_nil_verification_results_are_dropped():
    transaction = Transaction.from_xml(TRANSACTION_XML)

    assert transaction.cvv_result is None
    assert transaction.avs_result is None
    assert transaction.avs_result_street is None
    assert transaction.avs_result_postal is None


def test_transaction_details_account_snapshot():
    details = Transaction.from_xml(TRANSACTION_XML).details

    assert details.account.account_code == "verena100"
    assert details.account.email == "verena@test.com"
    billing_info = details.account.billing_info
    assert billing_info.type == "credit_card"
    assert billing_info.first_name is None
    assert billing_info.card_type == "Visa"
    assert billing_info.year == 2015
    assert billing_info.month == 11
    assert billing_info.first_six == "411111"
    assert billing_info.last_four == "1111"


def test_invoice_with_line_items_and_transactions():
    payload = """<?xml version="1.0" encoding="UTF-8"?>
<invoice href="https://api.recurly.com/v2/invoices/1005">
  <account href="https://api.recurly.com/v2/accounts/1"/>
  <uuid>421f7b7d414e4c6792938e7c49d552e9</uuid>
  <state>open</state>
  <invoice_number type="integer">1005</invoice_number>
  <subtotal_in_cents type="integer">1200</subtotal_in_cents>
  <total_in_cents type="integer">1200</total_in_cents>
  <currency>USD</currency>
  <created_at type="datetime">2011-08-25T12:00:00Z</created_at>
  <line_items type="array">
    <adjustment href="https://api.recurly.com/v2/adjustments/626db120a84102b1809909071c701c60">
      <uuid>626db120a84102b1809909071c701c60</uuid>
      <description>Charge for extra bandwidth</description>
      <unit_amount_in_cents type="integer">1200</unit_amount_in_cents>
      <quantity type="integer">1</quantity>
      <taxable type="boolean">false</taxable>
    </adjustment>
  </line_items>
  <transactions type="array">
    <transaction type="credit_card">
      <uuid>b4ef4f77b2784ed6bf3c1bd7b0a59f79</uuid>
      <amount_in_cents type="integer">1200</amount_in_cents>
      <status>success</status>
    </transaction>
  </transactions>
</invoice>
"""
    invoice = Invoice.from_xml(payload)

    assert invoice.invoice_number == 1005
    assert invoice.account.account_code == "1"
    assert invoice.state == "open"
    assert len(invoice.line_items) == 1
    assert invoice.line_items[0].description == "Charge for extra bandwidth"
    assert invoice.line_items[0].taxable is False
    assert [t.uuid for t in invoice.transactions] == ["b4ef4f77b2784ed6bf3c1bd7b0a59f79"]
