from __future__ import annotations

from xml.etree import ElementTree as ET

from recurly_xml.schemas import (
    Account,
    AddOn,
    BillingInfo,
    Coupon,
    Plan,
    Subscription,
    SubscriptionAddOn,
    SubscriptionUpdate,
    Timeframe,
)


def _root(model) -> ET.Element:
    document = model.to_xml()
    assert document.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    return ET.fromstring(document.split("?>", 1)[1])


def test_account_omits_unset_fields():
    root = _root(Account(account_code="1", email="verena@example.com"))

    assert root.tag == "account"
    assert [child.tag for child in root] == ["account_code", "email"]
    assert root.findtext("email") == "verena@example.com"


def test_href_is_never_written():
    root = _root(Account(href="https://api.recurly.com/v2/accounts/1", first_name="Verena"))

    assert root.find("href") is None
    assert root.get("href") is None
    assert root.findtext("first_name") == "Verena"


def test_subscription_with_nested_account_and_add_ons():
    subscription = Subscription(
        plan_code="gold",
        currency="USD",
        account=Account(account_code="1", billing_info=BillingInfo(number="4111-1111-1111-1111", month=11, year=2030)),
        subscription_add_ons=[SubscriptionAddOn(add_on_code="ipaddresses", quantity=2)],
    )
    root = _root(subscription)

    assert root.tag == "subscription"
    assert root.findtext("plan_code") == "gold"
    assert root.findtext("account/account_code") == "1"
    assert root.findtext("account/billing_info/number") == "4111-1111-1111-1111"
    assert root.findtext("account/billing_info/month") == "11"
    add_ons = root.findall("subscription_add_ons/subscription_add_on")
    assert len(add_ons) == 1
    assert add_ons[0].findtext("add_on_code") == "ipaddresses"
    assert add_ons[0].findtext("quantity") == "2"


def test_subscription_update_renders_enum_value():
    root = _root(SubscriptionUpdate(timeframe=Timeframe.RENEWAL, quantity=3))

    assert root.tag == "subscription"
    assert root.findtext("timeframe") == "renewal"
    assert root.findtext("quantity") == "3"


def test_plan_currency_maps_and_booleans():
    plan = Plan(plan_code="gold", name="Gold", display_quantity=False,
                unit_amount_in_cents={"USD": 1000, "EUR": 800})
    root = _root(plan)

    assert root.findtext("display_quantity") == "false"
    assert root.findtext("unit_amount_in_cents/USD") == "1000"
    assert root.findtext("unit_amount_in_cents/EUR") == "800"


def test_plan_currency_maps_are_decoded():
    plan = Plan.from_xml("""<plan href="https://api.recurly.com/v2/plans/gold">
  <plan_code>gold</plan_code>
  <display_quantity type="boolean">true</display_quantity>
  <unit_amount_in_cents>
    <USD type="integer">1000</USD>
    <EUR type="integer">800</EUR>
  </unit_amount_in_cents>
  <setup_fee_in_cents>
    <USD type="integer">6000</USD>
  </setup_fee_in_cents>
</plan>""")

    assert plan.href == "https://api.recurly.com/v2/plans/gold"
    assert plan.display_quantity is True
    assert plan.unit_amount_in_cents == {"USD": 1000, "EUR": 800}
    assert plan.setup_fee_in_cents == {"USD": 6000}


def test_add_on_list_document():
    add_ons = AddOn.list_from_xml("""<add_ons type="array">
  <add_on><add_on_code>ipaddresses</add_on_code><default_quantity type="integer">1</default_quantity></add_on>
  <add_on><add_on_code>support</add_on_code></add_on>
</add_ons>""")

    assert [a.add_on_code for a in add_ons] == ["ipaddresses", "support"]
    assert add_ons[0].default_quantity == 1


def test_coupon_plan_codes_round_trip():
    coupon = Coupon(coupon_code="special", discount_type="percent", discount_percent=10,
                    applies_to_all_plans=False, plan_codes=["gold", "platinum"])
    root = _root(coupon)

    assert [e.text for e in root.findall("plan_codes/plan_code")] == ["gold", "platinum"]
    assert Coupon.from_xml(coupon.to_xml()).plan_codes == ["gold", "platinum"]
