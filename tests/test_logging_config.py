from __future__ import annotations

import json
import logging

from recurly_xml.logging_config import _sanitize, hide_xml_node_values, log_call, log_http_request


def test_hide_xml_node_values():
    xml = ("<billing_info><number>4111111111111111</number>"
           "<verification_value>123</verification_value><last_four>1111</last_four></billing_info>")

    hidden = hide_xml_node_values(xml, ["number", "verification_value"])

    assert hidden == ("<billing_info><number>****</number>"
                      "<verification_value>****</verification_value><last_four>1111</last_four></billing_info>")


def test_hide_xml_node_values_is_case_insensitive_and_multiline():
    xml = '<Number type="string">4111\n1111</Number>'

    assert hide_xml_node_values(xml, ["number"]) == "<number>****</number>"


def test_hide_xml_node_values_keeps_empty_input():
    assert hide_xml_node_values("", ["number"]) == ""
    assert hide_xml_node_values(None, ["number"]) is None


def test_sanitize_drops_credentials():
    cleaned = _sanitize({"api_key": "k", "Authorization": "Basic x", "number": "4111", "email": "a@b.c"})

    assert cleaned == {"email": "a@b.c"}


def test_log_http_request_hides_authorization(caplog):
    with caplog.at_level(logging.DEBUG, logger="recurly"):
        log_http_request("GET", "https://api.recurly.com/v2/accounts",
                         headers={"Authorization": "Basic secret", "Accept": "application/xml"},
                         params={"per_page": 20}, status=200, duration_ms=12.3456)

    record = json.loads(caplog.records[-1].getMessage())
    assert record["headers"] == {"Accept": "application/xml"}
    assert record["params"] == {"per_page": 20}
    assert record["duration_ms"] == 12.35


def test_log_call_records_start_and_end(caplog):
    @log_call
    def add(a, b):
        return a + b

    with caplog.at_level(logging.DEBUG, logger="recurly"):
        assert add(1, 2) == 3

    events = [json.loads(r.getMessage())["event"] for r in caplog.records]
    assert events == ["call_start", "call_end"]
