from __future__ import annotations

import asyncio
import base64
import time

import httpx
import pytest
from fastapi.testclient import TestClient

from recurly_xml.core.config import get_settings
from recurly_xml.main import create_app
from recurly_xml.routes.webhooks import WebhookDispatcher
from recurly_xml.schemas import NotificationType
from recurly_xml.schemas.push import CanceledAccountNotification

CANCELED_ACCOUNT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<canceled_account_notification>
  <account>
    <account_code>1</account_code>
    <email>verena@example.com</email>
  </account>
</canceled_account_notification>
"""


@pytest.fixture
def received():
    return []


@pytest.fixture
def client(received):
    dispatcher = WebhookDispatcher()

    @dispatcher.on(NotificationType.CANCELED_ACCOUNT)
    def on_canceled(notification):
        received.append(notification)

    with TestClient(create_app(dispatcher)) as test_client:
        yield test_client


def test_notification_is_dispatched(client, received):
    response = client.post("/recurly/notifications", content=CANCELED_ACCOUNT_XML,
                           headers={"Content-Type": "application/xml"})

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "type": "canceled_account_notification"}
    assert len(received) == 1
    assert isinstance(received[0], CanceledAccountNotification)
    assert received[0].account.account_code == "1"


def test_notification_without_handler_is_acknowledged(client, received):
    response = client.post("/recurly/notifications", content="<new_account_notification><account>"
                                                             "<account_code>2</account_code></account>"
                                                             "</new_account_notification>")

    assert response.status_code == 200
    assert response.json()["type"] == "new_account_notification"
    assert received == []


@pytest.mark.parametrize("payload", [
    "<hello/>",
    "<new_account_notification><account>",
])
def test_bad_payload_is_rejected(client, payload):
    response = client.post("/recurly/notifications", content=payload)

    assert response.status_code == 400


def test_basic_auth_is_enforced(monkeypatch, received):
    monkeypatch.setenv("RECURLY_WEBHOOK_USERNAME", "recurly")
    monkeypatch.setenv("RECURLY_WEBHOOK_PASSWORD", "s3cret")
    get_settings.cache_clear()
    dispatcher = WebhookDispatcher()
    dispatcher.register(NotificationType.CANCELED_ACCOUNT, received.append)

    with TestClient(create_app(dispatcher)) as test_client:
        denied = test_client.post("/recurly/notifications", content=CANCELED_ACCOUNT_XML)
        wrong = test_client.post("/recurly/notifications", content=CANCELED_ACCOUNT_XML,
                                 auth=("recurly", "nope"))
        token = base64.b64encode(b"recurly:s3cret").decode()
        allowed = test_client.post("/recurly/notifications", content=CANCELED_ACCOUNT_XML,
                                   headers={"Authorization": f"Basic {token}"})

    assert denied.status_code == 401
    assert wrong.status_code == 401
    assert allowed.status_code == 200
    assert len(received) == 1


def test_dispatcher_runs_every_handler():
    dispatcher = WebhookDispatcher()
    calls = []
    dispatcher.register(NotificationType.CANCELED_ACCOUNT, lambda n: calls.append("first"))
    dispatcher.register(NotificationType.CANCELED_ACCOUNT, lambda n: calls.append("second"))

    handled = dispatcher.dispatch(CanceledAccountNotification())

    assert handled == 2
    assert calls == ["first", "second"]
    assert dispatcher.handlers(NotificationType.NEW_ACCOUNT) == []


def test_password_alone_enables_basic_auth(monkeypatch, received):
    monkeypatch.setenv("RECURLY_WEBHOOK_PASSWORD", "s3cret")
    get_settings.cache_clear()
    dispatcher = WebhookDispatcher()
    dispatcher.register(NotificationType.CANCELED_ACCOUNT, received.append)

    with TestClient(create_app(dispatcher)) as test_client:
        denied = test_client.post("/recurly/notifications", content=CANCELED_ACCOUNT_XML)
        allowed = test_client.post("/recurly/notifications", content=CANCELED_ACCOUNT_XML,
                                   auth=("", "s3cret"))

    assert denied.status_code == 401
    assert allowed.status_code == 200
    assert len(received) == 1


def test_slow_handlers_do_not_block_other_notifications():
    dispatcher = WebhookDispatcher()
    dispatcher.register(NotificationType.CANCELED_ACCOUNT, lambda notification: time.sleep(0.5))
    app = create_app(dispatcher)

    async def post_concurrently(count: int) -> list:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
            return await asyncio.gather(*(
                http.post("/recurly/notifications", content=CANCELED_ACCOUNT_XML) for _ in range(count)
            ))

    start = time.perf_counter()
    responses = asyncio.run(post_concurrently(4))
    elapsed = time.perf_counter() - start

    assert [r.status_code for r in responses] == [200] * 4
    assert elapsed < 1.5
