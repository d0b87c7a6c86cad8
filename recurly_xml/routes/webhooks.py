"""
routes/webhooks.py
------------------

Receiver for Recurly push notifications.

Recurly posts one XML document per event to the configured URL. The
endpoint detects the notification type, parses it and hands it to every
handler registered for that type on a :class:`WebhookDispatcher`::

    dispatcher = WebhookDispatcher()

    @dispatcher.on(NotificationType.NEW_INVOICE)
    def invoice_created(notification):
        ...

    app.include_router(build_router(dispatcher))

When ``webhook_username`` or ``webhook_password`` is configured the request
must carry matching HTTP Basic credentials.
"""

from __future__ import annotations

import json
import secrets
from typing import Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import ORJSONResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from recurly_xml.core.config import get_settings
from recurly_xml.logging_config import log_call, logger
from recurly_xml.schemas.push import Notification, NotificationType, detect, read

Handler = Callable[[Notification], None]

_basic = HTTPBasic(auto_error=False)


class WebhookDispatcher:
    """Registry of notification handlers keyed by notification type."""

    def __init__(self) -> None:
        self._handlers: Dict[NotificationType, List[Handler]] = {}

    def register(self, notification_type: NotificationType, handler: Handler) -> None:
        self._handlers.setdefault(notification_type, []).append(handler)

    def on(self, notification_type: NotificationType) -> Callable[[Handler], Handler]:
        """Decorator form of :meth:`register`."""

        def decorator(handler: Handler) -> Handler:
            self.register(notification_type, handler)
            return handler

        return decorator

    def handlers(self, notification_type: NotificationType) -> List[Handler]:
        return list(self._handlers.get(notification_type, []))

    @log_call
    def dispatch(self, notification: Notification) -> int:
        """Run the handlers of ``notification``'s type; return how many ran."""
        handlers = self.handlers(notification.notification_type)
        for handler in handlers:
            handler(notification)
        return len(handlers)


def check_credentials(credentials: Optional[HTTPBasicCredentials] = Depends(_basic)) -> None:
    """Reject the request unless it carries the configured Basic credentials."""
    settings = get_settings()
    if not settings.webhook_username and not settings.webhook_password:
        return
    valid = (
        credentials is not None
        and secrets.compare_digest(credentials.username, settings.webhook_username or "")
        and secrets.compare_digest(credentials.password, settings.webhook_password or "")
    )
    if not valid:
        logger.warning(json.dumps({"event": "webhook_unauthorized"}))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook credentials",
            headers={"WWW-Authenticate": "Basic"},
        )


def build_router(dispatcher: WebhookDispatcher) -> APIRouter:
    router = APIRouter()

    @router.post("/recurly/notifications", dependencies=[Depends(check_credentials)])
    async def receive_notification(request: Request) -> ORJSONResponse:
        payload = await request.body()
        notification_type = detect(payload)
        if notification_type is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown notification")
        notification = read(payload, notification_type.model)
        if notification is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail=f"Unreadable {notification_type.value}")
        # handlers may block (e.g. call back into Recurly)
        handled = await run_in_threadpool(dispatcher.dispatch, notification)
        logger.info(json.dumps({
            "event": "webhook_received",
            "type": notification_type.value,
            "handlers": handled,
        }))
        return ORJSONResponse({"status": "ok", "type": notification_type.value})

    return router
