# main.py
"""
FastAPI application receiving Recurly push notifications.

``create_app`` wires a :class:`~recurly_xml.routes.webhooks.WebhookDispatcher`
into the webhook router. When an API key is configured a shared
:class:`~recurly_xml.clients.recurly_client.RecurlyClient` is kept on
``app.state.recurly_client`` for handlers that need to call back into
Recurly. Run it with ``uvicorn main:app``.
"""
from __future__ import annotations

import json
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse

from recurly_xml.clients.recurly_client import RecurlyClient
from recurly_xml.core.config import get_settings
from recurly_xml.logging_config import configure_logging, logger
from recurly_xml.routes.webhooks import WebhookDispatcher, build_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    # shared client, only when credentials are available
    app.state.recurly_client = RecurlyClient() if get_settings().api_key else None
    try:
        yield
    finally:
        if app.state.recurly_client is not None:
            app.state.recurly_client.close()


def create_app(dispatcher: Optional[WebhookDispatcher] = None) -> FastAPI:
    configure_logging()
    app = FastAPI(default_response_class=ORJSONResponse, lifespan=lifespan)
    app.state.dispatcher = dispatcher or WebhookDispatcher()
    app.include_router(build_router(app.state.dispatcher))

    # One JSON record per incoming request: path, method, status, duration.
    @app.middleware("http")  # type: ignore[misc]
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000
        logger.info(json.dumps({
            "event": "http_request",
            "path": request.url.path,
            "method": request.method,
            "status": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }))
        return response

    return app


app = create_app()
