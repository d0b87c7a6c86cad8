"""
Route package for the webhook receiver.

:mod:`recurly_xml.routes.webhooks` defines the router factory that
:mod:`recurly_xml.main` registers on the FastAPI application.
"""

from . import webhooks  # noqa: F401

__all__ = ["webhooks"]
