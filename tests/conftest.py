from __future__ import annotations

import pytest

from recurly_xml.core.config import get_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Run every test against default settings, whatever the shell exports."""
    for name in (
        "RECURLY_API_KEY",
        "RECURLY_HTTP_BACKEND",
        "RECURLY_DEBUG",
        "RECURLY_PAGE_SIZE",
        "RECURLY_WEBHOOK_USERNAME",
        "RECURLY_WEBHOOK_PASSWORD",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
