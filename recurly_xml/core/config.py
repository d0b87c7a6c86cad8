"""
core/config.py
----------------

Client configuration module.

Defines strongly-typed settings loaded from the environment using
``pydantic-settings``. These settings select the Recurly endpoint and
credentials, the HTTP backend and its timeouts, the default page size
and pagination guards, and which XML nodes are masked in logs. Values
passed explicitly to a client constructor take precedence.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables.

    Environment variables are prefixed with ``RECURLY_``.  For example,
    to change the page size used for list calls set
    ``RECURLY_PAGE_SIZE=50``.
    """

    # Endpoint and credentials
    api_key: Optional[str] = Field(None, description="Private API key used for HTTP Basic authentication.")
    host: str = Field("api.recurly.com", description="API host name.")
    port: int = Field(443, ge=1, le=65535, description="API port.")
    api_version: str = Field("v2", description="API version path segment.")

    # Request shaping
    page_size: int = Field(20, ge=1, description="Value of the per_page parameter sent with list requests.")
    debug: bool = Field(False, description="Log request payloads and response bodies at INFO level.")
    hidden_xml_nodes: List[str] = Field(
        default_factory=lambda: ["number", "verification_value"],
        description="XML nodes whose values are masked before a body is logged.",
    )

    # HTTP client settings
    http_backend: Literal["httpx", "requests"] = Field("httpx", description="Transport used by the synchronous client.")
    http_timeout: float = Field(10.0, description="Hard timeout for HTTP requests in seconds.")
    http_max_retries: int = Field(0, ge=0, description="Retries for idempotent operations (GET). Disabled by default.")
    http_backoff_factor: float = Field(0.5, description="Backoff factor for exponential retry delays.")

    # Pagination guards
    max_pages: int = Field(50, ge=1, description="Maximum number of pages to request when paginating.")
    max_items: int = Field(1000, ge=1, description="Maximum number of items to retrieve during pagination.")

    # Webhook receiver
    webhook_username: Optional[str] = Field(None, description="HTTP Basic user expected on push notifications.")
    webhook_password: Optional[str] = Field(None, description="HTTP Basic password expected on push notifications.")

    model_config = SettingsConfigDict(env_prefix="RECURLY_", env_file=None, case_sensitive=False)


@lru_cache()
def get_settings() -> Settings:
    """Return a cached instance of the client settings.

    Tests that change the environment must call
    ``get_settings.cache_clear()`` afterwards.
    """
    return Settings()
