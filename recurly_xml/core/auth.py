"""
core/auth.py
-------------

Helpers for building authenticated requests to Recurly.

These functions centralise construction of the base URL and the HTTP
headers required by the v2 API so the key is only ever handled here
and in the client that owns it.
"""

from __future__ import annotations

import base64
from typing import Dict

from recurly_xml import __version__

XML_CONTENT_TYPE = "application/xml; charset=utf-8"


def get_base_url(host: str, port: int, version: str) -> str:
    """Return the API base URL, without trailing slash.

    :param host: API host name (e.g. ``api.recurly.com``)
    :param port: TCP port, normally ``443``
    :param version: API version path segment (e.g. ``v2``)
    :return: the base API URL, e.g. ``https://api.recurly.com:443/v2``
    """
    host = host.strip().rstrip("/")
    version = version.strip().strip("/")
    return f"https://{host}:{port}/{version}"


def encode_api_key(api_key: str) -> str:
    """Base64-encode the API key the way Recurly expects it in Basic auth."""
    return base64.b64encode(api_key.encode("utf-8")).decode("ascii")


def build_auth_headers(api_key: str) -> Dict[str, str]:
    """Create the headers sent with every API call.

    :param api_key: private API key of the Recurly site
    :return: a dictionary of headers suitable for httpx or requests
    """
    return {
        "Authorization": f"Basic {encode_api_key(api_key)}",
        "Accept": "application/xml",
        "Content-Type": XML_CONTENT_TYPE,
        "User-Agent": f"recurly-xml-client/{__version__}",
    }
