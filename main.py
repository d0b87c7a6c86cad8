"""
Root application entry point for the Recurly webhook receiver
=============================================================

Exposes the FastAPI application defined in ``recurly_xml/main.py`` so
that Uvicorn can import ``main:app`` from the repository root:

.. code-block:: bash

    uvicorn main:app --host 0.0.0.0 --port 8000
"""

from recurly_xml.main import app  # noqa: F401 re-export for Uvicorn

__all__ = ["app"]
