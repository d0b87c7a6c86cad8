"""
schemas/params.py
------------------

Query parameters for list endpoints.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from recurly_xml.schemas.invoice import TransactionState, TransactionType


class TransactionFilter(BaseModel):
    state: Optional[TransactionState] = None
    type: Optional[TransactionType] = None

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.state is not None:
            params["state"] = self.state.value
        if self.type is not None:
            params["type"] = self.type.value
        return params


class PagingParams(BaseModel):
    """Page size and, for follow-up pages, the cursor returned by Recurly."""

    per_page: int = Field(20, ge=1, le=200)
    cursor: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"per_page": self.per_page}
        if self.cursor:
            params["cursor"] = self.cursor
        return params
