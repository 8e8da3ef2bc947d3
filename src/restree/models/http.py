"""
Request / response models exchanged between branches and the transport.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field


class PreparedRequest(BaseModel):
    method: str
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: Optional[Any] = None   # JSON-serializable; None sends no body


class TransportResponse(BaseModel):
    status_code: int
    text: str = ""


class Response(BaseModel):
    """Outcome of a branch request, after decoding and (on success) the incoming pipeline."""
    status_code: int
    data: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
