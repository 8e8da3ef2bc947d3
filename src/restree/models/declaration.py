"""
Declarative endpoint trees: the JSON shape accepted by restree.loader.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field


class EndpointDeclaration(BaseModel):
    location: Optional[str] = None
    headers: dict[str, str] = Field(default_factory=dict)
    endpoints: dict[str, EndpointDeclaration] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}


class TreeDeclaration(EndpointDeclaration):
    """Root of a declared tree; the root location (the API base) is required."""
    location: str


EndpointDeclaration.model_rebuild()
TreeDeclaration.model_rebuild()
