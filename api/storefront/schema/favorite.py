"""Favorites request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from storefront.schema.base import ORMModel


class FavoriteCreate(BaseModel):
    """Payload for saving an item to favorites."""
    item_id: str = Field(min_length=1, max_length=128)
    kind: str | None = Field(default=None, max_length=32)
    payload: dict[str, Any] = Field(default_factory=dict)


class FavoriteToggle(BaseModel):
    """Optional snapshot sent along with a toggle."""
    kind: str | None = Field(default=None, max_length=32)
    payload: dict[str, Any] = Field(default_factory=dict)


class FavoriteRead(ORMModel):
    """Saved item as returned to the client."""
    item_id: str
    item_kind: str | None = None
    payload: dict[str, Any] | None = None
    created_at: datetime


class FavoriteState(BaseModel):
    item_id: str
    is_favorite: bool
