"""Catalog response schemas."""

from __future__ import annotations

from pydantic import BaseModel


class LikeRead(BaseModel):
    """Updated like counter returned by the backend."""
    id: str
    likes: int
