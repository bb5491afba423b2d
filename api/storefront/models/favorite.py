"""Shopper favorites stored per client with a versioned item snapshot."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base_class import Base

JSON_COMPATIBLE = JSON().with_variant(JSONB, "postgresql")


class Favorite(Base):
    """One saved product, shot, service or blog for a client."""
    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("owner_key", "item_id", name="uq_owner_favorite"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_key: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    item_id: Mapped[str] = mapped_column(String(128), nullable=False)
    item_kind: Mapped[str | None] = mapped_column(String(32))
    payload: Mapped[dict | None] = mapped_column(JSON_COMPATIBLE, default=dict)
    schema_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
