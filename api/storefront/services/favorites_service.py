"""Favorites repository: per-client saved items with serialized read-modify-write."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import settings
from storefront.models.favorite import Favorite

logger = logging.getLogger("storefront.services.favorites")

_owner_locks: dict[str, asyncio.Lock] = {}
_owner_users: dict[str, int] = {}


@asynccontextmanager
async def _owner_lock(owner_key: str) -> AsyncIterator[None]:
    """Hold the lock for one owner; it is discarded once nobody holds or waits on it."""
    lock = _owner_locks.get(owner_key)
    if lock is None:
        lock = _owner_locks[owner_key] = asyncio.Lock()
    _owner_users[owner_key] = _owner_users.get(owner_key, 0) + 1
    try:
        async with lock:
            yield
    finally:
        _owner_users[owner_key] -= 1
        if not _owner_users[owner_key]:
            del _owner_users[owner_key]
            del _owner_locks[owner_key]


class FavoritesRepository:
    """Saved items for one owner key.

    Rows written by a newer schema version than ``settings.favorites_schema_version``
    are left alone and hidden from reads.
    """

    def __init__(self, session: AsyncSession, owner_key: str) -> None:
        owner_key = owner_key.strip()
        if not owner_key:
            raise ValueError("Owner key cannot be blank")
        self.session = session
        self.owner_key = owner_key
        self.schema_version = settings.favorites_schema_version

    async def list(self) -> list[Favorite]:
        stmt = (
            select(Favorite)
            .where(Favorite.owner_key == self.owner_key, Favorite.schema_version <= self.schema_version)
            .order_by(Favorite.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get(self, item_id: str) -> Favorite | None:
        stmt = select(Favorite).where(
            Favorite.owner_key == self.owner_key,
            Favorite.item_id == item_id,
            Favorite.schema_version <= self.schema_version,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def is_favorite(self, item_id: str) -> bool:
        return await self.get(item_id) is not None

    async def add(self, item_id: str, *, kind: str | None = None, payload: dict[str, Any] | None = None) -> Favorite:
        """Save an item; saving an already-saved item returns the existing row."""
        async with _owner_lock(self.owner_key):
            return await self._add(item_id, kind=kind, payload=payload)

    async def remove(self, item_id: str) -> bool:
        async with _owner_lock(self.owner_key):
            return await self._remove(item_id)

    async def toggle(self, item_id: str, *, kind: str | None = None, payload: dict[str, Any] | None = None) -> bool:
        """Flip the saved state of an item and return the new state."""
        async with _owner_lock(self.owner_key):
            if await self._remove(item_id):
                return False
            await self._add(item_id, kind=kind, payload=payload)
            return True

    async def _add(self, item_id: str, *, kind: str | None, payload: dict[str, Any] | None) -> Favorite:
        item_id = item_id.strip()
        if not item_id:
            raise ValueError("Item id cannot be blank")
        existing = await self.get(item_id)
        if existing:
            return existing
        favorite = Favorite(
            owner_key=self.owner_key,
            item_id=item_id,
            item_kind=kind,
            payload=payload or {},
            schema_version=self.schema_version,
        )
        self.session.add(favorite)
        await self.session.commit()
        await self.session.refresh(favorite)
        logger.debug("Saved favorite %s for %s", item_id, self.owner_key)
        return favorite

    async def _remove(self, item_id: str) -> bool:
        favorite = await self.get(item_id)
        if not favorite:
            return False
        await self.session.delete(favorite)
        await self.session.commit()
        return True
