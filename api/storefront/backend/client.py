"""Client for the commerce REST backend that owns shots, services and blogs."""

from __future__ import annotations

from typing import Any

import httpx

from storefront.backend.http import BackendError, MultipartParts, fetch_json, send
from storefront.core.config import settings
from storefront.forms.kinds import KindSchema


def _unwrap(payload: Any) -> dict | None:
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    return data if isinstance(data, dict) else None


class BackendClient:
    """Thin async wrapper around the backend routes, forwarding the caller's cookies."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        cookies: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.cookies = dict(cookies or {})
        self.transport = transport

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def get_entity_for_edit(self, schema: KindSchema, entity_id: str) -> dict | None:
        payload = await fetch_json(
            self.url(schema.admin_read_path(entity_id)), cookies=self.cookies, transport=self.transport
        )
        return _unwrap(payload)

    async def get_entity(self, schema: KindSchema, entity_id: str) -> dict | None:
        payload = await fetch_json(self.url(schema.item_path(entity_id)), cookies=self.cookies, transport=self.transport)
        return _unwrap(payload)

    async def list_entities(self, schema: KindSchema, params: dict[str, str] | None = None) -> dict:
        payload = await fetch_json(
            self.url(schema.create_path()), params=params or None, cookies=self.cookies, transport=self.transport
        )
        if not isinstance(payload, dict):
            raise BackendError("Unexpected list payload")
        return payload

    async def create(self, schema: KindSchema, parts: MultipartParts) -> dict:
        response = await send(
            "POST", self.url(schema.create_path()), files=parts, cookies=self.cookies, transport=self.transport
        )
        return _json_or_empty(response)

    async def update(self, schema: KindSchema, entity_id: str, parts: MultipartParts) -> dict:
        response = await send(
            "PUT", self.url(schema.item_path(entity_id)), files=parts, cookies=self.cookies, transport=self.transport
        )
        return _json_or_empty(response)

    async def delete(self, schema: KindSchema, entity_id: str) -> None:
        await send(
            "DELETE",
            self.url(schema.item_path(entity_id)),
            cookies=self.cookies,
            transport=self.transport,
            expected=(200, 204),
        )

    async def like(self, schema: KindSchema, entity_id: str) -> int:
        response = await send(
            "POST", self.url(schema.like_path(entity_id)), cookies=self.cookies, transport=self.transport
        )
        payload = _json_or_empty(response)
        likes = payload.get("likes")
        if likes is None and isinstance(payload.get("data"), dict):
            likes = payload["data"].get("likes")
        try:
            return int(likes)
        except (TypeError, ValueError) as exc:
            raise BackendError("Like response did not include a count") from exc


def _json_or_empty(response: httpx.Response) -> dict:
    if not response.content:
        return {}
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}
