"""Page-level catalog reads and admin actions proxied to the backend."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from storefront.backend.client import BackendClient
from storefront.backend.http import BackendError
from storefront.forms.kinds import KindSchema

logger = logging.getLogger("storefront.services.catalog")


def forwardable_params(params: Mapping[str, Any]) -> dict[str, str]:
    """Keep only scalar string/number query values, as pages forward them verbatim."""
    forwarded: dict[str, str] = {}
    for key, value in params.items():
        if isinstance(value, bool):
            continue
        if isinstance(value, (str, int, float)):
            forwarded[key] = str(value)
    return forwarded


async def list_page(client: BackendClient, schema: KindSchema, params: Mapping[str, Any]) -> dict[str, Any]:
    """Fetch one listing page; failures degrade to an empty unsuccessful envelope."""
    try:
        return await client.list_entities(schema, forwardable_params(params))
    except BackendError as exc:
        logger.warning("Listing %s failed: %s", schema.collection, exc)
        return {"success": False, "data": [], "error": f"Failed to fetch {schema.collection}"}


async def get_item(client: BackendClient, schema: KindSchema, entity_id: str) -> dict[str, Any] | None:
    return await client.get_entity(schema, entity_id)


async def like_item(client: BackendClient, schema: KindSchema, entity_id: str) -> int:
    return await client.like(schema, entity_id)


async def delete_item(client: BackendClient, schema: KindSchema, entity_id: str) -> None:
    await client.delete(schema, entity_id)
    logger.info("Deleted %s %s", schema.kind.value, entity_id)
