"""Catalog pages: listings with forwarded query strings, detail reads, likes and admin deletes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from storefront.api.deps import get_backend_client, get_kind_schema
from storefront.backend.client import BackendClient
from storefront.backend.http import BackendError
from storefront.forms.kinds import KindSchema
from storefront.schema.catalog import LikeRead
from storefront.services import catalog_service

router = APIRouter()


def _bad_gateway(schema: KindSchema, action: str, exc: BackendError) -> HTTPException:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{schema.label} not found")
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to {action} {schema.label}")


@router.get("/{kind}")
async def list_items(
    request: Request,
    schema: KindSchema = Depends(get_kind_schema),
    client: BackendClient = Depends(get_backend_client),
) -> dict:
    """Return one listing page, forwarding the incoming query string to the backend."""
    return await catalog_service.list_page(client, schema, dict(request.query_params))


@router.get("/{kind}/{entity_id}")
async def read_item(
    entity_id: str,
    schema: KindSchema = Depends(get_kind_schema),
    client: BackendClient = Depends(get_backend_client),
) -> dict:
    try:
        entity = await catalog_service.get_item(client, schema, entity_id)
    except BackendError as exc:
        raise _bad_gateway(schema, "load", exc) from exc
    if entity is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{schema.label} not found")
    return {"success": True, "data": entity}


@router.post("/{kind}/{entity_id}/like", response_model=LikeRead)
async def like_item(
    entity_id: str,
    schema: KindSchema = Depends(get_kind_schema),
    client: BackendClient = Depends(get_backend_client),
) -> LikeRead:
    try:
        likes = await catalog_service.like_item(client, schema, entity_id)
    except BackendError as exc:
        raise _bad_gateway(schema, "like", exc) from exc
    return LikeRead(id=entity_id, likes=likes)


@router.delete(
    "/{kind}/{entity_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
async def delete_item(
    entity_id: str,
    schema: KindSchema = Depends(get_kind_schema),
    client: BackendClient = Depends(get_backend_client),
) -> None:
    try:
        await catalog_service.delete_item(client, schema, entity_id)
    except BackendError as exc:
        raise _bad_gateway(schema, "delete", exc) from exc
