from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.backend.client import BackendClient
from storefront.db.session import get_session
from storefront.forms.kinds import KindSchema, get_schema
from storefront.forms.session import MediaForm, form_registry
from storefront.services.favorites_service import FavoritesRepository

ANONYMOUS_OWNER = "anonymous"


async def get_db() -> AsyncSession:
    async for session in get_session():
        yield session


def get_backend_client(request: Request) -> BackendClient:
    """Backend client that forwards the caller's cookies, like a credentialed browser fetch."""
    return BackendClient(cookies=dict(request.cookies))


def get_kind_schema(kind: str) -> KindSchema:
    try:
        return get_schema(kind)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


def get_form(form_id: str) -> MediaForm:
    form = form_registry.get(form_id)
    if form is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Form not found")
    return form


def get_owner_key(x_client_id: str | None = Header(default=None)) -> str:
    candidate = (x_client_id or "").strip()
    return candidate[:128] or ANONYMOUS_OWNER


async def get_favorites(
    session: AsyncSession = Depends(get_db),
    owner_key: str = Depends(get_owner_key),
) -> FavoritesRepository:
    return FavoritesRepository(session, owner_key)
