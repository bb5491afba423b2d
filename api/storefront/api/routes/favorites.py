from __future__ import annotations

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from storefront.api.deps import get_favorites
from storefront.schema.favorite import FavoriteCreate, FavoriteRead, FavoriteState, FavoriteToggle
from storefront.services.favorites_service import FavoritesRepository

router = APIRouter()


@router.get("", response_model=list[FavoriteRead])
async def list_favorites(repo: FavoritesRepository = Depends(get_favorites)) -> list[FavoriteRead]:
    favorites = await repo.list()
    return [FavoriteRead.model_validate(favorite) for favorite in favorites]


@router.post("", response_model=FavoriteRead, status_code=status.HTTP_201_CREATED)
async def add_favorite(payload: FavoriteCreate, repo: FavoritesRepository = Depends(get_favorites)) -> FavoriteRead:
    try:
        favorite = await repo.add(payload.item_id, kind=payload.kind, payload=payload.payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return FavoriteRead.model_validate(favorite)


@router.get("/{item_id}", response_model=FavoriteState)
async def favorite_state(item_id: str, repo: FavoritesRepository = Depends(get_favorites)) -> FavoriteState:
    return FavoriteState(item_id=item_id, is_favorite=await repo.is_favorite(item_id))


@router.post("/{item_id}/toggle", response_model=FavoriteState)
async def toggle_favorite(
    item_id: str,
    payload: FavoriteToggle | None = Body(default=None),
    repo: FavoritesRepository = Depends(get_favorites),
) -> FavoriteState:
    snapshot = payload or FavoriteToggle()
    try:
        state = await repo.toggle(item_id, kind=snapshot.kind, payload=snapshot.payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return FavoriteState(item_id=item_id, is_favorite=state)


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
async def remove_favorite(item_id: str, repo: FavoritesRepository = Depends(get_favorites)) -> None:
    if not await repo.remove(item_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Favorite not found")
