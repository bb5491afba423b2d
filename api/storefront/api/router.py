"""API router composition for all route groups."""

from fastapi import APIRouter

from .routes import catalog, favorites, forms

api_router = APIRouter()
api_router.include_router(forms.router, prefix="/forms", tags=["forms"])
api_router.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
api_router.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
