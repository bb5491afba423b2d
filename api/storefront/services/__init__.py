from . import catalog_service, favorites_service

__all__ = ["catalog_service", "favorites_service"]
