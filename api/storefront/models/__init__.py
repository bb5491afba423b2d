from storefront.models.favorite import Favorite

__all__ = ["Favorite"]
