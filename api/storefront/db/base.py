"""Import all models here for Alembic autogenerate."""

from storefront.db.base_class import Base
from storefront.models import favorite  # noqa: F401

__all__ = ["Base"]
