"""Entity kinds managed through media forms and their per-kind field schema."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from storefront.core.config import settings


class EntityKind(str, enum.Enum):
    """Content types a store owner can create and edit."""
    SHOT = "shot"
    SERVICE = "service"
    BLOG = "blog"


SHOT_CATEGORIES = [
    "Branding",
    "Product Design",
    "Animation",
    "Web Design",
    "Illustration",
    "Typography",
    "Mobile",
    "Print",
    "Photography",
    "Marketing",
    "UX/UI Design",
    "3D Design",
    "Game Design",
    "Motion Graphics",
    "Art Direction",
]

BLOG_CATEGORIES = [
    "Technology",
    "Design",
    "Development",
    "Business",
    "Marketing",
    "Lifestyle",
    "Tutorial",
    "News",
    "Opinion",
    "Review",
    "Case Study",
    "Industry Insights",
    "Tips & Tricks",
    "Best Practices",
    "Trends",
]


@dataclass(frozen=True, slots=True)
class KindSchema:
    """Field layout and backend routing for one entity kind."""
    kind: EntityKind
    collection: str
    media_field: str
    media_cap: int
    description_min_length: int
    category_required: bool = False
    has_category: bool = False
    categories: list[str] = field(default_factory=list)
    has_service_terms: bool = False

    @property
    def multi_media(self) -> bool:
        return self.media_cap > 1

    @property
    def tracks_deletions(self) -> bool:
        """Only multi-image forms send ``deletedImages[]``; single forms drop the reference."""
        return self.multi_media

    @property
    def label(self) -> str:
        return self.kind.value

    def create_path(self) -> str:
        return f"/{self.collection}"

    def item_path(self, entity_id: str) -> str:
        return f"/{self.collection}/{entity_id}"

    def admin_read_path(self, entity_id: str) -> str:
        return f"/{self.collection}/admin/get{self.kind.value}/{entity_id}"

    def like_path(self, entity_id: str) -> str:
        return f"/{self.collection}/{entity_id}/like"

    def describe(self) -> dict:
        return {
            "kind": self.kind.value,
            "collection": self.collection,
            "media_field": self.media_field,
            "media_cap": self.media_cap,
            "description_min_length": self.description_min_length,
            "category_required": self.category_required,
            "categories": list(self.categories),
        }


_SCHEMAS: dict[EntityKind, KindSchema] = {
    EntityKind.SHOT: KindSchema(
        kind=EntityKind.SHOT,
        collection="shots",
        media_field="mainImage",
        media_cap=1,
        description_min_length=10,
        has_category=True,
        categories=SHOT_CATEGORIES,
    ),
    EntityKind.SERVICE: KindSchema(
        kind=EntityKind.SERVICE,
        collection="services",
        media_field="images",
        media_cap=settings.max_service_images,
        description_min_length=10,
        has_service_terms=True,
    ),
    EntityKind.BLOG: KindSchema(
        kind=EntityKind.BLOG,
        collection="blogs",
        media_field="image",
        media_cap=1,
        description_min_length=20,
        category_required=True,
        has_category=True,
        categories=BLOG_CATEGORIES,
    ),
}


def get_schema(kind: EntityKind | str) -> KindSchema:
    """Return the schema for a kind, accepting enum values, kind names or collection names."""
    if isinstance(kind, EntityKind):
        return _SCHEMAS[kind]
    key = str(kind).strip().lower()
    for schema in _SCHEMAS.values():
        if key in (schema.kind.value, schema.collection):
            return schema
    raise ValueError(f"Unsupported entity kind {kind}")


def all_schemas() -> list[KindSchema]:
    return list(_SCHEMAS.values())
