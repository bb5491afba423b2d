"""Form sessions: one generic media form per entity kind plus the open-session registry.

Invariants:
- A form is owned by exactly one session; nothing else mutates its state.
- Forms are discarded on close or after a successful submission; the backend
  stays the source of truth.
"""

from __future__ import annotations

import enum
import logging
import uuid
from typing import Any

from storefront.forms.kinds import EntityKind, KindSchema, get_schema
from storefront.forms.media import MediaCollector
from storefront.forms.tags import TagEditor
from storefront.forms.validation import validate

logger = logging.getLogger("storefront.forms")

SCALAR_FIELDS = ("title", "description", "category", "price", "concepts_and_revisions", "project_duration")


class FormPhase(str, enum.Enum):
    """Lifecycle of a form instance between user edits and submission."""
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    CLOSED = "closed"


class FormClosedError(Exception):
    """Raised when a closed form receives further edits."""


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


class MediaForm:
    """Add or edit form for a shot, service or blog."""

    def __init__(self, kind: EntityKind | str, *, entity_id: str | None = None, form_id: str | None = None) -> None:
        self.schema: KindSchema = get_schema(kind)
        self.id = form_id or uuid.uuid4().hex
        self.entity_id = entity_id
        self.title = ""
        self.description = ""
        self.category = ""
        self.price = ""
        self.concepts_and_revisions = ""
        self.project_duration = ""
        self.tag_editor = TagEditor()
        self.media = MediaCollector(cap=self.schema.media_cap, track_deletions=self.schema.tracks_deletions)
        self.phase = FormPhase.IDLE
        self.errors: dict[str, str] = {}
        self.submit_error = ""
        self.success_message = ""
        self.submitting = False

    @property
    def kind(self) -> EntityKind:
        return self.schema.kind

    @property
    def is_edit(self) -> bool:
        return self.entity_id is not None

    @property
    def tags(self) -> list[str]:
        return self.tag_editor.tags

    @property
    def closed(self) -> bool:
        return self.phase == FormPhase.CLOSED

    def ensure_open(self) -> None:
        if self.closed:
            raise FormClosedError(f"Form {self.id} is closed")

    def hydrate(self, entity: dict[str, Any]) -> None:
        """Populate the form from an entity fetched for editing."""
        self.title = _text(entity.get("title"))
        self.description = _text(entity.get("description"))
        self.tag_editor = TagEditor([tag for tag in entity.get("tags") or [] if isinstance(tag, str)])
        if self.schema.kind == EntityKind.BLOG:
            self.category = _text(entity.get("category"))
        if self.schema.has_service_terms:
            self.price = _text(entity.get("price"))
            self.concepts_and_revisions = _text(entity.get("conceptsAndRevisions"))
            self.project_duration = _text(entity.get("projectDuration"))
        media = entity.get(self.schema.media_field)
        if isinstance(media, list):
            self.media.hydrate(location for location in media if isinstance(location, str))
        elif isinstance(media, str):
            self.media.hydrate([media])

    def update_fields(self, **values: Any) -> None:
        self.ensure_open()
        for name, value in values.items():
            if name not in SCALAR_FIELDS:
                raise ValueError(f"Unknown form field {name}")
            if value is not None:
                setattr(self, name, _text(value))

    def validate(self) -> dict[str, str]:
        return validate(self)

    def snapshot(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "kind": self.kind.value,
            "entity_id": self.entity_id,
            "phase": self.phase.value,
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "tag_input": self.tag_editor.tag_input,
            "accepting_tags": self.tag_editor.accepting,
            "media": [item.to_dict() for item in self.media.media],
            "media_cap": self.media.cap,
            "pending_media": self.media.pending,
            "deleted_media_refs": list(self.media.deleted_media_refs),
            "drag_active": self.media.drag_active,
            "errors": dict(self.errors),
            "submit_error": self.submit_error,
            "success_message": self.success_message,
            "submitting": self.submitting,
        }
        if self.schema.has_category:
            payload["category"] = self.category
        if self.schema.has_service_terms:
            payload["price"] = self.price
            payload["concepts_and_revisions"] = self.concepts_and_revisions
            payload["project_duration"] = self.project_duration
        return payload


class FormRegistry:
    """In-process store of open form sessions keyed by form id."""

    def __init__(self) -> None:
        self._forms: dict[str, MediaForm] = {}

    def __len__(self) -> int:
        return len(self._forms)

    def open(self, kind: EntityKind | str, *, entity_id: str | None = None) -> MediaForm:
        form = MediaForm(kind, entity_id=entity_id)
        self._forms[form.id] = form
        logger.info("Opened %s form %s (entity=%s)", form.kind.value, form.id, entity_id or "new")
        return form

    def get(self, form_id: str) -> MediaForm | None:
        return self._forms.get(form_id)

    def close(self, form_id: str) -> bool:
        form = self._forms.pop(form_id, None)
        if form is None:
            return False
        form.phase = FormPhase.CLOSED
        logger.info("Closed %s form %s", form.kind.value, form_id)
        return True

    def clear(self) -> None:
        self._forms.clear()


form_registry = FormRegistry()
