"""Form session request/response schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class KindRead(BaseModel):
    """Field layout of one entity kind."""
    kind: str
    collection: str
    media_field: str
    media_cap: int
    description_min_length: int
    category_required: bool
    categories: list[str] = Field(default_factory=list)


class MediaItemRead(BaseModel):
    id: str
    mime_type: str
    name: str
    preview: str | None = None
    is_existing: bool
    original_location: str | None = None
    size: int | None = None


class FormRead(BaseModel):
    """Current state of an open form session."""
    id: str
    kind: str
    entity_id: str | None = None
    phase: str
    title: str
    description: str
    tags: list[str]
    tag_input: str
    accepting_tags: bool
    media: list[MediaItemRead]
    media_cap: int
    pending_media: int
    deleted_media_refs: list[str]
    drag_active: bool
    errors: dict[str, str]
    submit_error: str
    success_message: str
    submitting: bool
    category: str | None = None
    price: str | None = None
    concepts_and_revisions: str | None = None
    project_duration: str | None = None


class FormFieldsUpdate(BaseModel):
    """Scalar field edits; omitted fields are left unchanged."""
    title: str | None = None
    description: str | None = None
    category: str | None = None
    price: str | None = None
    concepts_and_revisions: str | None = None
    project_duration: str | None = None


class TagCommit(BaseModel):
    """Tag input text plus the key that committed it."""
    value: str = Field(max_length=64)
    key: str = "Enter"


class SubmissionRead(BaseModel):
    status: str
    message: str = ""
    errors: dict[str, str] = Field(default_factory=dict)
    entity: dict[str, Any] | None = None
    refreshed: Any = None
