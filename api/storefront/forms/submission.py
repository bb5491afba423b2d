"""Serialize a media form into a multipart payload and send it to the backend.

Implementation notes:
- Scalars go out as plain fields, tags as repeated ``tags[]`` entries in order,
  new files under the kind's media field and staged deletions under
  ``deletedImages[]``.
- Submissions are never retried; a failure keeps the form untouched so the
  user can resubmit.
- On success the form is closed and state is re-read through a refetch
  callback instead of merging the submission locally.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from storefront.backend.client import BackendClient
from storefront.backend.http import BackendError
from storefront.forms.media import UploadedFile
from storefront.forms.session import FormPhase, MediaForm

logger = logging.getLogger("storefront.forms.submission")

TAGS_FIELD = "tags[]"
DELETED_MEDIA_FIELD = "deletedImages[]"

RefetchCallback = Callable[[MediaForm, dict[str, Any]], Awaitable[Any]]


class SubmissionStatus(str, enum.Enum):
    """Terminal result of one submit attempt."""
    SUCCEEDED = "succeeded"
    INVALID = "invalid"
    FAILED = "failed"
    BUSY = "busy"


@dataclass(slots=True)
class SubmissionOutcome:
    status: SubmissionStatus
    message: str = ""
    errors: dict[str, str] = field(default_factory=dict)
    entity: dict[str, Any] | None = None
    refreshed: Any = None

    @property
    def ok(self) -> bool:
        return self.status == SubmissionStatus.SUCCEEDED

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "errors": dict(self.errors),
            "entity": self.entity,
            "refreshed": self.refreshed,
        }


@dataclass(slots=True)
class MultipartPayload:
    """Ordered multipart body: plain fields first, then file parts."""
    fields: list[tuple[str, str]] = field(default_factory=list)
    files: list[tuple[str, UploadedFile]] = field(default_factory=list)

    def add(self, name: str, value: str) -> None:
        self.fields.append((name, value))

    def add_file(self, name: str, upload: UploadedFile) -> None:
        self.files.append((name, upload))

    def values(self, name: str) -> list[str]:
        return [value for key, value in self.fields if key == name]

    def file_parts(self, name: str) -> list[UploadedFile]:
        return [upload for key, upload in self.files if key == name]

    def names(self) -> list[str]:
        return [key for key, _ in self.fields] + [key for key, _ in self.files]

    def to_parts(self) -> list[tuple[str, tuple]]:
        """Render as httpx ``files`` entries so the body is multipart even without uploads."""
        parts: list[tuple[str, tuple]] = [(name, (None, value)) for name, value in self.fields]
        parts.extend(
            (name, (upload.filename, upload.content, upload.content_type)) for name, upload in self.files
        )
        return parts


def build_payload(form: MediaForm) -> MultipartPayload:
    schema = form.schema
    payload = MultipartPayload()
    payload.add("title", form.title)
    if schema.category_required or (schema.has_category and form.category.strip()):
        payload.add("category", form.category)
    for tag in form.tags:
        payload.add(TAGS_FIELD, tag)
    if schema.has_service_terms:
        payload.add("price", form.price)
        payload.add("conceptsAndRevisions", form.concepts_and_revisions)
        payload.add("projectDuration", form.project_duration)
    payload.add("description", form.description)
    if schema.tracks_deletions:
        for location in form.media.deleted_media_refs:
            payload.add(DELETED_MEDIA_FIELD, location)
    for upload in form.media.new_files()[: schema.media_cap]:
        payload.add_file(schema.media_field, upload)
    return payload


def _entity_id(form: MediaForm, data: dict[str, Any]) -> str | None:
    if form.entity_id:
        return form.entity_id
    body = data.get("data") if isinstance(data.get("data"), dict) else data
    candidate = body.get("_id") or body.get("id")
    return str(candidate) if candidate else None


def refetch_entity(client: BackendClient) -> RefetchCallback:
    """Build a callback that re-reads the submitted entity from the backend."""

    async def _refetch(form: MediaForm, data: dict[str, Any]) -> dict[str, Any] | None:
        entity_id = _entity_id(form, data)
        if not entity_id:
            return None
        return await client.get_entity(form.schema, entity_id)

    return _refetch


class SubmissionAssembler:
    """Run validation and, when clean, one create or update call for a form."""

    def __init__(self, client: BackendClient, *, on_success: RefetchCallback | None = None) -> None:
        self.client = client
        self.on_success = on_success

    async def submit(self, form: MediaForm) -> SubmissionOutcome:
        form.ensure_open()
        if form.submitting:
            return SubmissionOutcome(SubmissionStatus.BUSY, message="Submission already in progress.")
        form.phase = FormPhase.VALIDATING
        form.submit_error = ""
        form.success_message = ""
        errors = form.validate()
        form.errors = errors
        if errors:
            form.phase = FormPhase.IDLE
            return SubmissionOutcome(SubmissionStatus.INVALID, errors=dict(errors))

        label = form.schema.label
        verb = "update" if form.is_edit else "submit"
        form.submitting = True
        form.phase = FormPhase.SUBMITTING
        try:
            parts = build_payload(form).to_parts()
            if form.is_edit:
                data = await self.client.update(form.schema, form.entity_id, parts)
            else:
                data = await self.client.create(form.schema, parts)
        except BackendError as exc:
            suffix = f" (status {exc.status_code})" if exc.status_code else ""
            form.submit_error = f"Error: Failed to {verb} {label}{suffix}"
            form.phase = FormPhase.IDLE
            logger.warning("Submitting %s form %s failed: %s", label, form.id, exc)
            return SubmissionOutcome(SubmissionStatus.FAILED, message=form.submit_error)
        finally:
            form.submitting = False

        done = "updated" if form.is_edit else "created"
        form.success_message = f"Successfully {done} {label}: {form.title}"
        form.phase = FormPhase.CLOSED
        logger.info("Submitted %s form %s", label, form.id)
        refreshed = None
        if self.on_success is not None:
            try:
                refreshed = await self.on_success(form, data)
            except BackendError as exc:
                logger.warning("Refetch after %s submission failed: %s", label, exc)
        entity = data.get("data") if isinstance(data.get("data"), dict) else (data or None)
        return SubmissionOutcome(
            SubmissionStatus.SUCCEEDED, message=form.success_message, entity=entity, refreshed=refreshed
        )
