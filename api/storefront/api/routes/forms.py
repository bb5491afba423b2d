"""Form session endpoints backing the add/edit screens for shots, services and blogs."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from fastapi.responses import JSONResponse

from storefront.api.deps import get_backend_client, get_form, get_kind_schema
from storefront.backend.client import BackendClient
from storefront.backend.http import BackendError
from storefront.forms.kinds import KindSchema, all_schemas
from storefront.forms.media import UploadedFile
from storefront.forms.session import FormClosedError, MediaForm, form_registry
from storefront.forms.submission import SubmissionAssembler, SubmissionStatus, refetch_entity
from storefront.schema.forms import FormFieldsUpdate, FormRead, KindRead, SubmissionRead, TagCommit

router = APIRouter()

_OUTCOME_STATUS = {
    SubmissionStatus.INVALID: 422,
    SubmissionStatus.FAILED: status.HTTP_502_BAD_GATEWAY,
    SubmissionStatus.BUSY: status.HTTP_409_CONFLICT,
}


async def _read_uploads(files: list[UploadFile] | None) -> list[UploadedFile]:
    uploads: list[UploadedFile] = []
    for upload in files or []:
        content = await upload.read()
        uploads.append(
            UploadedFile(
                filename=upload.filename or "upload",
                content_type=upload.content_type or "",
                content=content,
            )
        )
    return uploads


def _read(form: MediaForm) -> FormRead:
    return FormRead.model_validate(form.snapshot())


def _ensure_open(form: MediaForm) -> None:
    try:
        form.ensure_open()
    except FormClosedError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.get("/kinds", response_model=list[KindRead])
async def list_kinds() -> list[KindRead]:
    """Describe the field layout of every form kind."""
    return [KindRead.model_validate(schema.describe()) for schema in all_schemas()]


@router.post("/{kind}", response_model=FormRead, status_code=status.HTTP_201_CREATED)
async def open_add_form(schema: KindSchema = Depends(get_kind_schema)) -> FormRead:
    """Open an empty form for creating a new entity."""
    form = form_registry.open(schema.kind)
    return _read(form)


@router.post("/{kind}/edit/{entity_id}", response_model=FormRead, status_code=status.HTTP_201_CREATED)
async def open_edit_form(
    entity_id: str,
    schema: KindSchema = Depends(get_kind_schema),
    client: BackendClient = Depends(get_backend_client),
) -> FormRead:
    """Open a form hydrated from the backend copy of an entity."""
    try:
        entity = await client.get_entity_for_edit(schema, entity_id)
    except BackendError as exc:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{schema.label} not found") from exc
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to load {schema.label} data."
        ) from exc
    if entity is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{schema.label} not found")
    form = form_registry.open(schema.kind, entity_id=entity_id)
    form.hydrate(entity)
    return _read(form)


@router.get("/{form_id}", response_model=FormRead)
async def read_form(form: MediaForm = Depends(get_form)) -> FormRead:
    return _read(form)


@router.patch("/{form_id}", response_model=FormRead)
async def update_form_fields(payload: FormFieldsUpdate, form: MediaForm = Depends(get_form)) -> FormRead:
    _ensure_open(form)
    try:
        form.update_fields(**payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _read(form)


@router.delete(
    "/{form_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
async def close_form(form_id: str) -> None:
    """Discard a form without submitting it."""
    if not form_registry.close(form_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Form not found")


@router.post("/{form_id}/tags", response_model=FormRead)
async def commit_tag(payload: TagCommit, form: MediaForm = Depends(get_form)) -> FormRead:
    """Type into the tag input and press a key; duplicates and overflow are ignored."""
    _ensure_open(form)
    form.tag_editor.tag_input = payload.value
    form.tag_editor.on_key_commit(payload.key)
    return _read(form)


@router.delete("/{form_id}/tags/{tag:path}", response_model=FormRead)
async def remove_tag(tag: str, form: MediaForm = Depends(get_form)) -> FormRead:
    _ensure_open(form)
    form.tag_editor.remove_tag(tag)
    return _read(form)


@router.post("/{form_id}/media", response_model=FormRead)
async def add_media(files: list[UploadFile] = File(...), form: MediaForm = Depends(get_form)) -> FormRead:
    """Accept picked files; unsupported types and overflow beyond the cap are dropped."""
    _ensure_open(form)
    await form.media.accept_files(await _read_uploads(files))
    return _read(form)


@router.delete("/{form_id}/media/{media_id}", response_model=FormRead)
async def remove_media(media_id: str, form: MediaForm = Depends(get_form)) -> FormRead:
    _ensure_open(form)
    if not form.media.remove_media(media_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Media item not found")
    return _read(form)


@router.delete("/{form_id}/media", response_model=FormRead)
async def remove_all_media(form: MediaForm = Depends(get_form)) -> FormRead:
    _ensure_open(form)
    form.media.remove_all()
    return _read(form)


@router.post("/{form_id}/drag/{event}")
async def drag_event(
    event: str,
    files: list[UploadFile] | None = File(default=None),
    form: MediaForm = Depends(get_form),
) -> dict:
    """Apply a drag lifecycle event; drops forward their files to the collector."""
    _ensure_open(form)
    try:
        prevent_default = await form.media.handle_drag(event, await _read_uploads(files))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return {"prevent_default": prevent_default, "form": _read(form).model_dump()}


@router.post("/{form_id}/submit", response_model=SubmissionRead)
async def submit_form(
    form: MediaForm = Depends(get_form),
    client: BackendClient = Depends(get_backend_client),
) -> SubmissionRead | JSONResponse:
    """Validate and send the form; the session closes only when the backend accepts it."""
    _ensure_open(form)
    assembler = SubmissionAssembler(client, on_success=refetch_entity(client))
    outcome = await assembler.submit(form)
    if outcome.ok:
        form_registry.close(form.id)
        return SubmissionRead.model_validate(outcome.to_dict())
    return JSONResponse(status_code=_OUTCOME_STATUS[outcome.status], content=outcome.to_dict())
