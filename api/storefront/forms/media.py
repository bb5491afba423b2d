"""Media collection for add/edit forms: provenance tracking and staged deletions.

Invariants:
- Every item is either new (carries a file payload) or existing (carries the
  server-side location); never both, never neither.
- ``len(media)`` never exceeds the configured cap, counting decodes still in flight.
- Staged deletions only come from user removals of existing items.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import uuid
from dataclasses import dataclass, field
from typing import Iterable, Sequence

logger = logging.getLogger("storefront.forms.media")

DRAG_EVENTS = frozenset({"dragenter", "dragover", "dragleave", "drop"})
EXISTING_MEDIA_TYPE = "image/jpeg"


@dataclass(slots=True)
class UploadedFile:
    """Raw upload payload as received from a drop or file picker."""
    filename: str
    content_type: str
    content: bytes = b""

    @property
    def size(self) -> int:
        return len(self.content)


def is_accepted_type(content_type: str | None) -> bool:
    """Images of any subtype and mp4 video are accepted; everything else is dropped."""
    if not content_type:
        return False
    return content_type.startswith("image/") or content_type == "video/mp4"


@dataclass(slots=True)
class MediaItem:
    """One media asset shown in a form, either persisted or staged for upload."""
    id: str
    mime_type: str
    name: str
    preview: str | None = None
    original_location: str | None = None
    file: UploadedFile | None = None

    def __post_init__(self) -> None:
        if (self.file is None) == (self.original_location is None):
            raise ValueError("Media item needs exactly one of file or original_location")

    @property
    def is_existing(self) -> bool:
        return self.original_location is not None

    @property
    def is_video(self) -> bool:
        return not self.mime_type.startswith("image/")

    @classmethod
    def existing(cls, index: int, location: str) -> "MediaItem":
        return cls(
            id=f"existing-{index}",
            mime_type=EXISTING_MEDIA_TYPE,
            name=f"image-{index + 1}",
            preview=location,
            original_location=location,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "mime_type": self.mime_type,
            "name": self.name,
            "preview": self.preview,
            "is_existing": self.is_existing,
            "original_location": self.original_location,
            "size": self.file.size if self.file else None,
        }


def _to_data_url(upload: UploadedFile) -> str:
    encoded = base64.b64encode(upload.content).decode("ascii")
    return f"data:{upload.content_type};base64,{encoded}"


async def decode_preview(upload: UploadedFile) -> str:
    """Decode a file into an inline preview off the event loop."""
    return await asyncio.to_thread(_to_data_url, upload)


def _new_item_id() -> str:
    return f"new-{uuid.uuid4().hex[:12]}"


@dataclass
class MediaCollector:
    """Ordered media list bounded by ``cap`` with staged deletions of existing items."""
    cap: int = 1
    track_deletions: bool = False
    media: list[MediaItem] = field(default_factory=list)
    deleted_media_refs: list[str] = field(default_factory=list)
    drag_active: bool = False
    _pending: int = field(default=0, init=False, repr=False)
    _generation: int = field(default=0, init=False, repr=False)

    @property
    def multi(self) -> bool:
        return self.cap > 1

    @property
    def pending(self) -> int:
        """Number of accepted files whose previews are still decoding."""
        return self._pending

    @property
    def remaining(self) -> int:
        if not self.multi:
            return 1
        return max(self.cap - len(self.media) - self._pending, 0)

    @property
    def accepting(self) -> bool:
        return self.remaining > 0

    def hydrate(self, locations: Iterable[str | None]) -> None:
        """Load server-side media references as existing items."""
        items = [
            MediaItem.existing(index, location)
            for index, location in enumerate(locations)
            if location
        ]
        self.media = items[: self.cap]
        self.deleted_media_refs = []

    def new_files(self) -> list[UploadedFile]:
        return [item.file for item in self.media if item.file is not None]

    def find(self, media_id: str) -> MediaItem | None:
        return next((item for item in self.media if item.id == media_id), None)

    async def accept_files(self, files: Sequence[UploadedFile]) -> list[MediaItem]:
        """Accept a dropped or picked batch and return the items added.

        Unsupported types are dropped. Multi-image collectors keep only the
        leading slice that fits the remaining capacity; single-image
        collectors replace the current item with the first accepted file.
        """
        accepted = [upload for upload in files if is_accepted_type(upload.content_type)]
        rejected = len(files) - len(accepted)
        if rejected:
            logger.debug("Dropped %d file(s) with unsupported types", rejected)
        if not accepted:
            return []
        if self.multi:
            return await self._append_batch(accepted)
        return await self._replace_single(accepted[0])

    async def _append_batch(self, accepted: list[UploadedFile]) -> list[MediaItem]:
        batch = accepted[: self.remaining]
        if len(batch) < len(accepted):
            logger.info(
                "Truncated media batch from %d to %d file(s) to respect cap of %d",
                len(accepted),
                len(batch),
                self.cap,
            )
        if not batch:
            return []
        # Reserve slots before suspending so concurrent batches cannot overflow the cap.
        self._pending += len(batch)
        try:
            previews = await asyncio.gather(*(decode_preview(upload) for upload in batch))
        finally:
            self._pending -= len(batch)
        items = [
            MediaItem(
                id=_new_item_id(),
                mime_type=upload.content_type,
                name=upload.filename,
                preview=preview,
                file=upload,
            )
            for upload, preview in zip(batch, previews)
        ]
        self.media.extend(items)
        return items

    async def _replace_single(self, upload: UploadedFile) -> list[MediaItem]:
        self._generation += 1
        generation = self._generation
        self._pending += 1
        try:
            preview = await decode_preview(upload)
        finally:
            self._pending -= 1
        if generation != self._generation:
            # A later pick superseded this one while it was decoding.
            return []
        item = MediaItem(
            id=_new_item_id(),
            mime_type=upload.content_type,
            name=upload.filename,
            preview=preview,
            file=upload,
        )
        self.media = [item]
        return [item]

    def remove_media(self, media_id: str) -> bool:
        item = self.find(media_id)
        if item is None:
            return False
        if item.is_existing:
            self._stage_deletion(item)
        self.media = [candidate for candidate in self.media if candidate.id != media_id]
        return True

    def remove_all(self) -> None:
        for item in self.media:
            if item.is_existing:
                self._stage_deletion(item)
        self.media = []

    def _stage_deletion(self, item: MediaItem) -> None:
        if not self.track_deletions:
            return
        location = item.original_location
        if location and location not in self.deleted_media_refs:
            self.deleted_media_refs.append(location)

    async def handle_drag(self, event_type: str, files: Sequence[UploadedFile] | None = None) -> bool:
        """Apply a drag lifecycle event; returns True because the default action must be prevented."""
        if event_type not in DRAG_EVENTS:
            raise ValueError(f"Unsupported drag event {event_type}")
        if event_type in ("dragenter", "dragover"):
            self.drag_active = True
        elif event_type == "dragleave":
            self.drag_active = False
        else:
            self.drag_active = False
            if files:
                await self.accept_files(files)
        return True
