"""Media collector: type filtering, caps, ordering and staged deletions."""

from __future__ import annotations

import asyncio

import pytest

import storefront.forms.media as media_module
from storefront.forms.media import MediaCollector, MediaItem, UploadedFile
from storefront.tests.utils import jpeg, mp4, pdf


def _multi() -> MediaCollector:
    return MediaCollector(cap=5, track_deletions=True)


def _hydrated(count: int = 3) -> MediaCollector:
    collector = _multi()
    collector.hydrate([f"https://cdn.test/services/{index}.jpg" for index in range(count)])
    return collector


def test_media_item_requires_exactly_one_provenance() -> None:
    with pytest.raises(ValueError):
        MediaItem(id="x", mime_type="image/png", name="x")
    with pytest.raises(ValueError):
        MediaItem(
            id="x",
            mime_type="image/png",
            name="x",
            original_location="https://cdn.test/x.png",
            file=jpeg(),
        )


@pytest.mark.asyncio
async def test_accept_files_filters_unsupported_types() -> None:
    collector = _multi()

    added = await collector.accept_files([pdf(), jpeg(), mp4(), UploadedFile("movie.mov", "video/quicktime")])

    assert [item.mime_type for item in added] == ["image/jpeg", "video/mp4"]
    assert [item.is_video for item in collector.media] == [False, True]
    assert all(item.preview.startswith("data:") for item in collector.media)
    assert all(item.id.startswith("new-") for item in collector.media)


@pytest.mark.asyncio
async def test_batch_truncated_to_remaining_capacity() -> None:
    collector = _hydrated(3)

    batch = [jpeg(f"{index}.jpg") for index in range(4)]
    added = await collector.accept_files(batch)

    assert [item.name for item in added] == ["0.jpg", "1.jpg"]
    assert len(collector.media) == 5
    assert collector.accepting is False
    assert await collector.accept_files([jpeg("late.jpg")]) == []
    assert len(collector.media) == 5


@pytest.mark.asyncio
async def test_oversized_first_batch_keeps_leading_slice() -> None:
    collector = _multi()

    await collector.accept_files([jpeg(f"{index}.jpg") for index in range(8)])

    assert [item.name for item in collector.media] == [f"{index}.jpg" for index in range(5)]


@pytest.mark.asyncio
async def test_decode_order_follows_submission_order(monkeypatch: pytest.MonkeyPatch) -> None:
    delays = {"slow.jpg": 0.05, "fast.jpg": 0.0, "medium.jpg": 0.02}

    async def _uneven_decode(upload: UploadedFile) -> str:
        await asyncio.sleep(delays[upload.filename])
        return f"preview:{upload.filename}"

    monkeypatch.setattr(media_module, "decode_preview", _uneven_decode)
    collector = _multi()

    await collector.accept_files([jpeg("slow.jpg"), jpeg("fast.jpg"), jpeg("medium.jpg")])

    assert [item.name for item in collector.media] == ["slow.jpg", "fast.jpg", "medium.jpg"]
    assert collector.media[0].preview == "preview:slow.jpg"


@pytest.mark.asyncio
async def test_concurrent_batches_never_exceed_cap(monkeypatch: pytest.MonkeyPatch) -> None:
    observed: list[int] = []
    collector = _multi()

    async def _slow_decode(upload: UploadedFile) -> str:
        observed.append(len(collector.media) + collector.pending)
        await asyncio.sleep(0.01)
        return "preview"

    monkeypatch.setattr(media_module, "decode_preview", _slow_decode)

    await asyncio.gather(
        collector.accept_files([jpeg(f"a{index}.jpg") for index in range(3)]),
        collector.accept_files([jpeg(f"b{index}.jpg") for index in range(3)]),
    )

    assert len(collector.media) == 5
    assert max(observed) <= 5
    assert collector.pending == 0


@pytest.mark.asyncio
async def test_single_image_collector_replaces_current_item() -> None:
    collector = MediaCollector(cap=1)
    collector.hydrate(["https://cdn.test/shots/main.jpg"])

    added = await collector.accept_files([pdf(), jpeg("first.jpg"), jpeg("second.jpg")])

    assert [item.name for item in added] == ["first.jpg"]
    assert len(collector.media) == 1
    assert collector.media[0].is_existing is False
    assert collector.deleted_media_refs == []


@pytest.mark.asyncio
async def test_single_image_latest_pick_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    async def _decode(upload: UploadedFile) -> str:
        await asyncio.sleep(0.05 if upload.filename == "old.jpg" else 0.0)
        return upload.filename

    monkeypatch.setattr(media_module, "decode_preview", _decode)
    collector = MediaCollector(cap=1)

    await asyncio.gather(collector.accept_files([jpeg("old.jpg")]), collector.accept_files([jpeg("new.jpg")]))

    assert [item.name for item in collector.media] == ["new.jpg"]


def test_removing_existing_item_stages_one_deletion() -> None:
    collector = _hydrated(3)
    target = collector.media[1]

    assert collector.remove_media(target.id) is True
    assert collector.deleted_media_refs == [target.original_location]
    assert len(collector.media) == 2

    assert collector.remove_media(target.id) is False
    collector.remove_all()
    assert collector.deleted_media_refs.count(target.original_location) == 1
    assert len(collector.deleted_media_refs) == 3


@pytest.mark.asyncio
async def test_removing_new_item_restores_previous_state() -> None:
    collector = _hydrated(2)
    before_media = list(collector.media)
    before_refs = list(collector.deleted_media_refs)

    [added] = await collector.accept_files([jpeg()])
    collector.remove_media(added.id)

    assert collector.media == before_media
    assert collector.deleted_media_refs == before_refs


@pytest.mark.asyncio
async def test_remove_all_is_idempotent() -> None:
    collector = _hydrated(2)
    await collector.accept_files([jpeg()])

    collector.remove_all()
    first_refs = list(collector.deleted_media_refs)
    collector.remove_all()

    assert collector.media == []
    assert collector.deleted_media_refs == first_refs == [
        "https://cdn.test/services/0.jpg",
        "https://cdn.test/services/1.jpg",
    ]


def test_single_image_forms_do_not_track_deletions() -> None:
    collector = MediaCollector(cap=1)
    collector.hydrate(["https://cdn.test/blogs/cover.jpg"])

    collector.remove_all()

    assert collector.media == []
    assert collector.deleted_media_refs == []


@pytest.mark.asyncio
async def test_drag_lifecycle() -> None:
    collector = _multi()

    assert await collector.handle_drag("dragenter") is True
    assert collector.drag_active is True
    assert await collector.handle_drag("dragover") is True
    assert await collector.handle_drag("dragleave") is True
    assert collector.drag_active is False

    await collector.handle_drag("dragenter")
    assert await collector.handle_drag("drop", [jpeg(), pdf()]) is True
    assert collector.drag_active is False
    assert len(collector.media) == 1

    with pytest.raises(ValueError):
        await collector.handle_drag("dragstart")
