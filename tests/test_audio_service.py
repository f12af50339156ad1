import asyncio
import time

import pytest

from audio import service
from core.uploads import UploadedFile
from providers.storage import ObjectHead, ObjectNotFoundError


def test_original_name_prefers_metadata():
    head = ObjectHead(key="audio/1-x.wav", metadata={"originalname": "Interview.wav"})
    assert service.original_name(head, "1-x.wav") == "Interview.wav"


def test_original_name_falls_back_when_attribute_missing_or_empty():
    assert service.original_name(ObjectHead(key="k"), "fallback.wav") == "fallback.wav"
    head = ObjectHead(key="k", metadata={"originalname": ""})
    assert service.original_name(head, "fallback.wav") == "fallback.wav"


@pytest.mark.asyncio
async def test_store_audio_writes_metadata_then_signs(fake_storage):
    upload = UploadedFile(filename="take 2.flac", content_type="audio/flac", data=b"abc")

    out = await service.store_audio(fake_storage, upload, ttl=60)

    key = f"audio/{out.id}"
    assert fake_storage.calls == [("put", key), ("presign", key)]
    assert out.id.endswith(".flac")
    assert out.name == "take 2.flac"
    assert out.audioUrl.endswith("?expires=60")


@pytest.mark.asyncio
async def test_list_audio_keeps_listing_order_when_lookups_finish_out_of_order(fake_storage, monkeypatch):
    for i in range(5):
        fake_storage.put_object(f"audio/{i}-f.wav", b"x", "audio/wav", {"originalname": f"n{i}.wav"})

    real_head = fake_storage.head_object

    def slow_head(key):
        # earlier keys take longer
        time.sleep(0.01 * (5 - int(key.split("/")[1][0])))
        return real_head(key)

    monkeypatch.setattr(fake_storage, "head_object", slow_head)

    items = await service.list_audio(fake_storage, ttl=3600)

    assert [i.id for i in items] == [f"{i}-f.wav" for i in range(5)]
    assert [i.name for i in items] == [f"n{i}.wav" for i in range(5)]


@pytest.mark.asyncio
async def test_list_audio_drops_object_whose_head_reports_missing(fake_storage, monkeypatch):
    fake_storage.put_object("audio/1-a.wav", b"x", "audio/wav", {"originalname": "a.wav"})
    fake_storage.put_object("audio/2-b.wav", b"x", "audio/wav", {"originalname": "b.wav"})

    real_head = fake_storage.head_object

    def racing_head(key):
        # deleted between listing and head
        if key == "audio/1-a.wav":
            raise ObjectNotFoundError(key)
        return real_head(key)

    monkeypatch.setattr(fake_storage, "head_object", racing_head)

    items = await service.list_audio(fake_storage, ttl=3600)

    assert [i.name for i in items] == ["b.wav"]


@pytest.mark.asyncio
async def test_get_audio_raises_typed_not_found(fake_storage):
    with pytest.raises(ObjectNotFoundError):
        await service.get_audio(fake_storage, "missing.wav", ttl=3600)


@pytest.mark.asyncio
async def test_concurrent_uploads_get_distinct_identifiers(fake_storage):
    upload = UploadedFile(filename="same.wav", content_type="audio/wav", data=b"x")

    results = await asyncio.gather(*(service.store_audio(fake_storage, upload, ttl=10) for _ in range(10)))

    assert len({r.id for r in results}) == 10
