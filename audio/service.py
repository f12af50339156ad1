# backend/audio/service.py
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional
from urllib.parse import quote, unquote

from core.naming import (
    AUDIO_PREFIX,
    audio_identifier,
    audio_key,
    extension_of,
    iso_timestamp,
    trailing_segment,
)
from core.uploads import UploadedFile
from providers.storage import ObjectHead, ObjectInfo, StorageError, StorageProvider
from audio.models import AudioDetail, AudioListItem, AudioUploadResponse

logger = logging.getLogger(__name__)

ORIGINAL_NAME_META = "originalname"


def encode_name(name: str) -> str:
    """
    Percent-encode a filename for use as an object metadata value.

    S3 user metadata travels as HTTP headers and must be ASCII.
    """
    return quote(name, safe="")


def original_name(head: ObjectHead, fallback: str) -> str:
    """
    Display name stored at upload time, or fallback when the attribute is missing.
    """
    stored = (head.metadata or {}).get(ORIGINAL_NAME_META)
    return unquote(stored) if stored else fallback


async def store_audio(storage: StorageProvider, upload: UploadedFile, ttl: int) -> AudioUploadResponse:
    identifier = audio_identifier(upload.filename)
    key = audio_key(identifier)

    await asyncio.to_thread(
        storage.put_object,
        key=key,
        data=upload.data,
        content_type=upload.content_type,
        metadata={ORIGINAL_NAME_META: encode_name(upload.filename)},
    )
    url = await asyncio.to_thread(storage.presign_url, key, ttl)

    logger.info("stored audio key=%s size=%s", key, upload.size)
    return AudioUploadResponse(
        id=identifier,
        name=upload.filename,
        audioUrl=url,
        createdAt=iso_timestamp(),
        size=upload.size,
        type=upload.content_type,
    )


async def _describe(storage: StorageProvider, obj: ObjectInfo, ttl: int) -> Optional[AudioListItem]:
    identifier = trailing_segment(obj.key)
    try:
        head = await asyncio.to_thread(storage.head_object, obj.key)
        url = await asyncio.to_thread(storage.presign_url, obj.key, ttl)
    except StorageError as exc:
        # Drop this object only; the rest of the listing survives
        logger.warning("skipping %s: metadata fetch failed: %s", obj.key, exc)
        return None

    return AudioListItem(
        id=identifier,
        name=original_name(head, identifier),
        url=url,
        lastModified=obj.last_modified,
        size=obj.size,
        type=extension_of(obj.key),
    )


async def list_audio(storage: StorageProvider, ttl: int) -> List[AudioListItem]:
    """
    Every object under audio/ with its recovered name and a signed URL.

    Enumeration faults propagate; per-object faults drop that object.
    Order follows the storage listing.
    """
    objects = await asyncio.to_thread(storage.list_objects, AUDIO_PREFIX)
    items = await asyncio.gather(*(_describe(storage, obj, ttl) for obj in objects))
    return [item for item in items if item is not None]


async def get_audio(storage: StorageProvider, identifier: str, ttl: int) -> AudioDetail:
    key = audio_key(identifier)
    head = await asyncio.to_thread(storage.head_object, key)
    url = await asyncio.to_thread(storage.presign_url, key, ttl)
    return AudioDetail(id=identifier, name=original_name(head, identifier), url=url)


async def delete_audio(storage: StorageProvider, identifier: str) -> None:
    await asyncio.to_thread(storage.delete_object, audio_key(identifier))
    logger.info("deleted audio key=%s", audio_key(identifier))
