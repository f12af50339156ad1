# backend/videos/router.py
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, File, UploadFile

from core.deps import SettingsDep, StorageDep
from core.errors import client_error, dependency_error
from core.naming import plain_key
from core.uploads import UploadTooLargeError, has_file, read_upload
from providers.storage import ObjectInfo, StorageError, StorageProvider
from videos.models import VideoListItem, VideoUploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["videos"])

UPLOAD_PATH = "/upload"
UPLOAD_ERROR_LABEL = "Upload error"


# ---------------------------------------------------------------------
# POST /upload   plain upload, public URL
# ---------------------------------------------------------------------

@router.post(UPLOAD_PATH, response_model=VideoUploadResponse)
async def upload_video(
    storage: StorageDep,
    settings: SettingsDep,
    video: Optional[UploadFile] = File(None),
):
    if not has_file(video):
        raise client_error("No file uploaded")

    try:
        upload = await read_upload(video, settings.uploads.video_max_bytes)
    except UploadTooLargeError as exc:
        raise client_error(UPLOAD_ERROR_LABEL, str(exc))

    key = plain_key(upload.filename)
    try:
        await asyncio.to_thread(
            storage.put_object,
            key=key,
            data=upload.data,
            content_type=upload.content_type,
        )
    except StorageError as exc:
        raise dependency_error("Upload failed", exc)

    logger.info("stored video key=%s size=%s", key, upload.size)
    return VideoUploadResponse(
        message="Upload successful",
        location=storage.public_url(key),
        key=key,
    )


# ---------------------------------------------------------------------
# GET /videos   every object in the bucket with a signed URL
# ---------------------------------------------------------------------

async def _signed_item(storage: StorageProvider, obj: ObjectInfo, ttl: int) -> VideoListItem:
    url = await asyncio.to_thread(storage.presign_url, obj.key, ttl)
    return VideoListItem(
        name=obj.key,
        url=url,
        lastModified=obj.last_modified,
        size=obj.size,
    )


@router.get("/videos", response_model=List[VideoListItem])
async def list_videos(storage: StorageDep, settings: SettingsDep):
    ttl = settings.storage.signed_url_ttl_seconds
    try:
        objects = await asyncio.to_thread(storage.list_objects)
        # All-or-nothing: one failed signature fails the listing
        return await asyncio.gather(*(_signed_item(storage, obj, ttl) for obj in objects))
    except StorageError as exc:
        raise dependency_error("Failed to fetch videos", exc)
