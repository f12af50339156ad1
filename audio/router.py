# backend/audio/router.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, File, Response, UploadFile, status

from core.deps import SettingsDep, StorageDep
from core.errors import client_error, dependency_error
from core.uploads import UploadTooLargeError, has_file, read_upload
from providers.storage import ObjectNotFoundError, StorageError
from audio import service
from audio.models import AudioDetail, AudioListItem, AudioUploadResponse

router = APIRouter(prefix="/api/audio", tags=["audio"])

UPLOAD_PATH = "/api/audio"
UPLOAD_ERROR_LABEL = "Audio upload error"


# ---------------------------------------------------------------------
# POST /api/audio   upload + signed URL
# ---------------------------------------------------------------------

@router.post("", response_model=AudioUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_audio(
    storage: StorageDep,
    settings: SettingsDep,
    audio: Optional[UploadFile] = File(None),
):
    if not has_file(audio):
        raise client_error("No audio file uploaded")

    try:
        upload = await read_upload(audio, settings.uploads.audio_max_bytes)
    except UploadTooLargeError as exc:
        raise client_error(UPLOAD_ERROR_LABEL, str(exc))

    try:
        return await service.store_audio(storage, upload, settings.storage.signed_url_ttl_seconds)
    except StorageError as exc:
        raise dependency_error("Audio upload failed", exc)


# ---------------------------------------------------------------------
# GET /api/audio   list with recovered names
# ---------------------------------------------------------------------

@router.get("", response_model=List[AudioListItem])
async def list_audio(storage: StorageDep, settings: SettingsDep):
    try:
        return await service.list_audio(storage, settings.storage.signed_url_ttl_seconds)
    except StorageError as exc:
        raise dependency_error("Failed to fetch audio recordings", exc)


# ---------------------------------------------------------------------
# GET /api/audio/{audio_id}   one signed URL
# ---------------------------------------------------------------------

@router.get("/{audio_id}", response_model=AudioDetail)
async def get_audio(audio_id: str, storage: StorageDep, settings: SettingsDep):
    try:
        return await service.get_audio(storage, audio_id, settings.storage.signed_url_ttl_seconds)
    except ObjectNotFoundError:
        raise client_error("Audio recording not found", status_code=status.HTTP_404_NOT_FOUND)
    except StorageError as exc:
        raise dependency_error("Failed to fetch audio recording", exc)


# ---------------------------------------------------------------------
# DELETE /api/audio/{audio_id}   idempotent delete
# ---------------------------------------------------------------------

@router.delete("/{audio_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_audio(audio_id: str, storage: StorageDep):
    try:
        await service.delete_audio(storage, audio_id)
    except StorageError as exc:
        raise dependency_error("Failed to delete audio recording", exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
