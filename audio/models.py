# backend/audio/models.py
from __future__ import annotations

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class AudioUploadResponse(BaseModel):
    """
    Returned by POST /api/audio (201).

    id is the opaque identifier (key without the "audio/" prefix);
    name is the filename the uploader supplied.
    """
    id: str
    name: str
    audioUrl: str
    createdAt: str  # ISO timestamp, millisecond precision
    size: int
    type: str  # content type


class AudioListItem(BaseModel):
    id: str
    name: str
    url: str
    lastModified: Optional[datetime] = None
    size: int
    type: str  # extension taken from the key


class AudioDetail(BaseModel):
    id: str
    name: str
    url: str
