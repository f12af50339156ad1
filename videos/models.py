# backend/videos/models.py
from __future__ import annotations

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class VideoUploadResponse(BaseModel):
    message: str
    location: str  # public URL, no signing
    key: str


class VideoListItem(BaseModel):
    """
    One object in the bucket listing with a freshly minted signed URL.
    """
    name: str  # object key
    url: str
    lastModified: Optional[datetime] = None
    size: int
