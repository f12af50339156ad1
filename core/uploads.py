from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile


class UploadTooLargeError(Exception):
    def __init__(self, limit: int):
        super().__init__(f"File too large (limit {limit} bytes)")
        self.limit = limit


@dataclass(frozen=True)
class UploadedFile:
    """A multipart file read fully into memory."""
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def has_file(file: Optional[UploadFile]) -> bool:
    # Browsers send an empty part with no filename when nothing is selected
    return file is not None and bool(file.filename)


async def read_upload(file: UploadFile, max_bytes: int) -> UploadedFile:
    """
    Read the whole upload into memory, refusing anything over max_bytes.

    The multipart parser has already spooled the whole part to a temporary
    file before the handler runs; this only caps how much of it is loaded
    into memory (at most max_bytes + 1) before the ceiling is checked.
    """
    data = await file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise UploadTooLargeError(max_bytes)
    return UploadedFile(
        filename=file.filename or "",
        content_type=file.content_type or "application/octet-stream",
        data=data,
    )
