from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, runtime_checkable, Optional, Dict, List


class StorageError(Exception):
    """Any fault raised by the object store SDK."""


class ObjectNotFoundError(StorageError):
    def __init__(self, key: str):
        super().__init__(f"Object not found: {key}")
        self.key = key


@dataclass(frozen=True)
class ObjectInfo:
    """One row of a bucket listing."""
    key: str
    last_modified: Optional[datetime]
    size: int


@dataclass(frozen=True)
class ObjectHead:
    key: str
    content_type: Optional[str] = None
    content_length: Optional[int] = None
    last_modified: Optional[datetime] = None
    metadata: Dict[str, str] = field(default_factory=dict)


@runtime_checkable
class StorageProvider(Protocol):
    """
    Object storage abstraction.

    Contract:
      - head_object raises ObjectNotFoundError when the key does not exist
      - delete_object of a missing key returns normally
      - every other SDK fault surfaces as StorageError
      - list_objects returns a single page, in the order the store reports it
    """

    def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        metadata: Optional[Dict[str, str]] = None,
    ) -> None: ...

    def head_object(self, key: str) -> ObjectHead: ...

    def delete_object(self, key: str) -> None: ...

    def list_objects(self, prefix: str = "") -> List[ObjectInfo]: ...

    def presign_url(self, key: str, ttl_seconds: int = 3600) -> str: ...

    def public_url(self, key: str) -> str: ...
