from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import timedelta
from itertools import islice
from typing import Optional, Dict, List
from urllib.parse import quote

from minio import Minio
from minio.error import MinioException, S3Error
from urllib3.exceptions import HTTPError

from providers.storage import (
    ObjectHead,
    ObjectInfo,
    ObjectNotFoundError,
    StorageError,
    StorageProvider,
)

_NOT_FOUND_CODES = ("NoSuchKey", "NoSuchObject", "ResourceNotFound")
_META_PREFIX = "x-amz-meta-"
_SDK_ERRORS = (MinioException, HTTPError)

# Mirrors the single-page ListObjectsV2 behavior of the S3 provider.
LIST_PAGE_SIZE = 1000


def _strip_http(endpoint: str) -> str:
    # Minio client expects "host:port" (no scheme)
    endpoint = (endpoint or "").strip()
    endpoint = endpoint.replace("http://", "").replace("https://", "")
    endpoint = endpoint.rstrip("/")
    return endpoint


@dataclass
class MinioStorageProvider(StorageProvider):
    """
    MinIO-backed implementation of StorageProvider for the local stack.

    Env (see core.settings):
      - MINIO_ENDPOINT (e.g. http://minio:9000)
      - MINIO_BUCKET   (e.g. media)
      - MINIO_ACCESS_KEY
      - MINIO_SECRET_KEY

    The bucket is created on startup if missing.
    """

    endpoint: str
    bucket: str
    access_key: str
    secret_key: str
    region: Optional[str] = None

    def __post_init__(self) -> None:
        host = _strip_http(self.endpoint)
        if not host:
            raise RuntimeError("MINIO_ENDPOINT is empty or invalid")

        self.secure = self.endpoint.strip().lower().startswith("https://")
        self._client = Minio(
            endpoint=host,
            access_key=self.access_key,
            secret_key=self.secret_key,
            secure=self.secure,
            region=self.region or None,
        )

        try:
            if not self._client.bucket_exists(bucket_name=self.bucket):
                self._client.make_bucket(bucket_name=self.bucket)
        except Exception as e:
            raise RuntimeError(f"MinIO bucket init failed (bucket={self.bucket}): {e}") from e

    def public_url(self, key: str) -> str:
        base = self.endpoint.strip().rstrip("/")
        return f"{base}/{self.bucket}/{quote(key)}"

    def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        metadata: Optional[Dict[str, str]] = None,
    ) -> None:
        data = data or b""

        # metadata headers must be strings
        meta: Dict[str, str] = {}
        if metadata:
            for k, v in metadata.items():
                if v is None:
                    continue
                meta[str(k)] = str(v)

        try:
            self._client.put_object(
                bucket_name=self.bucket,
                object_name=key,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type or "application/octet-stream",
                metadata=meta or None,
            )
        except _SDK_ERRORS as e:
            raise StorageError(str(e)) from e

    def head_object(self, key: str) -> ObjectHead:
        try:
            stat = self._client.stat_object(bucket_name=self.bucket, object_name=key)
        except S3Error as e:
            if e.code in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(key) from e
            raise StorageError(str(e)) from e
        except _SDK_ERRORS as e:
            raise StorageError(str(e)) from e

        # stat.metadata holds raw response headers; user metadata is prefixed
        meta = {
            str(k)[len(_META_PREFIX):]: str(v)
            for k, v in (stat.metadata or {}).items()
            if str(k).lower().startswith(_META_PREFIX)
        }
        return ObjectHead(
            key=key,
            content_type=stat.content_type,
            content_length=stat.size,
            last_modified=stat.last_modified,
            metadata=meta,
        )

    def delete_object(self, key: str) -> None:
        try:
            self._client.remove_object(bucket_name=self.bucket, object_name=key)
        except S3Error as e:
            if e.code in _NOT_FOUND_CODES:
                return
            raise StorageError(str(e)) from e
        except _SDK_ERRORS as e:
            raise StorageError(str(e)) from e

    def list_objects(self, prefix: str = "") -> List[ObjectInfo]:
        try:
            objects = self._client.list_objects(
                bucket_name=self.bucket,
                prefix=prefix or None,
                recursive=True,
            )
            return [
                ObjectInfo(
                    key=obj.object_name,
                    last_modified=obj.last_modified,
                    size=int(obj.size or 0),
                )
                for obj in islice(objects, LIST_PAGE_SIZE)
                if not obj.is_dir
            ]
        except _SDK_ERRORS as e:
            raise StorageError(str(e)) from e

    def presign_url(self, key: str, ttl_seconds: int = 3600) -> str:
        try:
            return self._client.presigned_get_object(
                bucket_name=self.bucket,
                object_name=key,
                expires=timedelta(seconds=max(1, int(ttl_seconds))),
            )
        except _SDK_ERRORS as e:
            raise StorageError(str(e)) from e
