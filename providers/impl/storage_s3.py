from __future__ import annotations

import logging
from typing import Optional, Dict, Any, List

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from providers.storage import (
    ObjectHead,
    ObjectInfo,
    ObjectNotFoundError,
    StorageError,
    StorageProvider,
)

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _error_code(exc: ClientError) -> str:
    return str((exc.response or {}).get("Error", {}).get("Code", ""))


class S3StorageProvider(StorageProvider):
    """
    Native AWS S3 StorageProvider.

    Credentials come from AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY when
    given, otherwise from the regular boto3 resolution chain.

    Every call is attempted exactly once; faults are surfaced to the caller.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        client: Any = None,
    ):
        bucket = (bucket or "").strip()
        if not bucket:
            raise RuntimeError("S3_BUCKET_NAME is required for S3 storage provider")

        self.bucket = bucket
        self.region = (region or "").strip() or "us-east-1"

        if client is None:
            cfg = Config(
                retries={"total_max_attempts": 1, "mode": "standard"},
                region_name=self.region,
                signature_version="s3v4",
            )
            kwargs: Dict[str, Any] = {"config": cfg}
            if access_key_id and secret_access_key:
                kwargs["aws_access_key_id"] = access_key_id
                kwargs["aws_secret_access_key"] = secret_access_key
            if endpoint_url:
                kwargs["endpoint_url"] = endpoint_url
            client = boto3.client("s3", **kwargs)
        self.s3 = client

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        metadata: Optional[Dict[str, str]] = None,
    ) -> None:
        kwargs: Dict[str, Any] = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": data,
            "ContentType": content_type or "application/octet-stream",
        }
        if metadata:
            # S3 metadata keys must be strings
            kwargs["Metadata"] = {str(kk): str(vv) for kk, vv in metadata.items()}
        try:
            self.s3.put_object(**kwargs)
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(str(exc)) from exc

    def head_object(self, key: str) -> ObjectHead:
        try:
            resp = self.s3.head_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(key) from exc
            raise StorageError(str(exc)) from exc
        except BotoCoreError as exc:
            raise StorageError(str(exc)) from exc

        return ObjectHead(
            key=key,
            content_type=resp.get("ContentType"),
            content_length=resp.get("ContentLength"),
            last_modified=resp.get("LastModified"),
            metadata=resp.get("Metadata") or {},
        )

    def delete_object(self, key: str) -> None:
        try:
            self.s3.delete_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                logger.debug("delete of missing key %s treated as success", key)
                return
            raise StorageError(str(exc)) from exc
        except BotoCoreError as exc:
            raise StorageError(str(exc)) from exc

    def list_objects(self, prefix: str = "") -> List[ObjectInfo]:
        kwargs: Dict[str, Any] = {"Bucket": self.bucket}
        if prefix:
            kwargs["Prefix"] = prefix
        try:
            # Single page only; no continuation token handling.
            resp = self.s3.list_objects_v2(**kwargs)
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(str(exc)) from exc

        return [
            ObjectInfo(
                key=item["Key"],
                last_modified=item.get("LastModified"),
                size=int(item.get("Size") or 0),
            )
            for item in resp.get("Contents") or []
        ]

    def presign_url(self, key: str, ttl_seconds: int = 3600) -> str:
        try:
            return self.s3.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=max(1, int(ttl_seconds)),
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(str(exc)) from exc
