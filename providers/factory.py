from __future__ import annotations

import logging
from dataclasses import dataclass

from core.settings import Settings
from .storage import StorageProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Providers:
    """
    Central container for providers.

    Built once at startup and attached to app.state; never rebuilt.
    """
    settings: Settings
    storage: StorageProvider


def build_storage(settings: Settings) -> StorageProvider:
    s = settings.storage
    if s.provider == "minio":
        from providers.impl.storage_minio import MinioStorageProvider

        if not s.minio_access_key or not s.minio_secret_key:
            raise RuntimeError("MINIO_ACCESS_KEY / MINIO_SECRET_KEY not set")
        logger.info("storage backend=minio endpoint=%s bucket=%s", s.minio_endpoint, s.minio_bucket)
        return MinioStorageProvider(
            endpoint=s.minio_endpoint,
            bucket=s.minio_bucket,
            access_key=s.minio_access_key,
            secret_key=s.minio_secret_key,
            region=s.region,
        )

    from providers.impl.storage_s3 import S3StorageProvider

    logger.info("storage backend=s3 region=%s bucket=%s", s.region, s.bucket)
    return S3StorageProvider(
        bucket=s.bucket,
        region=s.region,
        access_key_id=s.access_key_id,
        secret_access_key=s.secret_access_key,
        endpoint_url=s.endpoint_url,
    )


def build_providers(settings: Settings) -> Providers:
    return Providers(settings=settings, storage=build_storage(settings))
