from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else str(v)


def _env_int(name: str, default: int) -> int:
    raw = _env(name, "")
    if not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _split_csv(value: str) -> List[str]:
    return [x.strip() for x in (value or "").split(",") if x.strip()]


# ---------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class StorageSettings:
    """
    Storage provider configuration.

    provider:
      - "s3"     -> S3StorageProvider (AWS)
      - "minio"  -> MinioStorageProvider (local stack)
    """
    provider: str

    # AWS S3
    bucket: str = ""
    region: str = "us-east-1"
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    endpoint_url: Optional[str] = None

    # MinIO (used when provider == "minio")
    minio_endpoint: str = "http://minio:9000"
    minio_bucket: str = "media"
    minio_access_key: str = ""
    minio_secret_key: str = ""

    signed_url_ttl_seconds: int = 3600


@dataclass(frozen=True)
class UploadSettings:
    video_max_bytes: int = 500 * 1024 * 1024
    audio_max_bytes: int = 50 * 1024 * 1024


@dataclass(frozen=True)
class ServerSettings:
    host: str = "0.0.0.0"
    port: int = 5000
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


@dataclass(frozen=True)
class Settings:
    storage: StorageSettings
    uploads: UploadSettings
    server: ServerSettings


# ---------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------

def _normalize_storage_provider(raw: str) -> str:
    v = (raw or "").strip().lower()
    if v in ("minio", "local", "object_store", "objectstore"):
        return "minio"
    return "s3"


def _load_storage_settings() -> StorageSettings:
    """
    Storage precedence:
      1) STORAGE_MODE (deployment/runtime truth)
      2) STORAGE_PROVIDER (legacy override)
      3) default s3
    """
    raw_mode = (_env("STORAGE_MODE", "") or "").strip()
    raw_provider = (_env("STORAGE_PROVIDER", "") or "").strip()
    provider = _normalize_storage_provider(raw_mode or raw_provider or "s3")

    bucket = (_env("S3_BUCKET_NAME", "") or _env("S3_BUCKET", "")).strip()
    region = (_env("AWS_REGION", "") or _env("AWS_DEFAULT_REGION", "") or "us-east-1").strip()
    access_key_id = _env("AWS_ACCESS_KEY_ID", "").strip() or None
    secret_access_key = _env("AWS_SECRET_ACCESS_KEY", "").strip() or None
    endpoint_url = _env("S3_ENDPOINT_URL", "").strip() or None

    minio_endpoint = (_env("MINIO_ENDPOINT", "") or "http://minio:9000").strip().rstrip("/")
    minio_bucket = (_env("MINIO_BUCKET", "") or "media").strip()
    minio_access_key = (_env("MINIO_ACCESS_KEY", "") or "").strip()
    minio_secret_key = (_env("MINIO_SECRET_KEY", "") or "").strip()

    ttl = _env_int("SIGNED_URL_TTL_SECONDS", 3600)
    if ttl <= 0:
        ttl = 3600

    return StorageSettings(
        provider=provider,
        bucket=bucket,
        region=region,
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        endpoint_url=endpoint_url,
        minio_endpoint=minio_endpoint,
        minio_bucket=minio_bucket,
        minio_access_key=minio_access_key,
        minio_secret_key=minio_secret_key,
        signed_url_ttl_seconds=ttl,
    )


def _load_upload_settings() -> UploadSettings:
    defaults = UploadSettings()
    video_max = _env_int("VIDEO_MAX_BYTES", defaults.video_max_bytes)
    audio_max = _env_int("AUDIO_MAX_BYTES", defaults.audio_max_bytes)
    return UploadSettings(
        video_max_bytes=video_max if video_max > 0 else defaults.video_max_bytes,
        audio_max_bytes=audio_max if audio_max > 0 else defaults.audio_max_bytes,
    )


def _load_server_settings() -> ServerSettings:
    port = _env_int("PORT", 5000)
    if port <= 0:
        port = 5000

    origins = _split_csv(_env("CORS_ALLOW_ORIGINS", "*")) or ["*"]

    return ServerSettings(
        host=(_env("HOST", "") or "0.0.0.0").strip(),
        port=port,
        cors_allow_origins=origins,
        log_level=(_env("LOG_LEVEL", "") or "INFO").strip().upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        storage=_load_storage_settings(),
        uploads=_load_upload_settings(),
        server=_load_server_settings(),
    )
