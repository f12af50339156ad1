import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

REPO_ROOT = Path(__file__).resolve().parents[1]

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from core.deps import get_app_settings, get_storage  # noqa: E402
from core.settings import ServerSettings, Settings, StorageSettings, UploadSettings  # noqa: E402
from main import app  # noqa: E402
from providers.storage import ObjectHead, ObjectInfo, ObjectNotFoundError, StorageError  # noqa: E402

BUCKET = "test-bucket"
REGION = "us-east-1"


class FakeStorage:
    """
    In-memory StorageProvider.

    Faults are injected per operation, optionally per key:
        fake.fail("head", "audio/x.wav")
        fake.fail("list")
    """

    def __init__(self):
        self.objects: Dict[str, dict] = {}
        self.failures: Dict[Tuple[str, Optional[str]], str] = {}
        self.calls = []

    def fail(self, op: str, key: Optional[str] = None, message: str = "simulated storage fault") -> None:
        self.failures[(op, key)] = message

    def _check(self, op: str, key: Optional[str] = None) -> None:
        self.calls.append((op, key))
        for probe in ((op, key), (op, None)):
            if probe in self.failures:
                raise StorageError(self.failures[probe])

    def put_object(self, key, data, content_type="application/octet-stream", metadata=None):
        self._check("put", key)
        self.objects[key] = {
            "data": data,
            "content_type": content_type,
            "metadata": dict(metadata or {}),
            "last_modified": datetime.now(timezone.utc),
        }

    def head_object(self, key):
        self._check("head", key)
        if key not in self.objects:
            raise ObjectNotFoundError(key)
        obj = self.objects[key]
        return ObjectHead(
            key=key,
            content_type=obj["content_type"],
            content_length=len(obj["data"]),
            last_modified=obj["last_modified"],
            metadata=obj["metadata"],
        )

    def delete_object(self, key):
        self._check("delete", key)
        self.objects.pop(key, None)

    def list_objects(self, prefix=""):
        self._check("list")
        return [
            ObjectInfo(key=k, last_modified=v["last_modified"], size=len(v["data"]))
            for k, v in self.objects.items()
            if k.startswith(prefix or "")
        ]

    def presign_url(self, key, ttl_seconds=3600):
        self._check("presign", key)
        return f"memory://{BUCKET}/{key}?expires={ttl_seconds}"

    def public_url(self, key):
        return f"https://{BUCKET}.s3.{REGION}.amazonaws.com/{key}"

    def fetch(self, url: str) -> bytes:
        """Resolve a URL minted by presign_url back to the stored bytes."""
        key = url.split(f"memory://{BUCKET}/", 1)[1].split("?", 1)[0]
        return self.objects[key]["data"]


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def test_settings():
    return Settings(
        storage=StorageSettings(provider="s3", bucket=BUCKET, region=REGION),
        uploads=UploadSettings(video_max_bytes=4096, audio_max_bytes=2048),
        server=ServerSettings(),
    )


@pytest.fixture
def client(fake_storage, test_settings):
    """
    TestClient with storage and settings overridden at the dependency level.

    The lifespan is not entered, so no real storage client is built.
    """
    app.dependency_overrides[get_storage] = lambda: fake_storage
    app.dependency_overrides[get_app_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.pop(get_storage, None)
    app.dependency_overrides.pop(get_app_settings, None)


@pytest.fixture
def s3_client(monkeypatch, test_settings):
    """
    TestClient backed by the real boto3 provider against moto.
    """
    import boto3
    from moto import mock_aws

    from providers.impl.storage_s3 import S3StorageProvider

    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)

    with mock_aws():
        boto3.client("s3", region_name=REGION).create_bucket(Bucket=BUCKET)
        storage = S3StorageProvider(bucket=BUCKET, region=REGION)
        app.dependency_overrides[get_storage] = lambda: storage
        app.dependency_overrides[get_app_settings] = lambda: test_settings
        yield TestClient(app)
        app.dependency_overrides.pop(get_storage, None)
        app.dependency_overrides.pop(get_app_settings, None)
