"""Shared fixtures: environment, in-memory collaborators and an app client.

The environment is set before anything from ``filegate`` is imported, since
``filegate.config.settings`` is built at import time.
"""

from __future__ import annotations

import json
import os

os.environ["REDIS_HOST"] = "redis.test"
os.environ["MINIO_ENDPOINT"] = "minio.test"
os.environ["MINIO_ACCESS_KEY"] = "test-access"
os.environ["MINIO_SECRET_KEY"] = "test-secret"
os.environ["MINIO_BUCKET_PREFIX"] = "files"
for _name in ("AUTO_CREATE_BUCKETS", "ALLOWED_MIME_TYPES", "RATE_LIMIT_UPLOAD_URL_MAX", "MAX_BODY_SIZE"):
    os.environ.pop(_name, None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from filegate.dependencies import get_storage, get_token_store  # noqa: E402
from filegate.middleware.rate_limit import upload_url_rate_limiter  # noqa: E402
from filegate.ports.storage_port import (  # noqa: E402
    BucketAlreadyExistsError,
    BucketNotFoundError,
    ObjectNotFoundError,
    StoragePort,
)
from filegate.ports.token_store_port import TOKEN_PREFIX, TokenStorePort  # noqa: E402
from filegate.services.key_namespace import now_ms  # noqa: E402


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------


class FakeTokenStore(TokenStorePort):
    """Dict-backed token store that records every key it is asked for."""

    def __init__(self, records: dict[str, str] | None = None, error: Exception | None = None):
        self.records = dict(records or {})
        self.error = error
        self.calls: list[str] = []
        self.closed = False

    async def get(self, key: str) -> str | None:
        self.calls.append(key)
        if self.error is not None:
            raise self.error
        return self.records.get(key)

    async def close(self) -> None:
        self.closed = True

    def issue(
        self,
        token: str = "tok-u1",
        user_id: object = "u1",
        app_id: object = 7,
        role: object = "member",
        expires_at: object = None,
    ) -> str:
        record = {
            "userId": user_id,
            "role": role,
            "appId": app_id,
            "expiresAt": now_ms() + 60_000 if expires_at is None else expires_at,
        }
        self.records[f"{TOKEN_PREFIX}{token}"] = json.dumps(record)
        return token


class FakeStorage(StoragePort):
    """Set-backed storage. ``failures`` maps an operation name to the error it raises."""

    def __init__(self, buckets=(), objects=()):
        self.buckets: set[str] = set(buckets)
        self.objects: set[tuple[str, str]] = set(objects)
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple] = []

    def _record(self, op: str, *args) -> None:
        self.calls.append((op, *args))
        if op in self.failures:
            raise self.failures[op]

    async def head_bucket(self, bucket: str) -> None:
        self._record("head_bucket", bucket)
        if bucket not in self.buckets:
            raise BucketNotFoundError(bucket)

    async def create_bucket(self, bucket: str) -> None:
        self._record("create_bucket", bucket)
        if bucket in self.buckets:
            raise BucketAlreadyExistsError(bucket)
        self.buckets.add(bucket)

    async def generate_presigned_put_url(
        self, bucket: str, key: str, content_type: str, expires_in: int
    ) -> str:
        self._record("presign", bucket, key, content_type, expires_in)
        return f"http://minio.test:9000/{bucket}/{key}?X-Amz-Expires={expires_in}"

    async def delete_object(self, bucket: str, key: str) -> None:
        self._record("delete_object", bucket, key)
        if (bucket, key) not in self.objects:
            raise ObjectNotFoundError(key)
        self.objects.discard((bucket, key))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def token_store() -> FakeTokenStore:
    return FakeTokenStore()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage(buckets={"files-app-7"})


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    upload_url_rate_limiter.reset()
    yield
    upload_url_rate_limiter.reset()


@pytest.fixture
def app(token_store, storage):
    from main import app as fastapi_app

    fastapi_app.dependency_overrides[get_token_store] = lambda: token_store
    fastapi_app.dependency_overrides[get_storage] = lambda: storage
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers(token_store) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_store.issue()}"}
