"""
Dependency Injection container.

Wires abstract ports → concrete adapters. Collaborator clients are built
once, shared across requests, and closed explicitly at shutdown. Tests
swap them through ``app.dependency_overrides``.
"""

import asyncio
import logging
from functools import lru_cache

from fastapi import Depends

from filegate.adapters.redis_token_store import RedisTokenStore
from filegate.adapters.s3_storage_adapter import S3StorageAdapter
from filegate.config import settings
from filegate.ports.storage_port import StoragePort
from filegate.ports.token_store_port import TokenStorePort

logger = logging.getLogger(__name__)


# ── Singletons (cached) ──────────────────────────────────────


@lru_cache(maxsize=1)
def _get_token_store() -> RedisTokenStore:
    return RedisTokenStore.from_settings(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password,
    )


@lru_cache(maxsize=1)
def _get_storage_adapter() -> S3StorageAdapter:
    return S3StorageAdapter.from_settings(
        endpoint_url=settings.minio_endpoint_url,
        access_key=settings.minio_access_key,
        secret_key=settings.minio_secret_key,
        region=settings.minio_region,
    )


async def close_clients(timeout: float | None = None) -> None:
    """Close the shared token-store connection. Bounded by ``timeout`` seconds."""
    if _get_token_store.cache_info().currsize == 0:
        return
    store = _get_token_store()
    try:
        await asyncio.wait_for(store.close(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.error("Timed out closing Redis after %ss", timeout)
    except Exception as exc:
        logger.error("Error closing Redis: %s", exc)
    finally:
        _get_token_store.cache_clear()


# ── FastAPI Dependencies (return abstract types) ──────────────


def get_token_store() -> TokenStorePort:
    """Inject the token store adapter."""
    return _get_token_store()


def get_storage() -> StoragePort:
    """Inject the object storage adapter."""
    return _get_storage_adapter()


# ── Domain Services ───────────────────────────────────────────

from filegate.services.bucket_service import BucketService  # noqa: E402
from filegate.services.delete_service import DeleteService  # noqa: E402
from filegate.services.upload_service import UploadService  # noqa: E402


def get_bucket_service(storage: StoragePort = Depends(get_storage)) -> BucketService:
    """Injects storage into the bucket provisioner."""
    return BucketService(
        storage=storage,
        prefix=settings.minio_bucket_prefix,
        auto_create=settings.auto_create_buckets,
    )


def get_upload_service(
    storage: StoragePort = Depends(get_storage),
    buckets: BucketService = Depends(get_bucket_service),
) -> UploadService:
    """Injects storage and bucket provisioning into the upload issuer."""
    return UploadService(
        storage=storage,
        buckets=buckets,
        allowed_mime_types=settings.allowed_mime_types,
        expires_in=settings.upload_url_expires_in,
    )


def get_delete_service(
    storage: StoragePort = Depends(get_storage),
    buckets: BucketService = Depends(get_bucket_service),
) -> DeleteService:
    """Injects storage and bucket naming into the deleter."""
    return DeleteService(storage=storage, buckets=buckets)
