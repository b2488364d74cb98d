"""
Upload service — issues presigned upload URLs.
Depends on ports only (Dependency Inversion).
"""

from typing import Callable

from filegate.domain.errors import ClientInputError, ServiceUnavailable
from filegate.domain.models import CallerIdentity, UploadUrlRequest, UploadUrlResponse
from filegate.ports.storage_port import StorageError, StoragePort
from filegate.services.bucket_service import BucketService
from filegate.services.key_namespace import (
    build_object_key,
    now_ms,
    sanitize_file_name,
    sanitize_folder,
)


def normalize_content_type(content_type: str) -> str:
    """"image/PNG; charset=binary" → "image/png"."""
    return content_type.split(";")[0].strip().lower()


def _require_text(value: object, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ClientInputError(f"{field} is required")
    return value


class UploadService:
    """Orchestrates validate → sanitize → provision → presign."""

    def __init__(
        self,
        storage: StoragePort,
        buckets: BucketService,
        allowed_mime_types: list[str],
        expires_in: int,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._storage = storage
        self._buckets = buckets
        self._allowed = set(allowed_mime_types)
        self._expires_in = expires_in
        self._clock = clock

    async def create_upload_url(
        self, body: UploadUrlRequest, identity: CallerIdentity
    ) -> UploadUrlResponse:
        """
        Issue a presigned PUT URL for a new object owned by ``identity``.

        The URL is bound to bucket, key and content type. Upload size is
        not enforced here.
        """
        file_name = _require_text(body.file_name, "fileName")
        content_type = _require_text(body.content_type, "contentType")

        if normalize_content_type(content_type) not in self._allowed:
            raise ClientInputError("Content type not allowed")

        object_key = build_object_key(
            sanitize_folder(body.folder),
            identity.user_id,
            sanitize_file_name(file_name),
            self._clock(),
        )

        bucket = self._buckets.bucket_for_app(identity.app_id)
        await self._buckets.ensure_bucket_exists(bucket)

        try:
            upload_url = await self._storage.generate_presigned_put_url(
                bucket, object_key, content_type.strip(), self._expires_in
            )
        except StorageError:
            raise ServiceUnavailable("Storage unavailable")

        return UploadUrlResponse(
            upload_url=upload_url,
            object_key=object_key,
            expires_in=self._expires_in,
        )
