"""
Bucket service — one exclusive bucket per application id.
"""

import logging

from filegate.domain.errors import ServiceUnavailable
from filegate.ports.storage_port import (
    BucketAlreadyExistsError,
    BucketNotFoundError,
    StorageError,
    StoragePort,
)

logger = logging.getLogger(__name__)


class BucketService:
    """Maps app ids to bucket names and provisions buckets on first use."""

    def __init__(self, storage: StoragePort, prefix: str, auto_create: bool = False) -> None:
        self._storage = storage
        self._prefix = prefix
        self._auto_create = auto_create

    def bucket_for_app(self, app_id: int) -> str:
        """Single source of truth for app-exclusive bucket names."""
        return f"{self._prefix}-app-{app_id}"

    async def ensure_bucket_exists(self, bucket: str) -> None:
        """
        Make sure ``bucket`` exists, creating it when allowed.

        Concurrent first uses may both try to create; the loser's
        "already exists" answer counts as success.
        """
        try:
            await self._storage.head_bucket(bucket)
            return
        except BucketNotFoundError:
            pass
        except StorageError:
            raise ServiceUnavailable("Storage unavailable")

        if not self._auto_create:
            raise ServiceUnavailable("Bucket not found; contact administrator")

        try:
            await self._storage.create_bucket(bucket)
            logger.info("Created bucket %s", bucket)
        except BucketAlreadyExistsError:
            logger.info("Bucket %s created concurrently", bucket)
        except StorageError:
            raise ServiceUnavailable("Storage unavailable")
