"""
Abstract interface for S3-compatible object storage operations.
"""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Storage backend failed (network, auth, server error)."""


class BucketNotFoundError(StorageError):
    """The probed bucket does not exist."""


class BucketAlreadyExistsError(StorageError):
    """Create-bucket lost a race or the bucket was already there."""


class ObjectNotFoundError(StorageError):
    """The addressed object does not exist."""


class StoragePort(ABC):
    """Port for bucket provisioning, presigned uploads and deletes."""

    @abstractmethod
    async def head_bucket(self, bucket: str) -> None:
        """
        Probe a bucket for existence.

        Raises:
            BucketNotFoundError: the bucket does not exist.
            StorageError: any other failure.
        """
        ...

    @abstractmethod
    async def create_bucket(self, bucket: str) -> None:
        """
        Create a bucket.

        Raises:
            BucketAlreadyExistsError: the bucket already exists.
            StorageError: any other failure.
        """
        ...

    @abstractmethod
    async def generate_presigned_put_url(
        self, bucket: str, key: str, content_type: str, expires_in: int
    ) -> str:
        """
        Generate a short-lived URL allowing a single PUT of ``key``.

        Args:
            bucket: Storage bucket name
            key: Object key within the bucket
            content_type: MIME type the upload must be sent with
            expires_in: URL validity in seconds

        Returns:
            A presigned upload URL.
        """
        ...

    @abstractmethod
    async def delete_object(self, bucket: str, key: str) -> None:
        """
        Permanently delete one object.

        Raises:
            ObjectNotFoundError: the object does not exist.
            StorageError: any other failure.
        """
        ...
