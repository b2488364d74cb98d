"""
Delete service — removes an object after an ownership check on its key.
"""

from filegate.domain.errors import ClientInputError, Forbidden, NotFound, ServiceUnavailable
from filegate.domain.models import CallerIdentity
from filegate.ports.storage_port import ObjectNotFoundError, StorageError, StoragePort
from filegate.services.bucket_service import BucketService
from filegate.services.key_namespace import object_key_belongs_to_user


class DeleteService:
    """Authorizes deletes from the key and caller identity alone."""

    def __init__(self, storage: StoragePort, buckets: BucketService) -> None:
        self._storage = storage
        self._buckets = buckets

    async def delete_object(self, object_key: object, identity: CallerIdentity) -> None:
        """
        Permanently delete ``object_key`` from the caller's app bucket.
        Storage is never touched unless the key passes the ownership check.
        """
        if not object_key or not isinstance(object_key, str):
            raise ClientInputError("Invalid object key")
        if ".." in object_key or "\0" in object_key:
            raise Forbidden("Invalid object key")
        if not object_key_belongs_to_user(object_key, identity.user_id):
            raise Forbidden("Access denied")

        bucket = self._buckets.bucket_for_app(identity.app_id)

        try:
            await self._storage.delete_object(bucket, object_key)
        except ObjectNotFoundError:
            raise NotFound("Object not found")
        except StorageError:
            raise ServiceUnavailable("Storage error")
