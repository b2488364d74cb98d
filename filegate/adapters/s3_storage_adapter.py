"""
Concrete implementation of StoragePort using boto3 against MinIO or AWS S3.

boto3 is synchronous; every call runs in a worker thread so a slow storage
backend only suspends the request that issued it.
"""

import asyncio
import logging

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from filegate.ports.storage_port import (
    BucketAlreadyExistsError,
    BucketNotFoundError,
    ObjectNotFoundError,
    StorageError,
    StoragePort,
)

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NotFound", "NoSuchBucket", "NoSuchKey"}
_ALREADY_EXISTS_CODES = {"BucketAlreadyOwnedByYou", "BucketAlreadyExists"}


def _error_code(exc: ClientError) -> str:
    return str((exc.response.get("Error") or {}).get("Code") or "")


def _http_status(exc: ClientError) -> int | None:
    return (exc.response.get("ResponseMetadata") or {}).get("HTTPStatusCode")


def _is_not_found(exc: ClientError) -> bool:
    return _error_code(exc) in _NOT_FOUND_CODES or _http_status(exc) == 404


class S3StorageAdapter(StoragePort):
    """Talks to an S3-compatible endpoint with path-style addressing."""

    def __init__(self, client) -> None:
        self._client = client

    @classmethod
    def from_settings(
        cls,
        endpoint_url: str,
        access_key: str,
        secret_key: str,
        region: str = "us-east-1",
    ) -> "S3StorageAdapter":
        client = boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": "path"},
            ),
        )
        return cls(client=client)

    async def head_bucket(self, bucket: str) -> None:
        try:
            await asyncio.to_thread(self._client.head_bucket, Bucket=bucket)
        except ClientError as exc:
            if _is_not_found(exc):
                raise BucketNotFoundError(bucket) from exc
            logger.error("head_bucket %s failed: %s", bucket, _error_code(exc))
            raise StorageError("head_bucket failed") from exc
        except BotoCoreError as exc:
            logger.error("head_bucket %s failed: %s", bucket, exc)
            raise StorageError("head_bucket failed") from exc

    async def create_bucket(self, bucket: str) -> None:
        try:
            await asyncio.to_thread(self._client.create_bucket, Bucket=bucket)
        except ClientError as exc:
            if _error_code(exc) in _ALREADY_EXISTS_CODES:
                raise BucketAlreadyExistsError(bucket) from exc
            logger.error("create_bucket %s failed: %s", bucket, _error_code(exc))
            raise StorageError("create_bucket failed") from exc
        except BotoCoreError as exc:
            logger.error("create_bucket %s failed: %s", bucket, exc)
            raise StorageError("create_bucket failed") from exc

    async def generate_presigned_put_url(
        self, bucket: str, key: str, content_type: str, expires_in: int
    ) -> str:
        try:
            return await asyncio.to_thread(
                self._client.generate_presigned_url,
                ClientMethod="put_object",
                Params={
                    "Bucket": bucket,
                    "Key": key,
                    "ContentType": content_type,
                },
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("presign %s/%s failed: %s", bucket, key, exc)
            raise StorageError("presign failed") from exc

    async def delete_object(self, bucket: str, key: str) -> None:
        # S3 DeleteObject succeeds for missing keys, so probe first
        try:
            await asyncio.to_thread(self._client.head_object, Bucket=bucket, Key=key)
            await asyncio.to_thread(self._client.delete_object, Bucket=bucket, Key=key)
        except ClientError as exc:
            if _is_not_found(exc):
                raise ObjectNotFoundError(key) from exc
            logger.error("delete %s/%s failed: %s", bucket, key, _error_code(exc))
            raise StorageError("delete failed") from exc
        except BotoCoreError as exc:
            logger.error("delete %s/%s failed: %s", bucket, key, exc)
            raise StorageError("delete failed") from exc
