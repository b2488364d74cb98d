"""
Concrete implementation of TokenStorePort using redis-py's asyncio client.
"""

import logging

from redis.asyncio import Redis
from redis.exceptions import RedisError

from filegate.ports.token_store_port import TokenStoreError, TokenStorePort

logger = logging.getLogger(__name__)


class RedisTokenStore(TokenStorePort):
    """Reads access-token records from Redis. Connections are pooled by redis-py."""

    def __init__(self, client: Redis) -> None:
        self._client = client

    @classmethod
    def from_settings(
        cls, host: str, port: int = 6379, password: str | None = None
    ) -> "RedisTokenStore":
        client = Redis(
            host=host,
            port=port,
            password=password,
            decode_responses=True,
            socket_timeout=5,
            socket_connect_timeout=5,
        )
        return cls(client=client)

    async def get(self, key: str) -> str | None:
        try:
            return await self._client.get(key)
        except RedisError as exc:
            logger.error("Redis read failed: %s: %s", type(exc).__name__, exc)
            raise TokenStoreError("token store unavailable") from exc

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Redis connection closed")
