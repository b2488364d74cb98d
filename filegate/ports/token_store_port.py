"""
Abstract interface for the opaque access-token store.
"""

from abc import ABC, abstractmethod

# Records live under access:<opaque token>
TOKEN_PREFIX = "access:"


class TokenStoreError(Exception):
    """The token store could not be reached or answered with an error."""


class TokenStorePort(ABC):
    """Port for reading access-token records. This service never writes them."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """
        Fetch the raw value stored under ``key``.

        Returns:
            The stored string, or None when the key does not exist.

        Raises:
            TokenStoreError: the store is unreachable or failed the read.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection pool (shutdown only)."""
        ...
