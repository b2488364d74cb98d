"""
Rate limiting for upload-URL issuance.

Fixed one-minute window per client address, kept in process memory via the
``limits`` library. Checked as a route dependency so it runs before
authentication.
"""

from fastapi import Request
from limits import RateLimitItemPerMinute
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter

from filegate.config import settings
from filegate.domain.errors import RateLimited


class ClientRateLimiter:
    """N requests per minute per client address for one named route."""

    def __init__(self, scope: str, per_minute: int) -> None:
        self._scope = scope
        self._item = RateLimitItemPerMinute(per_minute)
        self._storage = MemoryStorage()
        self._limiter = FixedWindowRateLimiter(self._storage)

    @staticmethod
    def client_key(request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def __call__(self, request: Request) -> None:
        if not self._limiter.hit(self._item, self._scope, self.client_key(request)):
            raise RateLimited("Too many requests")

    def reset(self) -> None:
        self._storage.reset()


upload_url_rate_limiter = ClientRateLimiter(
    scope="upload-url",
    per_minute=settings.rate_limit_upload_url_max,
)
