"""
Typed error taxonomy for the gateway.

Services raise these; the HTTP boundary (main.py) turns them into
``{"error": true, "message": ..., "code": ...}`` responses. Messages are
safe to show to callers and never carry collaborator internals.
"""

from fastapi import status


class GatewayError(Exception):
    """Base class for every failure the gateway reports to a caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, code: int | None = None) -> None:
        self.message = message or self.default_message
        self.code = code if code is not None else self.status_code
        super().__init__(self.message)


class ClientInputError(GatewayError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthorized(GatewayError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(GatewayError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFound(GatewayError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class PayloadTooLarge(GatewayError):
    status_code = status.HTTP_413_CONTENT_TOO_LARGE
    default_message = "Request body too large"


class RateLimited(GatewayError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests"


class ServiceUnavailable(GatewayError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service temporarily unavailable"
