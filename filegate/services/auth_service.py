"""
Authentication service.
Resolves an opaque bearer token to a caller identity via the token store.
"""

import json
import math
import re

from fastapi import Depends, Request
from pydantic import ValidationError

from filegate.dependencies import get_token_store
from filegate.domain.errors import ServiceUnavailable, Unauthorized
from filegate.domain.models import AccessTokenRecord, CallerIdentity
from filegate.ports.token_store_port import TOKEN_PREFIX, TokenStoreError, TokenStorePort
from filegate.services.key_namespace import now_ms

_BEARER = re.compile(r"^Bearer\s+(.+)$", re.IGNORECASE)


def _parse_expiry(value: object) -> float | None:
    """Epoch-ms expiry as stored; None when it cannot be read as a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        # Leading integer, like parseInt on the issuing side
        match = re.match(r"\s*([+-]?\d+)", value)
        if match:
            return int(match.group(1))
    return None


def _parse_app_id(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


class TokenValidator:
    """Validates ``Authorization`` headers against the token store."""

    def __init__(self, store: TokenStorePort, clock=now_ms) -> None:
        self._store = store
        self._clock = clock

    @staticmethod
    def extract_token(authorization: object) -> str:
        if not authorization or not isinstance(authorization, str):
            raise Unauthorized("Missing or invalid Authorization header")
        match = _BEARER.match(authorization)
        token = match.group(1).strip() if match else ""
        if not token:
            raise Unauthorized("Missing Bearer token")
        return token

    async def validate(self, authorization: object) -> CallerIdentity:
        """
        Turn a raw header value into a CallerIdentity.

        Raises Unauthorized for anything wrong with the token itself and
        ServiceUnavailable when the store cannot be read.
        """
        token = self.extract_token(authorization)

        try:
            raw = await self._store.get(f"{TOKEN_PREFIX}{token}")
        except TokenStoreError:
            raise ServiceUnavailable("Service temporarily unavailable")

        if not raw:
            raise Unauthorized("Invalid or expired token")

        try:
            record = AccessTokenRecord.model_validate(json.loads(raw))
        except (ValueError, ValidationError):
            raise Unauthorized("Invalid token payload")

        app_id = _parse_app_id(record.app_id)
        if not record.user_id or app_id is None:
            raise Unauthorized("Invalid token payload")

        expires_at = _parse_expiry(record.expires_at)
        # The expiry instant itself is already expired
        if expires_at is None or self._clock() >= expires_at:
            raise Unauthorized("Token expired")

        role = record.role if record.role is not None else ""
        return CallerIdentity(user_id=str(record.user_id), role=str(role), app_id=app_id)


def get_token_validator(store: TokenStorePort = Depends(get_token_store)) -> TokenValidator:
    return TokenValidator(store=store)


async def get_current_identity(
    request: Request,
    validator: TokenValidator = Depends(get_token_validator),
) -> CallerIdentity:
    """
    FastAPI dependency that authenticates the request.
    Runs before any body handling or storage call on protected routes.
    """
    identity = await validator.validate(request.headers.get("authorization"))
    request.state.identity = identity
    return identity
