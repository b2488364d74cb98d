"""Tests for TokenValidator (filegate/services/auth_service.py)."""

import json

import pytest

from filegate.domain.errors import ServiceUnavailable, Unauthorized
from filegate.domain.models import CallerIdentity
from filegate.ports.token_store_port import TokenStoreError
from filegate.services.auth_service import TokenValidator

from conftest import FakeTokenStore

NOW = 1_700_000_000_000


def _validator(store: FakeTokenStore) -> TokenValidator:
    return TokenValidator(store=store, clock=lambda: NOW)


def _store_with(payload) -> FakeTokenStore:
    raw = payload if isinstance(payload, str) else json.dumps(payload)
    return FakeTokenStore(records={"access:tok": raw})


# ---------------------------------------------------------------------------
# Header parsing
# ---------------------------------------------------------------------------


class TestExtractToken:
    @pytest.mark.parametrize("header", [None, "", 123, "Basic abc", "Bearer", "Bearer    ", "Token abc"])
    def test_rejects(self, header):
        with pytest.raises(Unauthorized):
            TokenValidator.extract_token(header)

    @pytest.mark.parametrize(
        "header, token",
        [
            ("Bearer abc", "abc"),
            ("bearer abc", "abc"),
            ("BEARER   abc  ", "abc"),
        ],
    )
    def test_accepts(self, header, token):
        assert TokenValidator.extract_token(header) == token

    async def test_bad_header_never_reaches_store(self):
        store = FakeTokenStore()
        with pytest.raises(Unauthorized):
            await _validator(store).validate("Basic abc")
        assert store.calls == []


# ---------------------------------------------------------------------------
# Record validation
# ---------------------------------------------------------------------------


class TestValidate:
    async def test_valid_token(self):
        store = _store_with({"userId": "u1", "role": "admin", "appId": 7, "expiresAt": NOW + 1})
        identity = await _validator(store).validate("Bearer tok")
        assert identity == CallerIdentity(user_id="u1", role="admin", app_id=7)
        assert store.calls == ["access:tok"]

    async def test_coerces_types(self):
        store = _store_with({"userId": 42, "appId": "9", "expiresAt": str(NOW + 5000)})
        identity = await _validator(store).validate("Bearer tok")
        assert identity.user_id == "42"
        assert identity.role == ""
        assert identity.app_id == 9

    async def test_expiry_boundary_is_expired(self):
        store = _store_with({"userId": "u1", "appId": 7, "expiresAt": NOW})
        with pytest.raises(Unauthorized, match="Token expired"):
            await _validator(store).validate("Bearer tok")

    async def test_past_expiry(self):
        store = _store_with({"userId": "u1", "appId": 7, "expiresAt": NOW - 1})
        with pytest.raises(Unauthorized, match="Token expired"):
            await _validator(store).validate("Bearer tok")

    async def test_one_ms_before_expiry_is_valid(self):
        store = _store_with({"userId": "u1", "appId": 7, "expiresAt": NOW + 1})
        assert (await _validator(store).validate("Bearer tok")).user_id == "u1"

    async def test_unknown_token(self):
        with pytest.raises(Unauthorized, match="Invalid or expired token"):
            await _validator(FakeTokenStore()).validate("Bearer tok")

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "[1, 2]",
            "42",
            {"appId": 7, "expiresAt": NOW + 1},
            {"userId": "", "appId": 7, "expiresAt": NOW + 1},
            {"userId": "u1", "expiresAt": NOW + 1},
            {"userId": "u1", "appId": "seven", "expiresAt": NOW + 1},
            {"user_id": "u9", "app_id": 3, "expiresAt": NOW + 1},
        ],
    )
    async def test_invalid_payload(self, payload):
        with pytest.raises(Unauthorized, match="Invalid token payload"):
            await _validator(_store_with(payload)).validate("Bearer tok")

    @pytest.mark.parametrize("expires_at", [None, "soon", True, "NaN"])
    async def test_unparseable_expiry(self, expires_at):
        store = _store_with({"userId": "u1", "appId": 7, "expiresAt": expires_at})
        with pytest.raises(Unauthorized, match="Token expired"):
            await _validator(store).validate("Bearer tok")

    async def test_store_failure_is_service_unavailable(self):
        store = FakeTokenStore(error=TokenStoreError("down"))
        with pytest.raises(ServiceUnavailable) as exc_info:
            await _validator(store).validate("Bearer tok")
        assert exc_info.value.status_code == 503
        assert "down" not in exc_info.value.message
