"""Tests for filegate.config.Settings."""

import pytest
from pydantic import ValidationError

from filegate.config import DEFAULT_ALLOWED_MIME_TYPES, Settings


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_defaults():
    s = _settings()
    assert s.port == 3000
    assert s.redis_port == 6379
    assert s.redis_password is None
    assert s.minio_port == 9000
    assert s.minio_use_ssl is False
    assert s.auto_create_buckets is False
    assert s.upload_url_expires_in == 120
    assert s.rate_limit_upload_url_max == 30
    assert s.allowed_mime_types == DEFAULT_ALLOWED_MIME_TYPES
    assert s.minio_endpoint_url == "http://minio.test:9000"


def test_ssl_endpoint(monkeypatch):
    monkeypatch.setenv("MINIO_USE_SSL", "true")
    monkeypatch.setenv("MINIO_PORT", "443")
    assert _settings().minio_endpoint_url == "https://minio.test:443"


@pytest.mark.parametrize("value", ["0", "70000", "abc", "-1"])
def test_invalid_port_falls_back(monkeypatch, value):
    monkeypatch.setenv("MINIO_PORT", value)
    monkeypatch.setenv("REDIS_PORT", value)
    s = _settings()
    assert s.minio_port == 9000
    assert s.redis_port == 6379


def test_mime_types_from_env(monkeypatch):
    monkeypatch.setenv("ALLOWED_MIME_TYPES", " image/PNG, ,application/pdf ")
    assert _settings().allowed_mime_types == ["image/png", "application/pdf"]


def test_blank_mime_types_use_default(monkeypatch):
    monkeypatch.setenv("ALLOWED_MIME_TYPES", " , ")
    assert _settings().allowed_mime_types == DEFAULT_ALLOWED_MIME_TYPES


def test_blank_password_is_none(monkeypatch):
    monkeypatch.setenv("REDIS_PASSWORD", "   ")
    assert _settings().redis_password is None


def test_blank_bucket_prefix_uses_default(monkeypatch):
    monkeypatch.setenv("MINIO_BUCKET_PREFIX", "  ")
    assert _settings().minio_bucket_prefix == "files"


def test_required_values(monkeypatch):
    monkeypatch.delenv("REDIS_HOST")
    with pytest.raises(ValidationError):
        _settings()


def test_blank_required_value(monkeypatch):
    monkeypatch.setenv("MINIO_ACCESS_KEY", "   ")
    with pytest.raises(ValidationError):
        _settings()
