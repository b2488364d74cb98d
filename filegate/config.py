"""
Application configuration loaded from environment variables.
Uses pydantic-settings for typed, validated config.
"""

from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_DEFAULT_PORT = 3000
_DEFAULT_REDIS_PORT = 6379
_DEFAULT_MINIO_PORT = 9000

DEFAULT_ALLOWED_MIME_TYPES = [
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/pdf",
    "text/plain",
    "application/json",
]


def _parse_port(value: object, default: int) -> int:
    try:
        port = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if port < 1 or port > 65535:
        return default
    return port


def _parse_positive_int(value: object, default: int, allow_zero: bool = False) -> int:
    try:
        n = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if n < 0 or (n == 0 and not allow_zero):
        return default
    return n


class Settings(BaseSettings):
    """All environment variables required by the gateway."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── HTTP ──────────────────────────────────────────────────
    port: int = _DEFAULT_PORT
    max_body_size: int = 10 * 1024 * 1024
    shutdown_timeout: int = 10
    log_level: str = "INFO"

    # ── Redis (token store) ───────────────────────────────────
    redis_host: str
    redis_port: int = _DEFAULT_REDIS_PORT
    redis_password: str | None = None

    # ── MinIO / S3 ────────────────────────────────────────────
    minio_endpoint: str
    minio_port: int = _DEFAULT_MINIO_PORT
    minio_access_key: str
    minio_secret_key: str
    minio_use_ssl: bool = False
    minio_region: str = "us-east-1"
    minio_bucket_prefix: str = "files"

    # ── Uploads ───────────────────────────────────────────────
    auto_create_buckets: bool = False
    allowed_mime_types: Annotated[list[str], NoDecode] = list(DEFAULT_ALLOWED_MIME_TYPES)
    upload_url_expires_in: int = 120
    rate_limit_upload_url_max: int = 30

    @field_validator("port", mode="before")
    @classmethod
    def _valid_port(cls, v):
        return _parse_port(v, _DEFAULT_PORT)

    @field_validator("redis_port", mode="before")
    @classmethod
    def _valid_redis_port(cls, v):
        return _parse_port(v, _DEFAULT_REDIS_PORT)

    @field_validator("minio_port", mode="before")
    @classmethod
    def _valid_minio_port(cls, v):
        return _parse_port(v, _DEFAULT_MINIO_PORT)

    @field_validator("max_body_size", mode="before")
    @classmethod
    def _valid_body_size(cls, v):
        return _parse_positive_int(v, 10 * 1024 * 1024, allow_zero=True)

    @field_validator("upload_url_expires_in", mode="before")
    @classmethod
    def _valid_expiry(cls, v):
        return _parse_positive_int(v, 120)

    @field_validator("rate_limit_upload_url_max", mode="before")
    @classmethod
    def _valid_rate_limit(cls, v):
        return _parse_positive_int(v, 30)

    @field_validator("shutdown_timeout", mode="before")
    @classmethod
    def _valid_shutdown_timeout(cls, v):
        return _parse_positive_int(v, 10)

    @field_validator("redis_host", "minio_endpoint", "minio_access_key", "minio_secret_key")
    @classmethod
    def _required_non_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("redis_password", mode="before")
    @classmethod
    def _blank_password_is_none(cls, v):
        if v is None:
            return None
        return str(v).strip() or None

    @field_validator("minio_bucket_prefix", mode="before")
    @classmethod
    def _bucket_prefix(cls, v):
        return (str(v) if v is not None else "").strip() or "files"

    @field_validator("allowed_mime_types", mode="before")
    @classmethod
    def _split_mime_types(cls, v):
        # Comma-separated from env, or already a list when built in code
        if isinstance(v, str):
            items = [s.strip().lower() for s in v.split(",")]
        else:
            items = [str(s).strip().lower() for s in (v or [])]
        items = [s for s in items if s]
        return items or list(DEFAULT_ALLOWED_MIME_TYPES)

    @property
    def minio_endpoint_url(self) -> str:
        protocol = "https" if self.minio_use_ssl else "http"
        return f"{protocol}://{self.minio_endpoint}:{self.minio_port}"


# Singleton, import this wherever config is needed
settings = Settings()  # type: ignore[call-arg]
