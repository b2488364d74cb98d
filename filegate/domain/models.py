"""
Pydantic models for requests, responses, and internal data transfer.
Pure data — no I/O, no side effects.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ── Identity ──────────────────────────────────────────────────


class AccessTokenRecord(BaseModel):
    """
    Record stored in the token store under ``access:<token>``.
    Written by the identity provider, only ever read here.
    """

    model_config = ConfigDict(extra="ignore")

    user_id: Any = Field(None, alias="userId")
    role: Any = None
    app_id: Any = Field(None, alias="appId")
    expires_at: Any = Field(None, alias="expiresAt")


class CallerIdentity(BaseModel):
    """Trusted identity derived from a valid, unexpired access token."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: str = ""
    app_id: int


# ── Files ─────────────────────────────────────────────────────


class UploadUrlRequest(BaseModel):
    """
    Request body for POST /api/files/upload-url.

    Fields are loosely typed on purpose: presence and type checks are
    done by UploadService so every rejection uses the same 400 shape.
    """

    model_config = ConfigDict(extra="ignore")

    file_name: Any = Field(None, alias="fileName")
    content_type: Any = Field(None, alias="contentType")
    folder: Any = None


class UploadUrlResponse(BaseModel):
    """Response for POST /api/files/upload-url."""

    model_config = ConfigDict(populate_by_name=True)

    upload_url: str = Field(..., alias="uploadUrl")
    object_key: str = Field(..., alias="objectKey")
    expires_in: int = Field(..., alias="expiresIn")


class ErrorResponse(BaseModel):
    """Body of every failure response."""

    error: bool = True
    message: str
    code: int
