"""
File endpoints — thin HTTP layer, delegates all logic to services.
Auth is required on both routes; upload-url is also rate limited.
"""

import json
import logging

from fastapi import APIRouter, Depends, Request, Response, status

from filegate.config import settings
from filegate.dependencies import get_delete_service, get_upload_service
from filegate.domain.errors import ClientInputError
from filegate.domain.models import CallerIdentity, UploadUrlRequest, UploadUrlResponse
from filegate.middleware.rate_limit import upload_url_rate_limiter
from filegate.middleware.security import read_body_limited
from filegate.services.auth_service import get_current_identity
from filegate.services.delete_service import DeleteService
from filegate.services.upload_service import UploadService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/files", tags=["Files"])


@router.post(
    "/upload-url",
    response_model=UploadUrlResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(upload_url_rate_limiter)],
)
async def create_upload_url(
    request: Request,
    identity: CallerIdentity = Depends(get_current_identity),
    svc: UploadService = Depends(get_upload_service),
):
    """Issue a presigned PUT URL into the caller's app bucket."""
    raw = await read_body_limited(request, settings.max_body_size)
    try:
        body = json.loads(raw)
    except ValueError:
        raise ClientInputError("Invalid body")
    if not isinstance(body, dict):
        raise ClientInputError("Invalid body")

    return await svc.create_upload_url(UploadUrlRequest.model_validate(body), identity)


@router.delete("/{object_key:path}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(
    object_key: str,
    identity: CallerIdentity = Depends(get_current_identity),
    svc: DeleteService = Depends(get_delete_service),
):
    """
    Delete one of the caller's objects.
    The server has already percent-decoded ``object_key`` once (%2F → "/");
    it is used as-is from here on.
    """
    await svc.delete_object(object_key, identity)
    logger.info("Deleted %s for user %s (app %s)", object_key, identity.user_id, identity.app_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
