"""
Baseline response hardening and request body size limit.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from filegate.config import settings
from filegate.domain.errors import PayloadTooLarge

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
}


async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


async def body_size_limit_middleware(request: Request, call_next):
    """
    Reject bodies whose declared Content-Length exceeds MAX_BODY_SIZE.
    Bodies without a Content-Length (chunked) are capped by
    ``read_body_limited`` when the route reads them.
    """
    declared = request.headers.get("content-length")
    if declared is not None:
        try:
            too_large = int(declared) > settings.max_body_size
        except ValueError:
            too_large = False
        if too_large:
            exc = PayloadTooLarge()
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": True, "message": exc.message, "code": exc.code},
            )
    return await call_next(request)


async def read_body_limited(request: Request, limit: int) -> bytes:
    """
    Read the request body, stopping as soon as it grows past ``limit`` bytes.

    Raises:
        PayloadTooLarge: the body is larger than ``limit``.
    """
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PayloadTooLarge()
    return bytes(body)
