"""
Attach a request ID to each request and response for tracing.
"""

from uuid import uuid4

from fastapi import Request

HEADER = "X-Request-ID"


def get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or "-"


async def request_id_middleware(request: Request, call_next):
    """Reuse an incoming X-Request-ID or generate one; echo it back."""
    request_id = request.headers.get(HEADER) or str(uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers[HEADER] = request_id
    return response
