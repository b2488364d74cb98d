"""
filegate — FastAPI Application Entry Point

Issues presigned upload URLs into app-exclusive buckets and deletes
uploaded objects. Registers routers, middleware and error handlers.
"""

import contextlib
import logging
import traceback

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from filegate.config import settings
from filegate.dependencies import close_clients
from filegate.domain.errors import GatewayError
from filegate.logging_config import setup_logging
from filegate.middleware.request_id import get_request_id, request_id_middleware
from filegate.middleware.security import body_size_limit_middleware, security_headers_middleware
from filegate.routers import files

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging(settings.log_level)
    logger.info("🚀 filegate is starting up (port %s)", settings.port)
    yield
    # Shutdown
    logger.info("🛑 filegate is shutting down")
    await close_clients(timeout=settings.shutdown_timeout)


# ── App factory ───────────────────────────────────────────────
app = FastAPI(
    title="filegate",
    description=(
        "Multi-tenant upload gateway — presigned upload URLs into "
        "app-exclusive buckets, ownership-checked deletes."
    ),
    version="0.1.0",
    lifespan=lifespan,
)

# ── Middleware (last added runs first) ────────────────────────
app.middleware("http")(body_size_limit_middleware)
app.middleware("http")(security_headers_middleware)
app.middleware("http")(request_id_middleware)


# ── Error handlers ────────────────────────────────────────────
# Every failure leaves as {"error": true, "message": ..., "code": ...}


def _error_response(status_code: int, message: str, code: int | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": True, "message": message, "code": code if code is not None else status_code},
    )


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    level = logging.ERROR if exc.status_code >= 500 else logging.INFO
    logger.log(
        level,
        "[%s] %s %s → %s %s",
        get_request_id(request),
        request.method,
        request.url.path,
        exc.status_code,
        exc.message,
    )
    return _error_response(exc.status_code, exc.message, exc.code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info("[%s] invalid request: %s", get_request_id(request), exc.errors())
    return _error_response(400, "Invalid body")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"[{get_request_id(request)}] Unhandled exception on {request.method} {request.url.path}: "
        f"{type(exc).__name__}: {exc}\n{traceback.format_exc()}"
    )
    return _error_response(500, "Internal server error")


# ── Routers ───────────────────────────────────────────────────
app.include_router(files.router)


# ── Health Check ──────────────────────────────────────────────
@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.port,
        timeout_graceful_shutdown=settings.shutdown_timeout,
    )
