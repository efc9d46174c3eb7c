"""
Campus Records - HTTP Middleware

- Request ids, timing and one access log line per request
- Security headers
- Body size limits (certificate uploads vs. JSON bodies)
"""

import time
from typing import Callable
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response, JSONResponse
from starlette.types import ASGIApp

from app.core.logging_config import (
    logger,
    set_request_id,
    set_user_id,
    generate_request_id,
)


QUIET_PATHS = ("/", "/favicon.ico", "/docs", "/redoc", "/openapi.json")
QUIET_PREFIXES = ("/api/v1/health", "/api/v1/storage/")

SLOW_REQUEST_MS = 1000


def is_quiet(path: str) -> bool:
    """Probes, docs and stored-file downloads are not access-logged"""
    return path in QUIET_PATHS or path.startswith(QUIET_PREFIXES)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Assigns a request id (or reuses the caller's X-Request-ID), times the
    request and writes it through `logger.log_request`. The signed-in
    profile id is read from `request.state`, where the auth dependency
    leaves it.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)
        path = request.url.path
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.log_error_with_context(
                exc,
                context=f"{request.method} {path}",
                duration_ms=(time.perf_counter() - start) * 1000,
            )
            raise
        else:
            duration_ms = (time.perf_counter() - start) * 1000
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

            if not is_quiet(path):
                logger.log_request(
                    request.method,
                    path,
                    response.status_code,
                    duration_ms,
                    profile_id=getattr(request.state, "profile_id", None),
                    mock_mode=request.query_params.get("mock") == "1",
                )
                if duration_ms > SLOW_REQUEST_MS:
                    logger.warning(
                        f"Slow request: {request.method} {path} took {duration_ms:.2f}ms",
                        extra={"event_type": "slow_request", "http_path": path, "duration_ms": duration_ms}
                    )
            return response
        finally:
            set_request_id("")
            set_user_id("")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Portfolio export is opened in a new tab, never framed
        response.headers["X-Frame-Options"] = "DENY"
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """
    413 before the body is read. Multipart requests (certificate uploads) get
    `max_upload_size`; everything else gets `max_body_size`.
    """

    def __init__(self, app: ASGIApp, max_upload_size: int, max_body_size: int = 1024 * 1024):
        super().__init__(app)
        self.max_upload_size = max_upload_size
        self.max_body_size = max_body_size

    def limit_for(self, request: Request) -> int:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith("multipart/form-data"):
            return self.max_upload_size
        return self.max_body_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("content-length")
        limit = self.limit_for(request)

        if content_length and content_length.isdigit() and int(content_length) > limit:
            logger.warning(
                f"Rejected {request.url.path}: body of {content_length} bytes exceeds {limit}",
                extra={"event_type": "request_too_large", "http_path": request.url.path, "max_size": limit}
            )
            return JSONResponse(
                status_code=413,
                content={
                    "code": "REQUEST_TOO_LARGE",
                    "message": f"Request body too large. Maximum size is {limit // 1024 // 1024 or 1}MB",
                    "details": {"max_size": limit},
                }
            )

        return await call_next(request)
