"""HTTP middleware: response hardening and per-request logging."""

import time
import uuid

from fastapi import Request
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse, Response

from src.storefront.runtime.context import get_config

REQUEST_ID_HEADER = "X-Request-ID"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}
HSTS = "max-age=31536000; includeSubDomains; preload"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if get_config().app.environment == "production":
            response.headers.setdefault("Strict-Transport-Security", HSTS)
        return response


def client_ip(request: Request) -> str:
    """First address of ``X-Forwarded-For``, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One ``request.start`` and one ``request.end`` line per request.

    Every log call made while handling the request carries its ``request_id``.
    Exceptions that escape the app are logged and turned into a bare 500.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        started = time.perf_counter()

        def elapsed_ms() -> float:
            return round((time.perf_counter() - started) * 1000, 1)

        # Query strings can carry search terms; only the path is logged
        with logger.contextualize(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=client_ip(request),
        ):
            logger.info("request.start")
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.bind(
                    status_code=500, duration_ms=elapsed_ms(), error_type=type(exc).__name__
                ).exception("request.error")
                response = JSONResponse(
                    status_code=500,
                    content={"detail": "Internal Server Error", "request_id": request_id},
                )
            else:
                logger.bind(
                    status_code=response.status_code, duration_ms=elapsed_ms()
                ).info("request.end")

        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        return response
