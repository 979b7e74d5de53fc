"""Middleware: request IDs and security headers.

The request ID lives in a context variable. Once
``install_request_id_logging()`` has run, every log record carries it as
``request_id`` (``-`` outside a request), so a formatter such as
``"%(asctime)s [%(request_id)s] %(name)s: %(message)s"`` ties pipeline logs
to the request that caused them.
"""

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_factory_installed = False


def install_request_id_logging() -> None:
    """Stamp ``request_id`` on every log record created from now on. Idempotent."""
    global _factory_installed
    if _factory_installed:
        return
    base_factory = logging.getLogRecordFactory()

    def factory(*args, **kwargs) -> logging.LogRecord:
        record = base_factory(*args, **kwargs)
        record.request_id = request_id_var.get() or "-"
        return record

    logging.setLogRecordFactory(factory)
    _factory_installed = True


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to every request and log its duration.

    Uses ``X-Request-ID`` from the request when present, otherwise a new
    UUID4, and echoes it on the response.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_var.set(rid)
        try:
            started = time.perf_counter()
            response = await call_next(request)
            logger.debug(
                "%s %s -> %d in %.1fms",
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = rid
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add standard security headers to every response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        return response
