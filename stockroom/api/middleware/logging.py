"""
Request logging middleware.

Binds the request id, method, path and acting user into structlog context
vars for the duration of the request, so movement, ledger and store events
logged underneath can be traced back to the request and user that caused
them.
"""

import time
import uuid
from collections.abc import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from stockroom.config import get_logger

logger = get_logger(__name__)


def _request_id(request: Request) -> str:
    """Reuse a caller-supplied id so logs line up across services."""
    incoming = request.headers.get("x-request-id", "").strip()
    return incoming[:64] if incoming else uuid.uuid4().hex[:8]


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _request_id(request)
        request.state.request_id = request_id
        user_id = request.headers.get("x-user-id") or None

        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            user_id=user_id[:32] if user_id else None,
        ):
            start = time.perf_counter()
            logger.debug("request_started", query=str(request.query_params) or None)
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    "request_failed",
                    error=str(e),
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                )
                raise

            duration_ms = (time.perf_counter() - start) * 1000
            log = logger.warning if response.status_code >= 500 else logger.info
            log("request_completed", status=response.status_code, duration_ms=round(duration_ms, 2))

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response
