"""
Request logging middleware.
"""

import time
import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from stock_ledger.config import bind_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

# Polled by load balancers; logged at debug only
_QUIET_PATHS = frozenset({"/health"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request with its duration and tags the response.

    The request ID (taken from X-Request-ID or generated) and the tenant
    query parameter are bound to the log context for the whole request,
    so ledger service logs can be traced back to it.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        bind_request_context(
            request_id=request_id,
            tenant_id=request.query_params.get("tenant_id"),
        )
        log = logger.debug if request.url.path in _QUIET_PATHS else logger.info

        started = time.perf_counter()
        log("request_started", method=request.method, path=request.url.path)
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        else:
            elapsed_ms = (time.perf_counter() - started) * 1000
            log(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round(elapsed_ms, 2),
            )
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"
            return response
        finally:
            clear_request_context()
