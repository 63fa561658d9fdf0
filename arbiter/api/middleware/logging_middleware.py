"""Per-request correlation ids and access logging.

Every request runs under a correlation id (the client's ``X-Correlation-ID``
when usable, otherwise a new UUID) that is echoed on the response. Health
checks are logged at debug level; everything else logs
``request_started`` and ``request_completed`` (or ``request_failed``) with
its duration.
"""

import time
from typing import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from arbiter.infrastructure.observability.correlation import (
    accept_correlation_id,
    set_correlation_id,
)

CORRELATION_HEADER = "X-Correlation-ID"
QUIET_PATHS = frozenset({"/v1/health"})

logger = structlog.get_logger(__name__)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Binds a correlation id to each request and logs its outcome."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        correlation_id = accept_correlation_id(request.headers.get(CORRELATION_HEADER))
        set_correlation_id(correlation_id)

        log = logger.bind(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        )
        emit = log.debug if request.url.path in QUIET_PATHS else log.info
        emit("request_started")

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            log.exception(
                "request_failed",
                duration_ms=_elapsed_ms(started),
                error_type=type(exc).__name__,
            )
            raise

        emit(
            "request_completed",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
