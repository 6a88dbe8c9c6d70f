"""Request-scoped logging context.

Every request gets a correlation ID: the caller's ``X-Request-ID`` when
present, a fresh UUID4 otherwise.  It is bound into structlog's context
variables, so each log line emitted while serving the request carries
it, and it is echoed back in the ``X-Request-ID`` response header.
"""

import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128


class CorrelationIdMiddleware:
    """Bind ``correlation_id`` for the duration of each request."""

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = (request.headers.get(REQUEST_ID_HEADER) or "")[:MAX_REQUEST_ID_LENGTH]
        cid = cid or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=cid,
            method=request.method,
            path=request.path,
        )

        start = time.monotonic()
        logger.info("http.request_started")

        response = self.get_response(request)

        duration_ms = round((time.monotonic() - start) * 1000, 2)
        log_method = logger.warning if response.status_code >= 500 else logger.info
        log_method(
            "http.request_finished",
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        response[REQUEST_ID_HEADER] = cid
        return response
