"""
Request logging middleware with request id correlation.
"""
import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from talentproof.core.logging_config import request_id_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _outcome_level(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one line per completed request and tags every log record emitted
    while handling it with a request id.

    The id is taken from the X-Request-ID header when the client sends one,
    otherwise generated, and is always echoed on the response. 4xx responses
    (unknown sessions, invalid telemetry) log at WARNING, 5xx at ERROR.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_context.set(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.log(
                _outcome_level(response.status_code),
                f"{request.method} {request.url.path} -> {response.status_code}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                    "client_host": (
                        request.client.host if request.client else "unknown"
                    ),
                },
            )
            return response
        finally:
            request_id_context.reset(token)
