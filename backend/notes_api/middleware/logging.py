"""
Notes API: Request Logging Middleware
=======================================

What:  One access-log line per HTTP request.
Why:   Method, path, status and duration are what an operator needs to spot
       errors and slow endpoints.
How:   Times the downstream call with time.perf_counter and logs on the
       `notes_api.access` logger at a level chosen from the status code.

What we log vs what we DON'T log (privacy):
    ✅ Log: method, path, status, duration, client address, request ID
    ✅ Optionally (log_headers=True, DEBUG): request headers, with credentials
       redacted
    ❌ Don't log: request or response bodies
"""

import logging
import time
from typing import Iterable, Mapping

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from notes_api.middleware.request_id import request_id_var

logger = logging.getLogger("notes_api.access")

SENSITIVE_HEADERS = frozenset(
    {"authorization", "cookie", "set-cookie", "x-api-key", "x-auth-token"}
)
REDACTED = "[REDACTED]"


def redact_headers(headers: Iterable[tuple], sensitive: Iterable[str] = SENSITIVE_HEADERS) -> dict:
    """Copy `headers` with credential-bearing values replaced."""
    hidden = {name.lower() for name in sensitive}
    return {
        name: (REDACTED if name.lower() in hidden else value)
        for name, value in headers
    }


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration for each request.

    Log levels:
        5xx → ERROR, 4xx → WARNING, everything else → INFO

    Skipped paths:
        /health: health checks hit it every few seconds
    """

    SKIPPED_PATHS = {"/health"}

    def __init__(self, app: ASGIApp, log_headers: bool = False):
        super().__init__(app)
        self.log_headers = log_headers

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        if self.log_headers and logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "→ %s %s [%s] headers=%s",
                method,
                path,
                rid,
                self._safe_headers(request.headers),
            )

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response

    @staticmethod
    def _safe_headers(headers: Mapping[str, str]) -> dict:
        return redact_headers(headers.items())
