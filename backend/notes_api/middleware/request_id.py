"""
Notes API: Request ID Middleware
==================================

What:  Assigns an id to each request and echoes it in the X-Request-ID header.
Why:   Every access-log line and error log for one request shares the same id,
       and a client can quote it when reporting a problem.
How:   Reuses an id already on request.state, then an incoming X-Request-ID
       header, or generates a short one. Stores it in a ContextVar for loggers
       and in request.state for handlers and outer middleware.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def generate_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:8]}"


def resolve_request_id(request: Request) -> str:
    """
    The id for this request, assigned on first call and stable afterwards.

    request.state is shared by every middleware of one request, so an outer
    middleware that resolves the id first sees the same value as the inner ones.
    """
    rid = getattr(request.state, "request_id", None)
    if not rid:
        rid = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        request.state.request_id = rid
    return rid


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request)

        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
