"""
Notes API: Error-Trapping Middleware
======================================

What:  Last line of defence for exceptions nothing else handled.
Why:   Without it Starlette's ServerErrorMiddleware would answer with its own
       plain-text 500 page instead of the API's error envelope.
How:   Outermost middleware. Resolves the request id before passing the request
       on, logs any exception with its traceback and returns the generic
       INTERNAL_SERVER_ERROR envelope.

The 500 never travels back through the inner middleware, so this one adds the
X-Request-ID header and, given the app's CORSPolicy, the CORS headers itself.

Security: the response never carries the exception text or traceback.
"""

import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from notes_api import responses
from notes_api.middleware.cors import CORSPolicy
from notes_api.middleware.request_id import REQUEST_ID_HEADER, resolve_request_id

logger = logging.getLogger(__name__)


class ErrorTrapMiddleware(BaseHTTPMiddleware):

    def __init__(self, app: ASGIApp, cors_policy: Optional[CORSPolicy] = None):
        super().__init__(app)
        self.cors_policy = cors_policy

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request)
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                "[%s] Unhandled error in request %s %s: %s",
                rid,
                request.method,
                request.url.path,
                str(exc),
                exc_info=True,
            )
            response = responses.internal_server_error()
            response.headers[REQUEST_ID_HEADER] = rid
            if self.cors_policy is not None:
                self.cors_policy.annotate(request, response)
            return response
