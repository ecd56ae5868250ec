"""
Notes API: CORS Middleware
============================

What:  Cross-origin headers for browser clients, plus preflight answers.
Why:   The frontend is served from a different origin than the API.
How:   Every OPTIONS request is answered here with an empty 200; other
       responses are annotated on the way out. Headers are only added when the
       request's Origin is allowed.

Policy:
    development / test:  allow_origins=["*"] (every origin allowed)
    production:          explicit allow-list from CORS_ORIGINS

    When the allow-list contains "*", the request's own Origin is echoed back
    (or "*" when the request had none).

The rules live in CORSPolicy so that ErrorTrapMiddleware, which sits outside
this middleware, can annotate its own 500 responses the same way.
"""

import logging
from typing import Optional, Sequence

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

DEFAULT_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD")
DEFAULT_HEADERS = ("Origin", "Content-Type", "Accept", "Authorization", "X-Requested-With")
DEFAULT_EXPOSE_HEADERS = ("X-Request-ID",)


class CORSPolicy:
    """Which origins are allowed and which headers a response gets."""

    def __init__(
        self,
        allow_origins: Sequence[str] = ("*",),
        allow_methods: Sequence[str] = DEFAULT_METHODS,
        allow_headers: Sequence[str] = DEFAULT_HEADERS,
        expose_headers: Sequence[str] = DEFAULT_EXPOSE_HEADERS,
        allow_credentials: bool = False,
        max_age: int = 86400,
    ):
        self.allow_origins = list(allow_origins)
        self.allow_methods = list(allow_methods)
        self.allow_headers = list(allow_headers)
        self.expose_headers = list(expose_headers)
        self.allow_credentials = allow_credentials
        self.max_age = max_age

    def allowed_origin(self, origin: Optional[str]) -> Optional[str]:
        """Value for Access-Control-Allow-Origin, or None if not allowed."""
        if "*" in self.allow_origins:
            return origin or "*"
        if origin is not None and origin in self.allow_origins:
            return origin
        return None

    def annotate(self, request: Request, response: Response) -> Response:
        """Add the CORS headers for a non-preflight response, if the origin is allowed."""
        origin = request.headers.get("origin")
        allowed = self.allowed_origin(origin)
        if allowed is None:
            if origin is not None:
                logger.debug("Origin %s not in CORS allow-list", origin)
            return response
        self._apply_common_headers(response, allowed)
        return response

    def preflight_response(self, request: Request) -> Response:
        response = Response(status_code=200)
        allowed = self.allowed_origin(request.headers.get("origin"))
        if allowed is not None:
            self._apply_common_headers(response, allowed)
            response.headers["Access-Control-Allow-Methods"] = ", ".join(self.allow_methods)
            response.headers["Access-Control-Allow-Headers"] = ", ".join(self.allow_headers)
            response.headers["Access-Control-Max-Age"] = str(self.max_age)
        return response

    def _apply_common_headers(self, response: Response, allowed: str) -> None:
        response.headers["Access-Control-Allow-Origin"] = allowed
        if allowed != "*":
            response.headers["Vary"] = "Origin"
        if self.expose_headers:
            response.headers["Access-Control-Expose-Headers"] = ", ".join(self.expose_headers)
        if self.allow_credentials:
            response.headers["Access-Control-Allow-Credentials"] = "true"


class CORSMiddleware(BaseHTTPMiddleware):

    def __init__(self, app: ASGIApp, policy: Optional[CORSPolicy] = None):
        super().__init__(app)
        self.policy = policy or CORSPolicy()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS":
            return self.policy.preflight_response(request)

        response = await call_next(request)
        return self.policy.annotate(request, response)
