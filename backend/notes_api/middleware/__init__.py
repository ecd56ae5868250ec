# Middleware package init
"""
Notes API: Middleware Package
===============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Error Trap] → [CORS] → [Request ID] → [Logging] → Route Handler

    1. Error Trap FIRST: anything that escapes the chain becomes a 500 envelope
    2. CORS: answers OPTIONS preflights before any other work
    3. Request ID: generates the correlation id
    4. Logging: logs with the id from step 3

    Responses travel back through the same chain in reverse.
"""

from notes_api.middleware.cors import CORSMiddleware, CORSPolicy
from notes_api.middleware.errors import ErrorTrapMiddleware
from notes_api.middleware.logging import RequestLoggingMiddleware
from notes_api.middleware.request_id import RequestIDMiddleware, request_id_var

__all__ = [
    "CORSMiddleware",
    "CORSPolicy",
    "ErrorTrapMiddleware",
    "RequestIDMiddleware",
    "RequestLoggingMiddleware",
    "request_id_var",
]
