"""
Notes API: FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes app configuration, middleware registration, route mounting,
       and lifecycle management in one place.
How:   Factory pattern: create_app(settings, store) returns a configured
       FastAPI instance. The store is injected so tests can hand in their own.
Who:   Called by uvicorn to start the server (uvicorn notes_api.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌────────────┐ ┌──────┐ ┌──────────┐ ┌───────────┐     │
    │  │ Error Trap │→│ CORS │→│ Req ID   │→│ Logging   │     │
    │  └────────────┘ └──────┘ └──────────┘ └───────────┘     │
    │                                                          │
    │  Routes:                                                 │
    │  ┌──────────────────┐ ┌──────────────┐ ┌────────────┐   │
    │  │ /api/notes[...]  │ │ GET /health  │ │ GET /      │   │
    │  └──────────────────┘ └──────────────┘ └────────────┘   │
    │                                                          │
    │  Exception Handlers:                                     │
    │  ┌────────────────────────────────────────────────────┐ │
    │  │ Validation→400 │ BadRequest→400 │ NotFound→404     │ │
    │  │ Storage→500    │ 404/405 from the router           │ │
    │  └────────────────────────────────────────────────────┘ │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Initialize the store (creates tables for the SQL store)
    4. Seed sample notes when enabled
    5. Log startup complete

    Shutdown:
    1. Close the store (disposes the database engine)
    2. Log shutdown complete
"""

import logging
import sys
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import AsyncGenerator, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Match

from notes_api import __version__, responses
from notes_api.config import Settings, settings as default_settings
from notes_api.exceptions import (
    BadRequestError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from notes_api.middleware import (
    CORSMiddleware,
    CORSPolicy,
    ErrorTrapMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    request_id_var,
)
from notes_api.routes import health, notes
from notes_api.storage import NoteStore, build_store

logger = logging.getLogger(__name__)

# Canonical order for the Allow header
_METHOD_ORDER = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s

    The request id is part of each access-log message rather than the format,
    so records from third-party libraries format cleanly too.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # uvicorn's own access log duplicates notes_api.access
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup runs before the yield, shutdown after it.

    Configuration problems are logged but do not stop the server: it can
    still answer health checks while the operator fixes the environment.
    """
    settings: Settings = app.state.settings
    store: NoteStore = app.state.store

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("Notes API %s starting up (%s)...", __version__, settings.environment)

    try:
        settings.validate_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    await store.initialize()
    logger.info("Storage backend: %s", type(store).__name__)

    if settings.should_seed_sample_data:
        seeded = await store.seed_sample_data()
        logger.info("Seeded %d sample notes", len(seeded))

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("API docs: http://%s:%d/docs", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Notes API shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def allowed_methods_for(request: Request) -> List[str]:
    """
    Methods the app's routes accept for this request's path, plus OPTIONS.

    Starlette's own 405 only names the methods of the first route that
    matched the path; several routes can share a path here.
    """
    methods = {"OPTIONS"}
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match != Match.NONE:
            methods.update(getattr(route, "methods", None) or ())
    rank = {method: i for i, method in enumerate(_METHOD_ORDER)}
    return sorted(methods, key=lambda m: (rank.get(m, len(rank)), m))


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError         → 400 VALIDATION_ERROR (details: field, value)
        BadRequestError         → 400 BAD_REQUEST
        RequestValidationError  → 400 BAD_REQUEST (FastAPI would send 422)
        NotFoundError           → 404 NOT_FOUND (details: id)
        StorageError            → 500 INTERNAL_SERVER_ERROR
        HTTPException 404       → 404 "Endpoint not found: <METHOD> <path>"
        HTTPException 405       → 405 METHOD_NOT_ALLOWED with Allow header

    Anything else escapes to ErrorTrapMiddleware.

    Security: handlers NEVER expose internal details (stack traces, SQL) in
    the response. Details are logged server-side.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Client sent invalid input; tell them which field and why."""
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return responses.validation_error(
            exc.message, field=exc.field, value=exc.details.get("value")
        )

    @app.exception_handler(BadRequestError)
    async def handle_bad_request(request: Request, exc: BadRequestError):
        logger.warning("[%s] Bad request: %s", request_id_var.get(""), exc.message)
        return responses.bad_request(exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return responses.not_found(exc.message, resource_id=exc.resource_id)

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        """Storage failed; generic message to the client, details logged."""
        logger.error(
            "[%s] Storage error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return responses.internal_server_error("Database operation failed")

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), exc.errors())
        return responses.bad_request("Invalid request parameters")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Errors raised by the router itself: no route, wrong method."""
        if exc.status_code == 404:
            return responses.error(
                f"Endpoint not found: {request.method} {request.url.path}",
                code="NOT_FOUND",
                status_code=404,
            )
        if exc.status_code == 405:
            return responses.method_not_allowed(request.method, allowed_methods_for(request))
        try:
            code = HTTPStatus(exc.status_code).name
        except ValueError:
            code = "HTTP_ERROR"
        return responses.error(
            str(exc.detail),
            code=code,
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None, store: Optional[NoteStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to the environment-loaded singleton
        store:    Note storage; defaults to build_store(settings)

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    settings = settings or default_settings
    store = store if store is not None else build_store(settings)

    app = FastAPI(
        title="Notes API",
        description="REST API for creating, reading, updating, deleting and searching notes.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition.
    # Added Logging → RequestID → CORS → ErrorTrap, so it runs
    # ErrorTrap → CORS → RequestID → Logging (last added = first to execute)

    # The trap's own 500s need the same CORS headers as every other response
    cors_policy = CORSPolicy(
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_allow_credentials,
        max_age=settings.cors_max_age,
    )

    app.add_middleware(RequestLoggingMiddleware, log_headers=settings.log_headers)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(CORSMiddleware, policy=cors_policy)
    app.add_middleware(ErrorTrapMiddleware, cors_policy=cors_policy)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(notes.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `notes_api.main:app` to be importable
app = create_app()
