"""
Notes API: Health Check & Service Info Routes
===============================================

What:  GET /health for load-balancer health checks and GET / describing the service.
Why:   Container platforms and load balancers poll /health to decide whether
       to route traffic here.
How:   /health answers from process state only: it never touches the store,
       so it always succeeds while the process is serving.
"""

import logging
import time

from fastapi import APIRouter, Request
from starlette.responses import Response

from notes_api import __version__, responses
from notes_api.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module-level: uptime is measured from import, i.e. process start
_start_time = time.time()


@router.get(
    "/health",
    response_model=None,
    responses={200: {"description": "Service is up", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request) -> Response:
    settings = request.app.state.settings
    return responses.health_check(
        service=settings.service_name,
        additional_info={
            "version": __version__,
            "environment": settings.environment,
            "uptimeSeconds": round(time.time() - _start_time, 2),
        },
    )


@router.get("/", response_model=None, summary="Service information")
async def root(request: Request) -> Response:
    settings = request.app.state.settings
    return responses.success(
        {
            "message": "Notes API is running",
            "version": __version__,
            "environment": settings.environment,
            "endpoints": {
                "health": "/health",
                "notes": "/api/notes",
                "search": "/api/notes/search?q=",
                "documentation": "/docs",
            },
        }
    )
