"""
Notes API: Notes Route Handlers
=================================

What:  CRUD and search endpoints under /api/notes.
How:   Each handler reads the request, delegates to NoteService and shapes the
       envelope with notes_api.responses. Errors raised by the service are
       converted by the exception handlers registered in main.py.

Route Inventory:
    GET    /api/notes              list, newest first
    GET    /api/notes/search?q=    case-insensitive search on title/content
    GET    /api/notes/{id}         single note
    POST   /api/notes              create
    PUT    /api/notes/{id}         partial update
    DELETE /api/notes/{id}         delete
    GET|PUT|DELETE /api/notes/     400 "Note ID is required" (empty id segment)

Order matters: /notes/search is declared before /notes/{note_id} so "search"
is never taken for an id.

Request bodies are read by hand instead of through Pydantic body models so
that malformed input gets the API's own 400 envelopes (FastAPI would answer
422 with a different shape).
"""

import json
import logging
import math
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from starlette.responses import Response

from notes_api import responses
from notes_api.exceptions import BadRequestError
from notes_api.schemas.note import (
    ErrorResponse,
    NoteCreateRequest,
    NoteListResponse,
    NoteResponse,
    NoteUpdateRequest,
    serialize_note,
    serialize_notes,
)
from notes_api.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])

_BAD_REQUEST = {400: {"description": "Malformed request", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}


def get_note_service(request: Request) -> NoteService:
    """Dependency: a NoteService over the store injected at app creation."""
    return NoteService(request.app.state.store)


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Non-finite number {token} is not valid JSON")


def _parse_finite_float(token: str) -> float:
    value = float(token)
    if not math.isfinite(value):
        raise ValueError(f"Number {token} is out of range")
    return value


async def read_json_object(request: Request) -> Dict[str, Any]:
    """
    Parse the request body as a JSON object.

    Raises:
        BadRequestError: empty body ("Request body is required"), or a body
            that is not valid JSON or not an object ("Invalid JSON format").
            NaN, Infinity and numbers that overflow a float count as
            invalid JSON.
    """
    raw = await request.body()
    if not raw.strip():
        raise BadRequestError("Request body is required")
    try:
        data = json.loads(
            raw, parse_constant=_reject_constant, parse_float=_parse_finite_float
        )
    except ValueError as e:
        logger.debug("Rejected request body: %s", str(e))
        raise BadRequestError("Invalid JSON format")
    if not isinstance(data, dict):
        raise BadRequestError("Invalid JSON format")
    return data


# ── Collection ────────────────────────────────────────────────────────────

@router.get(
    "/notes",
    response_model=None,
    responses={200: {"description": "All notes, newest first", "model": NoteListResponse}},
    summary="List notes",
)
async def list_notes(service: NoteService = Depends(get_note_service)) -> Response:
    notes = await service.list_notes()
    return responses.success_list(items=serialize_notes(notes), item_name="notes")


@router.get(
    "/notes/search",
    response_model=None,
    responses={
        200: {"description": "Matching notes, newest first", "model": NoteListResponse},
        **_BAD_REQUEST,
    },
    summary="Search notes by title or content",
)
async def search_notes(
    q: Optional[str] = Query(default=None, description="Case-insensitive substring"),
    service: NoteService = Depends(get_note_service),
) -> Response:
    notes = await service.search_notes(q)
    return responses.success_list(items=serialize_notes(notes), item_name="notes")


@router.post(
    "/notes",
    status_code=201,
    response_model=None,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": NoteCreateRequest.model_json_schema()}},
        }
    },
    responses={201: {"description": "Note created", "model": NoteResponse}, **_BAD_REQUEST},
    summary="Create a note",
)
async def create_note(
    request: Request,
    service: NoteService = Depends(get_note_service),
) -> Response:
    payload = await read_json_object(request)
    note = await service.create_note(payload)
    return responses.created(serialize_note(note))


# ── Empty id segment ──────────────────────────────────────────────────────

@router.api_route(
    "/notes/",
    methods=["GET", "PUT", "DELETE"],
    response_model=None,
    include_in_schema=False,
)
async def missing_note_id() -> Response:
    raise BadRequestError("Note ID is required")


# ── Single note ───────────────────────────────────────────────────────────

@router.get(
    "/notes/{note_id}",
    response_model=None,
    responses={200: {"description": "The note", "model": NoteResponse}, **_BAD_REQUEST, **_NOT_FOUND},
    summary="Get a note by ID",
)
async def get_note(note_id: str, service: NoteService = Depends(get_note_service)) -> Response:
    note = await service.get_note(note_id)
    return responses.success(serialize_note(note))


@router.put(
    "/notes/{note_id}",
    response_model=None,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": NoteUpdateRequest.model_json_schema()}},
        }
    },
    responses={200: {"description": "Updated note", "model": NoteResponse}, **_BAD_REQUEST, **_NOT_FOUND},
    summary="Update a note (partial)",
)
async def update_note(
    note_id: str,
    request: Request,
    service: NoteService = Depends(get_note_service),
) -> Response:
    if not note_id.strip():
        raise BadRequestError("Note ID is required")
    payload = await read_json_object(request)
    note = await service.update_note(note_id, payload)
    return responses.success(serialize_note(note))


@router.delete(
    "/notes/{note_id}",
    status_code=204,
    response_model=None,
    responses={**_BAD_REQUEST, **_NOT_FOUND},
    summary="Delete a note",
)
async def delete_note(note_id: str, service: NoteService = Depends(get_note_service)) -> Response:
    await service.delete_note(note_id)
    return responses.no_content()
