"""
Notes API: Pydantic Request/Response Schemas
==============================================

What:  Pydantic models describing the API contract.
Why:   One place defines the JSON field names (camelCase timestamps), the
       serialization of datetimes (ISO-8601, UTC, "Z" suffix) and the
       OpenAPI documentation.
How:   Routes serialize Note values through NoteResponse.from_note(); request
       bodies are parsed by hand in the routes (the API answers malformed
       input with 400 envelopes rather than FastAPI's 422), so the request
       models here only feed the OpenAPI docs.

Design Decision:
    Schemas are separate from the Note dataclass and the ORM record so the
    wire format can change independently of storage.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from notes_api.models.note import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH, Note


# ══════════════════════════════════════════════════════════════════════════
# Request Models (documentation only)
# ══════════════════════════════════════════════════════════════════════════


class NoteCreateRequest(BaseModel):
    title: str = Field(max_length=TITLE_MAX_LENGTH, description="Note title (required)")
    content: str = Field(max_length=CONTENT_MAX_LENGTH, description="Note body (required)")


class NoteUpdateRequest(BaseModel):
    """Partial update: omitted fields keep their current value."""
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    content: Optional[str] = Field(default=None, max_length=CONTENT_MAX_LENGTH)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    What:  Full representation of a note.
    Who:   Returned by GET/POST/PUT on /api/notes and inside list envelopes.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="Unique note identifier (UUID)")
    title: str = Field(description="Trimmed note title")
    content: str = Field(description="Trimmed note body")
    created_at: datetime = Field(serialization_alias="createdAt", description="Creation time (UTC ISO 8601)")
    updated_at: datetime = Field(serialization_alias="updatedAt", description="Last update time (UTC ISO 8601)")

    @classmethod
    def from_note(cls, note: Note) -> "NoteResponse":
        return cls.model_validate(note)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class NoteListResponse(BaseModel):
    """Returned by GET /api/notes and GET /api/notes/search."""
    notes: List[NoteResponse] = Field(description="Notes, newest first")
    count: int = Field(description="Number of notes in the list")


class ErrorBody(BaseModel):
    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Additional error context")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": {
                "code": "NOT_FOUND",
                "message": "Note not found",
                "details": {"id": "3f2c..."}
            }
        }
    """
    error: ErrorBody


class HealthResponse(BaseModel):
    status: str = Field(description="Always 'healthy' while the process serves requests")
    timestamp: datetime = Field(description="Server time (UTC)")
    service: str = Field(description="Service name")
    version: str = Field(description="Application version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: float = Field(serialization_alias="uptimeSeconds", description="Seconds since start")


def serialize_note(note: Note) -> Dict[str, Any]:
    return NoteResponse.from_note(note).to_json()


def serialize_notes(notes: List[Note]) -> List[Dict[str, Any]]:
    return [serialize_note(note) for note in notes]
