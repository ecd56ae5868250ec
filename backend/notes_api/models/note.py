"""
Notes API: Note Entity
========================

What:  The note value type, its validation rules and its construction helpers.
Why:   Every route works with the same immutable value; validation lives next
       to the data it protects so the rules are stated exactly once.
Who:   NoteService validates with validate_title/validate_content and builds
       values with Note.create / Note.copy_with; stores persist them as-is.

Rules:
    title:    required (non-blank after trimming), at most 200 characters
    content:  required (non-blank after trimming), at most 10,000 characters

    Lengths are counted in Unicode code points (Python's len) on the value as
    supplied, before trimming. Stored values are the trimmed inputs.

Identity:
    Two notes are equal iff their ids match; the other fields do not take part
    in equality or hashing.
"""

import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from notes_api.exceptions import ValidationError

TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 10_000

_clock_lock = threading.Lock()
_last_timestamp: Optional[datetime] = None


def utc_now() -> datetime:
    """
    Current UTC time, strictly increasing across calls in this process.

    Two calls inside the same microsecond would otherwise return equal values,
    which breaks newest-first ordering and the "every update moves updatedAt
    forward" rule.
    """
    global _last_timestamp
    with _clock_lock:
        now = datetime.now(timezone.utc)
        if _last_timestamp is not None and now <= _last_timestamp:
            now = _last_timestamp + timedelta(microseconds=1)
        _last_timestamp = now
        return now


def _validate_text(candidate: Any, label: str, max_length: int, limit_text: str) -> None:
    field = label.lower()
    if candidate is None:
        raise ValidationError(f"{label} is required", field=field, reason="required")
    if not isinstance(candidate, str):
        raise ValidationError(
            f"{label} must be a string", field=field, reason="invalid_type", value=candidate
        )
    if not candidate.strip():
        raise ValidationError(
            f"{label} is required", field=field, reason="required", value=candidate
        )
    if len(candidate) > max_length:
        raise ValidationError(
            f"{label} must be {limit_text} characters or less",
            field=field,
            reason="too_long",
            value=candidate,
        )


def validate_title(candidate: Any) -> None:
    """Raise ValidationError unless `candidate` is an acceptable note title."""
    _validate_text(candidate, "Title", TITLE_MAX_LENGTH, "200")


def validate_content(candidate: Any) -> None:
    """Raise ValidationError unless `candidate` is acceptable note content."""
    _validate_text(candidate, "Content", CONTENT_MAX_LENGTH, "10,000")


@dataclass(frozen=True, eq=False)
class Note:
    """
    An immutable note.

    Lifecycle:
        1. Note.create() assigns the id and both timestamps
        2. copy_with() produces the updated value (id/created_at kept,
           updated_at refreshed even if nothing else changed)
        3. Deleted only by an explicit store delete
    """

    id: str
    title: str
    content: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(cls, title: str, content: str) -> "Note":
        """
        Build a brand-new note. The caller has already validated both fields.
        """
        now = utc_now()
        return cls(
            id=str(uuid.uuid4()),
            title=title.strip(),
            content=content.strip(),
            created_at=now,
            updated_at=now,
        )

    def copy_with(self, title: Optional[str] = None, content: Optional[str] = None) -> "Note":
        return Note(
            id=self.id,
            title=title.strip() if title is not None else self.title,
            content=content.strip() if content is not None else self.content,
            created_at=self.created_at,
            updated_at=utc_now(),
        )

    # ── Identity ──────────────────────────────────────────────────────────
    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Note):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}', created_at='{self.created_at}')>"
