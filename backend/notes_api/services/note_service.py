"""
Notes API: Note Service (Business Logic)
==========================================

What:  Validation and storage orchestration for every note operation.
Why:   Keeps the rules (required fields, check order, partial updates) out of
       the HTTP layer so they can be tested without a server.
How:   Wraps an injected NoteStore. Expected failures are raised as
       BadRequestError / ValidationError / NotFoundError; StorageError from the
       store propagates untouched.
Who:   Built per request by routes/notes.py from the store on app.state.

Update Flow (PUT /api/notes/{id}):
    ┌──────────┐   ┌──────────┐   ┌──────────────┐   ┌────────────────┐   ┌─────────┐
    │ id check │──▶│  exists? │──▶│ title valid? │──▶│ content valid? │──▶│  store  │
    └──────────┘   └──────────┘   │ (if present) │   │  (if present)  │   │ update  │
                                  └──────────────┘   └────────────────┘   └─────────┘
    Any failure stops the flow before the store is touched, so partial
    writes never happen.
"""

import logging
from typing import Any, List, Mapping, Optional

from notes_api.exceptions import BadRequestError, NotFoundError, ValidationError
from notes_api.models.note import Note, validate_content, validate_title
from notes_api.storage.base import NoteStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "content")


class NoteService:
    """
    Business logic layer for note operations.

    The service holds no state of its own beyond the store reference, so one
    instance per request costs nothing.
    """

    def __init__(self, store: NoteStore):
        self.store = store

    async def list_notes(self) -> List[Note]:
        notes = await self.store.list_all()
        logger.debug("Retrieved %d notes", len(notes))
        return notes

    async def search_notes(self, query: Optional[str]) -> List[Note]:
        if query is None or not query.strip():
            raise BadRequestError('Search query parameter "q" is required')
        return await self.store.search(query.strip())

    async def get_note(self, note_id: Optional[str]) -> Note:
        note_id = self._require_id(note_id)
        note = await self.store.get(note_id)
        if note is None:
            raise NotFoundError(resource_id=note_id)
        return note

    async def create_note(self, payload: Mapping[str, Any]) -> Note:
        """
        Validate `payload` and store a new note.

        Raises:
            ValidationError: a required field is missing/null, or a field
                breaks its rule
        """
        for field in REQUIRED_FIELDS:
            if payload.get(field) is None:
                raise ValidationError(
                    f'Field "{field}" is required', field=field, reason="required"
                )

        validate_title(payload["title"])
        validate_content(payload["content"])

        note = Note.create(title=payload["title"], content=payload["content"])
        created = await self.store.insert(note)
        logger.info("Created note %s", created.id)
        return created

    async def update_note(self, note_id: Optional[str], payload: Mapping[str, Any]) -> Note:
        """
        Apply a partial update.

        Only keys present in `payload` are validated and changed; updatedAt
        moves forward even when the payload is empty.
        """
        note_id = self._require_id(note_id)

        existing = await self.store.get(note_id)
        if existing is None:
            raise NotFoundError(resource_id=note_id)

        if "title" in payload:
            validate_title(payload["title"])
        if "content" in payload:
            validate_content(payload["content"])

        updated = existing.copy_with(
            title=payload.get("title"),
            content=payload.get("content"),
        )
        result = await self.store.update(note_id, updated)
        if result is None:
            # Deleted between the existence check and the write
            raise NotFoundError(resource_id=note_id)
        logger.info("Updated note %s", note_id)
        return result

    async def delete_note(self, note_id: Optional[str]) -> None:
        note_id = self._require_id(note_id)
        if not await self.store.delete(note_id):
            raise NotFoundError(resource_id=note_id)
        logger.info("Deleted note %s", note_id)

    @staticmethod
    def _require_id(note_id: Optional[str]) -> str:
        if note_id is None or not note_id.strip():
            raise BadRequestError("Note ID is required")
        return note_id
