"""
Notes API: Abstract Note Store Interface
==========================================

What:  Abstract base class defining the contract every note store honours.
Why:   The in-memory store and the SQL store are interchangeable; NoteService
       and the routes only ever see a NoteStore.
How:   Concrete implementations inherit from NoteStore and implement the
       abstract coroutines below.
Who:   Built once by the app factory (or a test) and injected into the app.

Contract:
    - Absence is a normal outcome: get/update return None, delete returns False
    - list_all() and search() are ordered by created_at, newest first
    - search() is a case-insensitive substring match on title OR content
    - insert() on an existing id overwrites; it never rejects
    - Stores that can fail (I/O, network) raise StorageError and nothing else
    - No retries at this layer

Implementations:
    - InMemoryNoteStore: process-local dict (reference behaviour)
    - SqlNoteStore: SQLAlchemy async engine (SQLite, PostgreSQL, ...)
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from notes_api.models.note import Note

SAMPLE_NOTES = (
    (
        "Welcome to Notes API",
        "This is your first note! You can create, read, update, and delete notes "
        "using this API.",
    ),
    (
        "API Endpoints",
        "Available endpoints:\n- GET /api/notes (list all)\n- POST /api/notes (create)\n"
        "- PUT /api/notes/{id} (update)\n- DELETE /api/notes/{id} (delete)",
    ),
    (
        "Development Mode",
        "This API is currently running in development mode with an in-memory store. "
        "Set STORAGE_BACKEND=sql to keep notes in a database.",
    ),
)


class NoteStore(ABC):
    """Keyed collection of notes addressed by note id."""

    async def initialize(self) -> None:
        """Prepare backing resources (tables, connections). No-op by default."""

    async def close(self) -> None:
        """Release backing resources. No-op by default."""

    @abstractmethod
    async def insert(self, note: Note) -> Note:
        """Store `note` under `note.id` and return it."""
        ...

    @abstractmethod
    async def get(self, note_id: str) -> Optional[Note]:
        ...

    @abstractmethod
    async def update(self, note_id: str, note: Note) -> Optional[Note]:
        """Replace the note stored under `note_id`; None if there is none."""
        ...

    @abstractmethod
    async def delete(self, note_id: str) -> bool:
        """Remove the note; True if something was removed."""
        ...

    @abstractmethod
    async def list_all(self) -> List[Note]:
        ...

    @abstractmethod
    async def search(self, query: str) -> List[Note]:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    async def exists(self, note_id: str) -> bool:
        return await self.get(note_id) is not None

    async def seed_sample_data(self) -> List[Note]:
        """Insert the development sample notes, oldest first."""
        notes = [Note.create(title=title, content=content) for title, content in SAMPLE_NOTES]
        for note in notes:
            await self.insert(note)
        return notes
