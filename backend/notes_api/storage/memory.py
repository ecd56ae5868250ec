"""
Notes API: In-Memory Note Store
=================================

What:  NoteStore backed by a plain dict keyed by note id.
Why:   Reference storage: zero setup, used in development and in tests.
How:   Reads work on the dict directly; mutations hold an asyncio.Lock so
       check-then-write sequences cannot interleave between coroutines.

Thread Safety:
    Safe for a single event loop (uvicorn worker). Each worker process holds its
    own copy, so multi-worker deployments should use SqlNoteStore instead.

Ordering:
    Timestamps come from a strictly increasing clock (models.note.utc_now), so
    sorting on created_at alone gives a total newest-first order.
"""

import asyncio
import logging
from typing import Dict, List, Optional

from notes_api.models.note import Note
from notes_api.storage.base import NoteStore

logger = logging.getLogger(__name__)


class InMemoryNoteStore(NoteStore):

    def __init__(self) -> None:
        self._notes: Dict[str, Note] = {}
        self._lock = asyncio.Lock()

    async def insert(self, note: Note) -> Note:
        async with self._lock:
            if note.id in self._notes:
                logger.warning("Insert overwrote existing note %s", note.id)
            self._notes[note.id] = note
        logger.debug("Created note with ID: %s", note.id)
        return note

    async def get(self, note_id: str) -> Optional[Note]:
        return self._notes.get(note_id)

    async def update(self, note_id: str, note: Note) -> Optional[Note]:
        async with self._lock:
            if note_id not in self._notes:
                logger.debug("Note not found for update with ID: %s", note_id)
                return None
            self._notes[note_id] = note
        logger.debug("Updated note with ID: %s", note_id)
        return note

    async def delete(self, note_id: str) -> bool:
        async with self._lock:
            removed = self._notes.pop(note_id, None)
        if removed is None:
            logger.debug("Note not found for deletion with ID: %s", note_id)
            return False
        logger.debug("Deleted note with ID: %s", note_id)
        return True

    async def list_all(self) -> List[Note]:
        return sorted(self._notes.values(), key=lambda n: n.created_at, reverse=True)

    async def search(self, query: str) -> List[Note]:
        needle = query.lower()
        matches = [
            note
            for note in await self.list_all()
            if needle in note.title.lower() or needle in note.content.lower()
        ]
        logger.debug("Found %d notes matching query: %s", len(matches), query)
        return matches

    async def count(self) -> int:
        return len(self._notes)

    async def exists(self, note_id: str) -> bool:
        return note_id in self._notes
