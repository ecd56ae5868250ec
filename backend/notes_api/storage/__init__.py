"""
Notes API: Storage Package
============================

What:  The storage collaborator behind the notes routes.

Store Inventory:
    - NoteStore (abstract): the contract (base.py)
    - InMemoryNoteStore: dict-backed reference store (memory.py)
    - SqlNoteStore: SQLAlchemy async store (sql.py)

build_store() picks the implementation from settings; the app factory calls it
only when no store was injected explicitly.
"""

from notes_api.config import Settings
from notes_api.storage.base import NoteStore
from notes_api.storage.memory import InMemoryNoteStore
from notes_api.storage.sql import SqlNoteStore

__all__ = ["NoteStore", "InMemoryNoteStore", "SqlNoteStore", "build_store"]


def build_store(settings: Settings) -> NoteStore:
    if settings.storage_backend == "sql":
        return SqlNoteStore(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.log_level == "DEBUG",
        )
    return InMemoryNoteStore()
