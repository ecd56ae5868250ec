"""
Notes API: SQL Note Store
===========================

What:  Durable NoteStore on top of SQLAlchemy's async engine.
Why:   Notes survive restarts and can be shared by several worker processes.
How:   One short transaction per operation. Every SQLAlchemy error is logged
       with its operation name and re-raised as StorageError, which the app
       reports as a generic 500.
Who:   Selected by STORAGE_BACKEND=sql; DATABASE_URL picks the database
       (sqlite+aiosqlite:///./notes.db by default, postgresql+asyncpg://... in
       production).

Query plans:
    get/update/delete:  primary key lookup on notes.id
    list_all:           ORDER BY created_at DESC (idx_notes_created_at)
    search:             lower(title) LIKE %q% OR lower(content) LIKE %q%,
                        same ordering; wildcards in q are escaped
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from notes_api.database import Base, build_engine, build_session_factory
from notes_api.exceptions import StorageError
from notes_api.models.note import Note
from notes_api.models.note_record import NoteRecord
from notes_api.storage.base import NoteStore

logger = logging.getLogger(__name__)


class SqlNoteStore(NoteStore):
    """
    NoteStore backed by a relational database.

    The store owns its engine: initialize() creates the schema if missing and
    close() disposes the connection pool.
    """

    def __init__(self, database_url: str, engine: Optional[AsyncEngine] = None, **engine_options):
        self.database_url = database_url
        self._engine = engine or build_engine(database_url, **engine_options)
        self._session_factory = build_session_factory(self._engine)

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        """
        Transaction scope for one store operation.

        Commits on success, rolls back on any error, and translates database
        failures into StorageError.
        """
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
                raise StorageError(
                    context={"operation": operation, "error_type": type(e).__name__},
                ) from e
            except Exception:
                await session.rollback()
                raise

    # ── Lifecycle ─────────────────────────────────────────────────────────
    async def initialize(self) -> None:
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error("Could not initialize database schema: %s", str(e))
            raise StorageError(context={"operation": "initialize"}) from e
        logger.info("SQL note store ready (%s)", self._engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        await self._engine.dispose()
        logger.info("SQL note store closed")

    # ── Operations ────────────────────────────────────────────────────────
    async def insert(self, note: Note) -> Note:
        async with self._session("insert") as session:
            existing = await session.get(NoteRecord, note.id)
            if existing is not None:
                logger.warning("Insert overwrote existing note %s", note.id)
                existing.apply(note)
                existing.created_at = note.created_at
            else:
                session.add(NoteRecord.from_note(note))
        logger.debug("Created note with ID: %s", note.id)
        return note

    async def get(self, note_id: str) -> Optional[Note]:
        async with self._session("get") as session:
            record = await session.get(NoteRecord, note_id)
            return record.to_note() if record is not None else None

    async def update(self, note_id: str, note: Note) -> Optional[Note]:
        async with self._session("update") as session:
            record = await session.get(NoteRecord, note_id)
            if record is None:
                logger.debug("Note not found for update with ID: %s", note_id)
                return None
            record.apply(note)
        logger.debug("Updated note with ID: %s", note_id)
        return note

    async def delete(self, note_id: str) -> bool:
        async with self._session("delete") as session:
            result = await session.execute(delete(NoteRecord).where(NoteRecord.id == note_id))
            removed = result.rowcount > 0
        if not removed:
            logger.debug("Note not found for deletion with ID: %s", note_id)
        return removed

    async def list_all(self) -> List[Note]:
        async with self._session("list_all") as session:
            result = await session.execute(
                select(NoteRecord).order_by(NoteRecord.created_at.desc())
            )
            return [record.to_note() for record in result.scalars().all()]

    async def search(self, query: str) -> List[Note]:
        needle = query.lower()
        async with self._session("search") as session:
            result = await session.execute(
                select(NoteRecord)
                .where(
                    or_(
                        func.lower(NoteRecord.title).contains(needle, autoescape=True),
                        func.lower(NoteRecord.content).contains(needle, autoescape=True),
                    )
                )
                .order_by(NoteRecord.created_at.desc())
            )
            notes = [record.to_note() for record in result.scalars().all()]
        logger.debug("Found %d notes matching query: %s", len(notes), query)
        return notes

    async def count(self) -> int:
        async with self._session("count") as session:
            result = await session.execute(select(func.count(NoteRecord.id)))
            return result.scalar() or 0
