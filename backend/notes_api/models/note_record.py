"""
Notes API: Note SQLAlchemy Model
==================================

What:  ORM model representing the `notes` table used by SqlNoteStore.
How:   Inherits from the DeclarativeBase in database.py; SqlNoteStore creates
       the table with Base.metadata.create_all on initialize().

Table Design Rationale:
    - id: the note's UUID4 text, stored as a 36-char string so any dialect works
    - title/content: title length mirrors the API limit; content is TEXT
    - created_at/updated_at: timezone-aware; SQLite drops the offset, so values
      read back are re-tagged as UTC in to_note()

Index on created_at DESC:
    Listing and searching are always ordered newest-first.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notes_api.database import Base
from notes_api.models.note import TITLE_MAX_LENGTH, Note


class NoteRecord(Base):
    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_notes_created_at", created_at.desc()),
    )

    @classmethod
    def from_note(cls, note: Note) -> "NoteRecord":
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )

    def apply(self, note: Note) -> None:
        """Copy the mutable fields of `note` onto this row."""
        self.title = note.title
        self.content = note.content
        self.updated_at = note.updated_at

    def to_note(self) -> Note:
        return Note(
            id=self.id,
            title=self.title,
            content=self.content,
            created_at=_as_utc(self.created_at),
            updated_at=_as_utc(self.updated_at),
        )

    def __repr__(self) -> str:
        return f"<NoteRecord(id={self.id}, created_at='{self.created_at}')>"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
