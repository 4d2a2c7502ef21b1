"""
Notes API — Note SQLAlchemy Model
===================================

What:  Declarative model describing the `notes` table.
Why:   Single source for the table shape: the schema initializer renders its
       DDL from it and NoteService builds every statement from its columns.

Resulting PostgreSQL DDL:
    CREATE TABLE IF NOT EXISTS notes (
        id SERIAL NOT NULL,
        title VARCHAR(255) NOT NULL,
        content TEXT,
        created_at TIMESTAMP WITHOUT TIME ZONE DEFAULT now(),
        updated_at TIMESTAMP WITHOUT TIME ZONE DEFAULT now(),
        PRIMARY KEY (id)
    )
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from notes_api.database import Base

TITLE_MAX_LENGTH = 255


class Note(Base):
    """
    A single note.

    Lifecycle:
        1. Inserted by POST /notes; the database assigns id and both timestamps
        2. Updated by PUT /notes/{id}; title, content and updated_at change
        3. Removed by DELETE /notes/{id} (hard delete)
    """

    __tablename__ = "notes"

    # Integer + primary key renders as SERIAL on PostgreSQL
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)

    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Server-side defaults: timestamps come from the database clock, never the client
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}')>"


# Column set returned by every read and by INSERT/UPDATE ... RETURNING
notes_table = Note.__table__
NOTE_COLUMNS = (
    notes_table.c.id,
    notes_table.c.title,
    notes_table.c.content,
    notes_table.c.created_at,
    notes_table.c.updated_at,
)
