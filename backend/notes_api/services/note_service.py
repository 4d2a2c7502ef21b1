"""
Notes API — Note Service (Business Logic)
===========================================

What:  The four notes operations: list, create, update, delete.
Why:   Keeps SQL construction and not-found decisions out of the HTTP layer.
How:   Each operation builds exactly one parameterized statement from the
       table columns and runs it through Database.execute().
Who:   Called by the notes route handlers with the injected Database.

Statements issued:
    list:    SELECT ... FROM notes ORDER BY id DESC
    create:  INSERT INTO notes (title, content) VALUES (...) RETURNING ...
    update:  UPDATE notes SET title, content, updated_at = now()
             WHERE id = :id RETURNING ...
    delete:  DELETE FROM notes WHERE id = :id

Design Decision:
    NoteService is stateless. It receives the Database handle on every call,
    so tests can pass a fake and there is no shared mutable state.
"""

import logging
from typing import List

from sqlalchemy import delete, func, insert, select, update

from notes_api.database import Database
from notes_api.exceptions import NotFoundError
from notes_api.models.note import NOTE_COLUMNS, notes_table
from notes_api.schemas.note import NoteInput, NoteResponse

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        Input arrives already validated (NoteInput, parsed integer id).
        Database failures surface as DatabaseError from Database.execute and
        propagate unchanged. An UPDATE or DELETE that matches no row becomes
        NotFoundError.
    """

    async def list_notes(self, database: Database) -> List[NoteResponse]:
        """
        Return every note, newest id first.

        Query plan:
            SELECT ... FROM notes ORDER BY id DESC
            → Backward scan of the primary key index
        """
        rows = await database.execute(
            select(*NOTE_COLUMNS).order_by(notes_table.c.id.desc())
        )
        return [NoteResponse.model_validate(dict(row)) for row in rows]

    async def create_note(self, database: Database, data: NoteInput) -> NoteResponse:
        """
        Insert a note and return it with its server-assigned id and timestamps.

        created_at and updated_at are both filled by the column defaults in
        the same statement, so they are equal on a fresh note.
        """
        rows = await database.execute(
            insert(notes_table)
            .values(title=data.title, content=data.content)
            .returning(*NOTE_COLUMNS)
        )
        note = NoteResponse.model_validate(dict(rows[0]))
        logger.info("Note %d created", note.id)
        return note

    async def update_note(
        self,
        database: Database,
        note_id: int,
        data: NoteInput,
    ) -> NoteResponse:
        """
        Replace title and content of a note and refresh updated_at.

        Raises:
            NotFoundError: No note has this id (→ 404)
        """
        rows = await database.execute(
            update(notes_table)
            .where(notes_table.c.id == note_id)
            .values(title=data.title, content=data.content, updated_at=func.now())
            .returning(*NOTE_COLUMNS)
        )
        if not rows:
            raise NotFoundError(resource="Note", resource_id=note_id)

        logger.info("Note %d updated", note_id)
        return NoteResponse.model_validate(dict(rows[0]))

    async def delete_note(self, database: Database, note_id: int) -> None:
        """
        Permanently remove a note.

        Raises:
            NotFoundError: No note has this id (→ 404)
        """
        deleted = await database.execute(
            delete(notes_table).where(notes_table.c.id == note_id)
        )
        if deleted == 0:
            raise NotFoundError(resource="Note", resource_id=note_id)

        logger.info("Note %d deleted", note_id)


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
