"""
Notes API — Note Service Unit Tests
=====================================

What:  Tests for NoteService (list, create, update, delete).
How:   Uses a mock Database; inspects the statements handed to execute().

What we test:
    ✅ Rows are mapped to NoteResponse (NULL content → "")
    ✅ Statements carry user input as bound parameters
    ✅ No matching row raises NotFoundError
    ✅ DatabaseError propagates unchanged
"""

from datetime import datetime

import pytest
from sqlalchemy import Delete, Insert, Select, Update

from notes_api.exceptions import DatabaseError, NotFoundError
from notes_api.schemas.note import NoteInput
from notes_api.services.note_service import NoteService

CREATED = datetime(2026, 1, 15, 12, 0, 0)
UPDATED = datetime(2026, 1, 16, 8, 30, 0)


def _row(note_id=1, title="Title", content="Body", created=CREATED, updated=CREATED):
    return {
        "id": note_id,
        "title": title,
        "content": content,
        "created_at": created,
        "updated_at": updated,
    }


class TestNoteServiceList:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_list_empty(self, mock_database):
        mock_database.execute.return_value = []

        assert await self.service.list_notes(mock_database) == []

    @pytest.mark.asyncio
    async def test_list_maps_rows(self, mock_database):
        mock_database.execute.return_value = [_row(2, content=None), _row(1)]

        result = await self.service.list_notes(mock_database)

        assert [note.id for note in result] == [2, 1]
        assert result[0].content == ""
        assert result[1].content == "Body"

    @pytest.mark.asyncio
    async def test_list_orders_by_id_desc(self, mock_database):
        mock_database.execute.return_value = []

        await self.service.list_notes(mock_database)

        statement = mock_database.execute.await_args.args[0]
        assert isinstance(statement, Select)
        assert "ORDER BY notes.id DESC" in str(statement)


class TestNoteServiceCreate:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_create_binds_trimmed_input(self, mock_database):
        mock_database.execute.return_value = [_row(7, title="Hello", content="")]

        result = await self.service.create_note(
            mock_database, NoteInput.from_payload({"title": "  Hello "})
        )

        assert result.id == 7
        assert result.title == "Hello"
        statement = mock_database.execute.await_args.args[0]
        assert isinstance(statement, Insert)
        assert statement.compile().params == {"title": "Hello", "content": ""}

    @pytest.mark.asyncio
    async def test_create_keeps_hostile_title_out_of_sql(self, mock_database):
        title = "x'); DROP TABLE notes; --"
        mock_database.execute.return_value = [_row(title=title)]

        await self.service.create_note(mock_database, NoteInput.from_payload({"title": title}))

        statement = mock_database.execute.await_args.args[0]
        assert "DROP TABLE" not in str(statement)
        assert statement.compile().params["title"] == title

    @pytest.mark.asyncio
    async def test_create_database_error_propagates(self, mock_database):
        mock_database.execute.side_effect = DatabaseError()

        with pytest.raises(DatabaseError):
            await self.service.create_note(mock_database, NoteInput.from_payload({"title": "x"}))


class TestNoteServiceUpdate:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_update_returns_row(self, mock_database):
        mock_database.execute.return_value = [_row(3, title="New", updated=UPDATED)]

        result = await self.service.update_note(
            mock_database, 3, NoteInput.from_payload({"title": "New"})
        )

        assert result.updated_at == UPDATED
        assert result.created_at == CREATED
        statement = mock_database.execute.await_args.args[0]
        assert isinstance(statement, Update)
        assert "updated_at=now()" in str(statement).replace(" ", "")

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, mock_database):
        mock_database.execute.return_value = []

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.update_note(mock_database, 42, NoteInput.from_payload({"title": "x"}))

        assert exc_info.value.message == "Note not found"
        assert exc_info.value.context["resource_id"] == 42


class TestNoteServiceDelete:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_delete_existing(self, mock_database):
        mock_database.execute.return_value = 1

        assert await self.service.delete_note(mock_database, 5) is None
        assert isinstance(mock_database.execute.await_args.args[0], Delete)

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self, mock_database):
        mock_database.execute.return_value = 0

        with pytest.raises(NotFoundError):
            await self.service.delete_note(mock_database, 9999)
