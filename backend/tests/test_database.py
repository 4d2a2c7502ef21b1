"""
Notes API — Database Layer Tests
==================================

What:  Database.execute / ping / init_schema / close against real SQLite files.
Why:   The pool wrapper is where parameter binding, error wrapping and the
       idempotent schema bootstrap live.
"""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from notes_api.database import Database
from notes_api.exceptions import DatabaseError, StartupError

INSERT_NOTE = "INSERT INTO notes (title, content) VALUES (:title, :content)"


class TestExecute:

    @pytest.mark.asyncio
    async def test_select_returns_row_mappings(self, database):
        rows = await database.execute("SELECT :value AS value", {"value": 5})

        assert len(rows) == 1
        assert rows[0]["value"] == 5

    @pytest.mark.asyncio
    async def test_write_returns_row_count(self, database):
        assert await database.execute(INSERT_NOTE, {"title": "a", "content": ""}) == 1
        assert await database.execute(INSERT_NOTE, {"title": "b", "content": ""}) == 1

        assert await database.execute("DELETE FROM notes") == 2

    @pytest.mark.asyncio
    async def test_parameters_are_never_interpolated(self, database):
        title = "x'); DROP TABLE notes; --"

        await database.execute(INSERT_NOTE, {"title": title, "content": ""})

        rows = await database.execute("SELECT title FROM notes")
        assert rows[0]["title"] == title

    @pytest.mark.asyncio
    async def test_sql_error_is_wrapped(self, database):
        with pytest.raises(DatabaseError) as exc_info:
            await database.execute("SELECT * FROM missing_table")

        assert exc_info.value.message == "A database error occurred"
        assert exc_info.value.context["error_type"] == "OperationalError"
        assert "missing_table" in exc_info.value.context["detail"]

    @pytest.mark.asyncio
    async def test_ping(self, database):
        await database.ping()


class TestInitSchema:

    @pytest.mark.asyncio
    async def test_repeated_init_keeps_rows(self, database):
        await database.execute(INSERT_NOTE, {"title": "survivor", "content": "x"})

        await database.init_schema()
        await database.init_schema()

        rows = await database.execute("SELECT title, content FROM notes")
        assert [dict(row) for row in rows] == [{"title": "survivor", "content": "x"}]

    @pytest.mark.asyncio
    async def test_server_defaults_fill_timestamps(self, database):
        await database.execute(INSERT_NOTE, {"title": "t", "content": ""})

        rows = await database.execute("SELECT id, created_at, updated_at FROM notes")
        assert rows[0]["id"] == 1
        assert rows[0]["created_at"] is not None
        assert rows[0]["created_at"] == rows[0]["updated_at"]

    @pytest.mark.asyncio
    async def test_unreachable_database_raises_startup_error(self, tmp_path):
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'notes.db'}")
        db = Database(engine)

        with pytest.raises(StartupError):
            await db.init_schema()

        await db.close()


class TestClose:

    @pytest.mark.asyncio
    async def test_closed_pool_rejects_work(self, database):
        await database.close()

        assert database.closed
        with pytest.raises(DatabaseError, match="closed"):
            await database.execute("SELECT 1")

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, database):
        await database.close()
        await database.close()
