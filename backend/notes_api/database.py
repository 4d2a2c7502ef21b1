"""
Notes API — Database Connection Pool
======================================

What:  Async SQLAlchemy engine wrapped in a small `Database` handle, plus the
       FastAPI dependency that hands it to route handlers.
Why:   Centralizes all database connection logic in one place. Every statement
       in the service goes through `Database.execute`, always with bound
       parameters.
How:   One engine (and therefore one pool) per process, created during the
       application lifespan and stored on `app.state.database`.
Who:   Used by NoteService and the health route via FastAPI's dependency injection.

Statement lifecycle:
    1. Check out a connection from the pool
    2. Run a single statement inside its own transaction (BEGIN ... COMMIT)
    3. Fetch rows (SELECT / RETURNING) or read the affected row count
    4. Return the connection to the pool, even on error

    No connection is ever held across statements or across requests.

Connection Pooling Strategy:
    pool_size:        Persistent connections for normal load
    max_overflow:     Temporary connections for traffic spikes
    pool_pre_ping:    Validates connections before use (catches stale connections)
    pool_recycle=3600: Recycles connections every hour
"""

import logging
from typing import Any, List, Mapping, Optional, Union

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.schema import CreateTable
from sqlalchemy.sql.expression import Executable

from notes_api.config import Settings
from notes_api.exceptions import DatabaseError, StartupError

logger = logging.getLogger(__name__)

Statement = Union[str, Executable]
ExecuteResult = Union[List[RowMapping], int]


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    The schema initializer reads table definitions from this metadata.
    """
    pass


class Database:
    """
    Process-scoped handle around the async engine's connection pool.

    Responsibilities:
        - execute():     one parameterized statement per call
        - ping():        trivial round trip for health checks
        - init_schema(): idempotent CREATE TABLE IF NOT EXISTS
        - close():       stop accepting work and dispose pooled connections
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """
        Build the engine from application settings.

        Engine creation does not connect; the first connection is opened by
        the first statement (normally the schema initializer).
        """
        engine = create_async_engine(
            settings.sqlalchemy_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
            connect_args=settings.connect_args(),
            # Echo SQL queries in DEBUG mode for development visibility
            echo=settings.log_level == "DEBUG",
        )
        return cls(engine)

    @property
    def closed(self) -> bool:
        return self._closed

    async def execute(
        self,
        statement: Statement,
        params: Optional[Mapping[str, Any]] = None,
    ) -> ExecuteResult:
        """
        Run one parameterized statement on a pooled connection.

        Args:
            statement: SQL text with named placeholders (`:id`) or a SQLAlchemy
                       construct (select/insert/update/delete/DDL)
            params:    Values for the placeholders. User input must only ever
                       arrive here, never inside the statement text.

        Returns:
            A list of row mappings when the statement yields rows
            (SELECT, ... RETURNING), otherwise the affected row count.

        Raises:
            DatabaseError: The pool is closed, or the driver reported an error.
        """
        if self._closed:
            raise DatabaseError(
                message="Connection pool is closed",
                context={"reason": "shutdown"},
            )

        if isinstance(statement, str):
            statement = text(statement)

        try:
            # engine.begin(): checkout + transaction, commit on success,
            # rollback on error, connection returned to the pool on exit
            async with self.engine.begin() as conn:
                result = await conn.execute(statement, params)
                if result.returns_rows:
                    return list(result.mappings().all())
                return result.rowcount
        except (SQLAlchemyError, OSError) as e:
            logger.error("Statement failed: %s: %s", type(e).__name__, str(e))
            raise DatabaseError(
                context={"error_type": type(e).__name__, "detail": str(e)},
            ) from e

    async def ping(self) -> None:
        """Trivial round trip; raises DatabaseError when the database is unreachable."""
        await self.execute("SELECT 1")

    async def init_schema(self) -> None:
        """
        What:  Ensures the notes table exists.
        When:  Once, during application startup, before traffic is accepted.
        How:   A single CREATE TABLE IF NOT EXISTS generated from the model, so
               re-running it (process restart) is a no-op for existing data.

        Raises:
            StartupError: The DDL could not be executed.
        """
        # Imported here: the model module imports Base from this module
        from notes_api.models.note import Note

        try:
            await self.execute(CreateTable(Note.__table__, if_not_exists=True))
        except DatabaseError as e:
            logger.error("Database initialization failed: %s", e.context.get("detail", e.message))
            raise StartupError(context=e.context) from e

        logger.info("Database initialized: ensured notes table exists")

    async def close(self) -> None:
        """
        What:  Gracefully closes all connections in the pool.
        When:  Called during application shutdown (lifespan handler), after the
               server has stopped accepting requests and in-flight ones finished.
        """
        if self._closed:
            return
        self._closed = True
        await self.engine.dispose()
        logger.info("Database connection pool closed")


# ── Dependency ────────────────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    """
    FastAPI dependency returning the process-wide Database handle.

    Example usage in a route:
        @router.get("/notes")
        async def list_notes(database: Database = Depends(get_database)):
            ...
    """
    return request.app.state.database
