"""
Notes API — Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for each failure class of a request.
Why:   Handlers and services raise typed errors; the app maps each type to a
       status code and a fixed `{"error": ...}` body in one place (main.py).
How:   Each exception carries a client-safe message and an optional context
       dict. Context is logged, never returned.

Exception Hierarchy:
    NotesServiceError (base)
    ├── ValidationError   → 400 Bad Request (checked before any query runs)
    ├── NotFoundError     → 404 Not Found
    ├── DatabaseError     → 500 Internal Server Error (detail logged only)
    └── StartupError      → fatal, aborts application startup
"""

from typing import Any, Dict, Optional

INTERNAL_ERROR_MESSAGE = "Internal server error"


class NotesServiceError(Exception):
    """
    Base exception for all Notes API errors.

    Attributes:
        message:  Client-facing error description
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = INTERNAL_ERROR_MESSAGE,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesServiceError):
    """
    Raised when client input fails validation.

    When:    Missing/blank/non-string title, or a path id that is not an integer.
    HTTP:    400 Bad Request

    Example response:
        {"error": "Title is required"}
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(NotesServiceError):
    """
    Raised when the id is well formed but no row matches it.

    HTTP:    404 Not Found

    The message is generic ("Note not found"); the id goes into context so it
    shows up in logs.
    """

    def __init__(
        self,
        resource: str = "Note",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class DatabaseError(NotesServiceError):
    """
    Raised when a statement fails: connection loss, constraint violation,
    query error, or the pool has already been closed.

    HTTP:    500 Internal Server Error

    Security Note:
        The client always receives the generic message. Driver error text and
        SQL are kept in `context` for server-side logs.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StartupError(NotesServiceError):
    """
    Raised when the schema cannot be initialized during application startup.

    Propagates out of the lifespan handler, so the ASGI server reports a
    failed startup and exits without opening its listening socket.
    """

    def __init__(
        self,
        message: str = "Database initialization failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
