"""
Notes API — Notes Route Handlers
==================================

What:  GET/POST /notes and PUT/DELETE /notes/{id}.
How:   Validate the path id and JSON body, delegate to NoteService, return JSON.

Validation order on PUT:
    1. Path id (400 "Invalid id")
    2. Body title (400 "Title is required")
    3. Statement (404 "Note not found" when no row matches)

Routes stay thin: errors are raised as typed exceptions and turned into
`{"error": ...}` bodies by the handlers registered in main.py.
"""

import logging
from typing import Any, List

from fastapi import APIRouter, Depends, Request, Response

from notes_api.database import Database, get_database
from notes_api.schemas.note import (
    ErrorResponse,
    NoteInput,
    NoteResponse,
    parse_note_id,
)
from notes_api.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])

_ERRORS = {
    400: {"description": "Invalid id or title", "model": ErrorResponse},
    404: {"description": "Note not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


async def _read_json(request: Request) -> Any:
    """
    Decode the request body.

    Empty or malformed bodies decode to an empty object so that title
    validation reports them as a 400.
    """
    try:
        return await request.json()
    except ValueError:
        logger.debug("Request body is not valid JSON; treating as empty object")
        return {}


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses={500: _ERRORS[500]},
    summary="List all notes",
    description="Returns every note ordered by id, newest first.",
)
async def list_notes(database: Database = Depends(get_database)) -> List[NoteResponse]:
    return await note_service.list_notes(database)


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    responses={400: _ERRORS[400], 500: _ERRORS[500]},
    summary="Create a note",
)
async def create_note(
    request: Request,
    database: Database = Depends(get_database),
) -> NoteResponse:
    """
    Create a note from `{"title": str, "content"?: any}`.

    The title is trimmed; content defaults to "" and is stored as text.
    """
    data = NoteInput.from_payload(await _read_json(request))
    return await note_service.create_note(database, data)


@router.put(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses=_ERRORS,
    summary="Replace a note's title and content",
)
async def update_note(
    note_id: str,
    request: Request,
    database: Database = Depends(get_database),
) -> NoteResponse:
    """
    Update a note. The server refreshes updated_at; clients cannot set it.

    Args:
        note_id: Raw path segment. Parsed here rather than typed as int so a
                 bad value yields our 400 body instead of FastAPI's 422.
    """
    parsed_id = parse_note_id(note_id)
    data = NoteInput.from_payload(await _read_json(request))
    return await note_service.update_note(database, parsed_id, data)


@router.delete(
    "/notes/{note_id}",
    status_code=204,
    response_class=Response,
    responses=_ERRORS,
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    database: Database = Depends(get_database),
) -> Response:
    await note_service.delete_note(database, parse_note_id(note_id))
    return Response(status_code=204)
