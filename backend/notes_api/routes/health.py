"""
Notes API — Health Check Route
================================

What:  Health check endpoint for containers and load balancers.
How:   Runs `SELECT 1` through the pool. A failed round trip raises
       DatabaseError, which the app turns into a 500.

The service is only healthy if it can reach its database; there is no
degraded state.
"""

import logging

from fastapi import APIRouter, Depends

from notes_api.database import Database, get_database
from notes_api.schemas.note import ErrorResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={500: {"description": "Database unreachable", "model": ErrorResponse}},
    summary="Service health check",
)
async def health_check(database: Database = Depends(get_database)) -> HealthResponse:
    await database.ping()
    return HealthResponse(status="ok")
