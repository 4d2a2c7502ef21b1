"""
Notes API — Request ID Middleware
===================================

What:  Assigns a correlation id to each incoming request and echoes it in the
       `X-Request-ID` response header.
Why:   Every log line written while handling a request (access log, error
       handlers) can carry the same id, and clients can quote it.
How:   Reuses a client-supplied X-Request-ID, otherwise generates a short UUID.
       The id lives in a ContextVar so concurrent requests on one event loop
       never see each other's value.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns a unique ID to each request for tracing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 hex chars are enough to correlate log lines
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
