"""
DocCRUD Backend - Request ID Middleware
========================================

What:  Assigns a correlation ID to each request and echoes it in the response.
How:   Reuses the client's X-Request-ID header when present, otherwise
       generates a short UUID; stores it in a ContextVar and request.state.
When:  Runs before logging so every access log line carries the ID.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Propagates X-Request-ID through the request and back to the client."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 hex chars are enough for correlating log lines
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
