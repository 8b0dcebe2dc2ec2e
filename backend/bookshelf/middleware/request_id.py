"""
Bookshelf Backend — Request ID Middleware
===========================================

What:  Assigns every request a short correlation ID and returns it in the
       X-Request-ID response header.
How:   Reuses the client's X-Request-ID when sent, otherwise generates one.
       The ID is stored in a ContextVar so the exception handlers in main.py
       can put it into every error envelope without access to the request.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    # 8 hex chars is plenty to correlate log lines and stays readable
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or new_request_id()

        # Not reset afterwards: the catch-all 500 handler runs in the outer
        # ServerErrorMiddleware and still needs the ID for its envelope.
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers["X-Request-ID"] = rid
        return response
