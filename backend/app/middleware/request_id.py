"""
Guestbook API — Request ID Middleware
======================================

What:  Assigns an ID to each incoming request and returns it in the
       X-Request-ID response header.
How:   A client-supplied X-Request-ID is reused only when it is a short token
       of letters, digits, '.', '_' or '-'; anything else is replaced by a
       fresh 8-character ID.
       The ID lives on request.state for handlers and in a ContextVar for
       code that has no request at hand (services, loggers).
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def accept_request_id(candidate: Optional[str]) -> str:
    """Return `candidate` if it is safe to log and echo, else a new ID."""
    if candidate and CLIENT_ID_PATTERN.match(candidate):
        return candidate
    return new_request_id()


def current_request_id(request: Request) -> str:
    """The ID assigned to `request`, falling back to the ContextVar."""
    return getattr(request.state, "request_id", "") or request_id_var.get()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags every request and response with a request ID."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accept_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
