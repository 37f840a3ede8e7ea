"""
Guestbook API — Request Logging Middleware
===========================================

What:  One access log line per HTTP request.
How:   Times the downstream call and logs method, route, status, duration,
       request ID and client IP. Paths that match no route are logged as
       "<unmatched>".
       Level follows the status class: 5xx → ERROR, 4xx → WARNING,
       otherwise INFO.
When:  Runs inside RequestIDMiddleware, so request.state.request_id is set.

Request bodies are never logged; they carry user-written text.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import current_request_id

logger = logging.getLogger("guestbook.access")

UNMATCHED_ROUTE = "<unmatched>"
# Probed every few seconds by orchestrators
UNLOGGED_ROUTES = {"/health"}


def route_label(request: Request) -> str:
    """The application route `request` targets, or UNMATCHED_ROUTE."""
    path = request.url.path
    for route in request.app.routes:
        if getattr(route, "path", None) == path:
            return path
    return UNMATCHED_ROUTE


def status_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request, keyed by route and request ID."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        route = route_label(request)
        if route in UNLOGGED_ROUTES:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        rid = current_request_id(request)
        client_ip = request.client.host if request.client else "unknown"
        status = response.status_code

        logger.log(
            status_level(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            route,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "route": route,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
