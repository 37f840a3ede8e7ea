# Middleware package init
"""
Guestbook API — Middleware Package
===================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    Request ID runs first so the access log line carries the ID; the order is
    reversed on the way out, which is when the ID header is attached and the
    duration is measured.
"""
