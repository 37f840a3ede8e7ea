"""
Guestbook API — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the two failure kinds the API has.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) turn them into the
       `{"success": false, "error": ...}` envelope with the right status code.
Who:   Raised by MessageService; caught by the global handlers.

Exception Hierarchy:
    GuestbookError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    └── StorageError      → 500 Internal Server Error (details logged only)
"""

from typing import Any, Dict, Optional


class GuestbookError(Exception):
    """
    Base exception for all Guestbook application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(GuestbookError):
    """
    Raised when a submitted message fails validation.

    When:    Missing or empty field, name over 100 characters, message over
             1000 characters, or a body that is not a JSON object.
    HTTP:    400 Bad Request

    Example response:
        {"success": false, "error": "Name must be at most 100 characters"}
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


class StorageError(GuestbookError):
    """
    Raised when the store is unreachable or a query fails.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. The original
    exception type is kept in `context` and logged server-side only.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
