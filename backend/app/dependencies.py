"""
Guestbook API — Shared Dependencies
====================================

What:  FastAPI dependencies that hand request handlers the objects built by
       create_app() and kept on `app.state`.
"""

from fastapi import Request

from app.services.message_service import MessageService


def get_message_service(request: Request) -> MessageService:
    """Return the MessageService the application was built with."""
    return request.app.state.message_service
