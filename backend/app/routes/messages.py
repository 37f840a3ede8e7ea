"""
Guestbook API — Message Route Handlers
=======================================

What:  Handles GET /messages (list) and POST /messages (create).
How:   Extracts the body, delegates to MessageService, wraps the result in
       the success envelope. Failures propagate as ValidationError /
       StorageError to the global exception handlers.
Who:   Called by the guestbook web client on page load and on submit.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import get_message_service
from app.schemas.message import (
    ErrorResponse,
    MessageCreate,
    MessageCreatedResponse,
    MessageListResponse,
)
from app.services.message_service import MessageService

router = APIRouter(tags=["Messages"])


@router.get(
    "/messages",
    response_model=MessageListResponse,
    responses={
        200: {"description": "All messages, newest first", "model": MessageListResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="List every message",
)
async def list_messages(
    db: AsyncSession = Depends(get_db_session),
    service: MessageService = Depends(get_message_service),
) -> MessageListResponse:
    messages = await service.list_messages(db)
    return MessageListResponse(success=True, count=len(messages), messages=messages)


@router.post(
    "/messages",
    status_code=201,
    response_model=MessageCreatedResponse,
    responses={
        201: {"description": "Message stored", "model": MessageCreatedResponse},
        400: {"description": "Missing, empty or oversized field", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Leave a message",
    description=(
        "Stores a message after trimming both fields. Name is limited to 100 "
        "characters and message to 1000. Duplicate submissions create duplicate rows."
    ),
)
async def create_message(
    payload: MessageCreate,
    db: AsyncSession = Depends(get_db_session),
    service: MessageService = Depends(get_message_service),
) -> MessageCreatedResponse:
    created = await service.create_message(db, name=payload.name, message=payload.message)
    return MessageCreatedResponse(success=True, message=created)
