"""
Guestbook API — Message Service (Business Rules)
=================================================

What:  Validates and trims submissions, persists them through a MessageStore,
       and lists messages newest first.
How:   The store factory is injected at construction; each call builds a
       store around the caller's session. Database exceptions are logged with
       their traceback and re-raised as StorageError carrying a generic
       message.
Who:   Constructed once in create_app(), stored on app.state, handed to route
       handlers by the `get_message_service` dependency.

Flow (POST /messages):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────┐
    │  Route   │───▶│  Validate   │───▶│    Trim      │───▶│  Store   │
    └──────────┘    └─────────────┘    └──────────────┘    └──────────┘
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import StorageError, ValidationError
from app.middleware.request_id import request_id_var
from app.models.message import MESSAGE_MAX_LENGTH, NAME_MAX_LENGTH
from app.schemas.message import MessageOut
from app.services.message_store import OrmMessageStore, StoreFactory

logger = logging.getLogger(__name__)


def validate_submission(name: Optional[str], message: Optional[str]) -> Tuple[str, str]:
    """
    Check a submission and return the trimmed (name, message) pair.

    Length limits apply to the text as submitted; emptiness is judged after
    trimming, so whitespace-only fields are rejected.

    Raises:
        ValidationError: Naming the first violated constraint.
    """
    trimmed_name = name.strip() if name else ""
    trimmed_message = message.strip() if message else ""

    if not trimmed_name or not trimmed_message:
        raise ValidationError(
            message="Name and message are required",
            field="name" if not trimmed_name else "message",
        )
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationError(
            message=f"Name must be at most {NAME_MAX_LENGTH} characters",
            field="name",
            context={"length": len(name)},
        )
    if len(message) > MESSAGE_MAX_LENGTH:
        raise ValidationError(
            message=f"Message must be at most {MESSAGE_MAX_LENGTH} characters",
            field="message",
            context={"length": len(message)},
        )
    return trimmed_name, trimmed_message


class MessageService:
    """
    Business logic layer for guestbook messages.

    Responsibilities:
        - create_message(): validate → trim → insert
        - list_messages(): every message, newest first

    Args:
        store_factory: Builds a MessageStore for a session. Defaults to the
                       ORM store; tests pass SqlMessageStore as well.
    """

    def __init__(self, store_factory: StoreFactory = OrmMessageStore):
        self.store_factory = store_factory

    async def create_message(
        self,
        db: AsyncSession,
        name: Optional[str],
        message: Optional[str],
    ) -> MessageOut:
        """
        Validate, trim and persist a new message.

        Raises:
            ValidationError: Missing/empty field or length limit exceeded (→ 400)
            StorageError: The insert or commit failed (→ 500)
        """
        trimmed_name, trimmed_message = validate_submission(name, message)

        try:
            created = await self.store_factory(db).insert(trimmed_name, trimmed_message)
            await db.commit()
        except Exception as e:
            logger.error(
                "[%s] Error creating message: %s", request_id_var.get(), str(e), exc_info=True
            )
            raise StorageError(
                message="Failed to create message",
                context={"error_type": type(e).__name__},
            )

        logger.info("Message %s created (%d chars)", created.id, len(created.message))
        return created

    async def list_messages(self, db: AsyncSession) -> List[MessageOut]:
        """
        Return every message ordered by createdAt descending.

        Raises:
            StorageError: The select failed (→ 500)
        """
        try:
            return await self.store_factory(db).list_newest_first()
        except Exception as e:
            logger.error(
                "[%s] Error fetching messages: %s", request_id_var.get(), str(e), exc_info=True
            )
            raise StorageError(
                message="Failed to fetch messages",
                context={"error_type": type(e).__name__},
            )
