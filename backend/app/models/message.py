"""
Guestbook API — Message SQLAlchemy Model
=========================================

What:  ORM model representing the `Message` table.
Who:   Used by OrmMessageStore for inserts/selects, by Alembic for schema
       management, and by `Database.create_all()` in tests.

Table Design:
    - id:        Integer autoincrement primary key, assigned by the store
    - name:      Author label, at most 100 characters
    - message:   Body, at most 1000 characters
    - createdAt: UTC timestamp with timezone, assigned on insert

    The column is named "createdAt" in the table; the Python attribute is
    `created_at`. SqlMessageStore queries the column by its table name.

    Index on createdAt DESC serves the only listing query (newest first).
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

NAME_MAX_LENGTH = 100
MESSAGE_MAX_LENGTH = 1000


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(Base):
    """
    A single guestbook entry.

    Lifecycle:
        Created once by POST /messages, then read-only. Never updated or
        deleted.
    """

    __tablename__ = "Message"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
    )

    message: Mapped[str] = mapped_column(
        String(MESSAGE_MAX_LENGTH),
        nullable=False,
    )

    # Stored in UTC; the client converts to local time for display
    created_at: Mapped[datetime] = mapped_column(
        "createdAt",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_message_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, name='{self.name}', created_at='{self.created_at}')>"
