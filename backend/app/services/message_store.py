"""
Guestbook API — Message Store Interface and Implementations
============================================================

What:  The persistence contract for Message rows, with two implementations.
How:   MessageService depends on the abstract MessageStore; a concrete store
       is built per request around that request's AsyncSession.

Implementations:
    - OrmMessageStore: structured SQLAlchemy insert/select (wired into the app)
    - SqlMessageStore: literal parameterized SQL producing identical rows,
      used by the test suite as an equivalence check

Both stores return MessageOut records, order listings by createdAt DESC with
id DESC as the tie-breaker, and let database exceptions propagate. Mapping
failures to StorageError is the service's job.
"""

from abc import ABC, abstractmethod
from typing import Callable, List

from sqlalchemy import DateTime, Integer, String, bindparam, desc, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.message import Message, utcnow
from app.schemas.message import MessageOut


class MessageStore(ABC):
    """
    Abstract interface for Message persistence.

    Contract:
        - insert() persists one row and returns it with id and createdAt set
        - list_newest_first() returns every row, newest first
        - Neither method commits; the session owner does
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @abstractmethod
    async def insert(self, name: str, message: str) -> MessageOut:
        """
        Persist a new Message.

        Args:
            name:    Already validated and trimmed author label
            message: Already validated and trimmed body

        Returns:
            MessageOut with store-assigned id and createdAt.
        """
        ...

    @abstractmethod
    async def list_newest_first(self) -> List[MessageOut]:
        """Return every Message ordered by createdAt descending."""
        ...


# Factory signature used by MessageService: session -> store
StoreFactory = Callable[[AsyncSession], MessageStore]


class OrmMessageStore(MessageStore):
    """Structured ORM operations through the Message model."""

    async def insert(self, name: str, message: str) -> MessageOut:
        row = Message(name=name, message=message)
        self.session.add(row)
        # Assigns the autoincrement id without committing
        await self.session.flush()
        return MessageOut.model_validate(row)

    async def list_newest_first(self) -> List[MessageOut]:
        result = await self.session.execute(
            select(Message).order_by(desc(Message.created_at), desc(Message.id))
        )
        return [MessageOut.model_validate(row) for row in result.scalars().all()]


# ── Literal SQL ───────────────────────────────────────────────────────────
# Column types are declared so result values (and the createdAt bind value)
# go through the same type processing as the ORM path.
_RESULT_COLUMNS = dict(
    id=Integer,
    name=String,
    message=String,
    createdAt=DateTime(timezone=True),
)

INSERT_MESSAGE_SQL = (
    text(
        'INSERT INTO "Message" ("name", "message", "createdAt") '
        "VALUES (:name, :message, :created_at) "
        'RETURNING "id", "name", "message", "createdAt"'
    )
    .bindparams(bindparam("created_at", type_=DateTime(timezone=True)))
    .columns(**_RESULT_COLUMNS)
)

SELECT_MESSAGES_SQL = text(
    'SELECT "id", "name", "message", "createdAt" FROM "Message" '
    'ORDER BY "createdAt" DESC, "id" DESC'
).columns(**_RESULT_COLUMNS)


def _row_to_message(row) -> MessageOut:
    mapping = row._mapping
    return MessageOut(
        id=mapping["id"],
        name=mapping["name"],
        message=mapping["message"],
        created_at=mapping["createdAt"],
    )


class SqlMessageStore(MessageStore):
    """Literal parameterized SQL against the Message table."""

    async def insert(self, name: str, message: str) -> MessageOut:
        result = await self.session.execute(
            INSERT_MESSAGE_SQL,
            {"name": name, "message": message, "created_at": utcnow()},
        )
        return _row_to_message(result.one())

    async def list_newest_first(self) -> List[MessageOut]:
        result = await self.session.execute(SELECT_MESSAGES_SQL)
        return [_row_to_message(row) for row in result.all()]
