"""
Guestbook API — Database Session Management
============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI session dependency.
How:   `Database` owns one async engine with connection pooling and one
       session factory. The application factory builds it from settings and
       stores it on `app.state.database`; `get_db_session` reads it from the
       incoming request, so there is no module-level engine.
Who:   Route handlers receive sessions via FastAPI's Depends(); tests build
       their own Database against a temporary SQLite file.

Connection Pooling (PostgreSQL):
    pool_size / max_overflow: from settings (defaults 10 + 5)
    pool_pre_ping:    Validates connections before use
    pool_recycle=3600: Recycles connections every hour
    SQLite URLs use SQLAlchemy's default pool and ignore these values.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic reads for --autogenerate and
    `Database.create_all()` uses to build the schema in tests.
    """
    pass


class Database:
    """
    Storage handle: async engine plus session factory.

    Example:
        database = Database.from_settings(settings)
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        # expire_on_commit=False: attributes stay readable after commit,
        # which the response serialization relies on
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        engine_kwargs = {"echo": settings.log_level == "DEBUG"}
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(create_async_engine(settings.database_url, **engine_kwargs))

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        """Create every table registered on Base.metadata (no-op if present)."""
        # Model modules must be imported so their tables are registered
        from app.models import message  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """
        What:  Gracefully closes all connections in the pool.
        When:  Called during application shutdown (lifespan handler).
        """
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's Database
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handlers
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/messages")
        async def list_messages(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
