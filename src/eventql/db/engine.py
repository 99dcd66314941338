"""Async SQLAlchemy engine, session factory, and unit of work.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
async_sessionmaker for sessions, and transaction() as the one way resolvers
touch the database: open a session, BEGIN, run, COMMIT (or ROLLBACK on error).

Every resolver gets its own transaction. Two fields resolved for the same
GraphQL query do not share one, so they are not atomic together.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from eventql.config import settings
from eventql.db.models import Base


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores FK constraints (and cascades) unless asked per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for ``url``.

    Learn: Postgres gets a real connection pool. SQLite (used by tests
    and local runs) gets foreign keys switched on, and an in-memory
    database is pinned to a single shared connection so every session
    sees the same data.
    """
    if not url.startswith("sqlite"):
        # Connection pool: min 5, max 20 connections.
        return create_async_engine(url, echo=echo, pool_size=5, max_overflow=15)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if url.endswith("://") or ":memory:" in url:
        kwargs["poolclass"] = StaticPool
    engine = create_async_engine(url, echo=echo, **kwargs)
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.database_url, echo=settings.debug)

# Session factory — each transaction gets its own session.
async_session_factory = build_session_factory(engine)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """FastAPI dependency — the factory resolvers open transactions from."""
    return async_session_factory


@asynccontextmanager
async def transaction(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Run the block as one all-or-nothing unit of work.

    Commits when the block exits normally, rolls back and re-raises
    otherwise. Nothing is retried.
    """
    async with factory() as session:
        async with session.begin():
            yield session


async def create_schema(bind: AsyncEngine) -> None:
    """Create all tables that don't exist yet."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_schema(bind: AsyncEngine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
