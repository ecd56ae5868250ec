"""
Notes API: Database Engine & Session Management
=================================================

What:  Async SQLAlchemy engine/session factory construction and the ORM base.
Why:   Keeps connection logic in one place for the SQL-backed note store.
How:   build_engine() creates an async engine from a URL, applying pool
       settings only where the dialect supports them; build_session_factory()
       wraps it in an async_sessionmaker.
Who:   SqlNoteStore (storage/sql.py) owns the engine it builds here.

Unlike a module-level engine, each store instance gets its own engine so that
tests can run isolated in-memory SQLite databases side by side.

Connection Pooling Strategy:
    pool_size / max_overflow: sized from settings for server databases
    pool_pre_ping:            validates connections before use
    pool_recycle=3600:        recycles connections every hour
    SQLite (aiosqlite) uses its own pool class and takes none of these.

SQLite's built-in lower() folds ASCII only. Each SQLite connection gets a
replacement that folds the way str.lower does, so search matches the
in-memory store for non-ASCII text too.
"""

from typing import Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def build_engine(
    database_url: str,
    pool_size: int = 5,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
    echo: bool = False,
) -> AsyncEngine:
    """
    Create an async engine for `database_url`.

    In-memory SQLite (`sqlite+aiosqlite://` or `:memory:`) is pinned to a
    single shared connection; otherwise every new connection would see an
    empty database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if _is_memory_sqlite(database_url):
            kwargs["poolclass"] = StaticPool
        engine = create_async_engine(database_url, echo=echo, **kwargs)
        event.listen(engine.sync_engine, "connect", _register_sqlite_functions)
        return engine

    return create_async_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=pool_pre_ping,
        pool_recycle=3600,
        echo=echo,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: returned rows stay readable after commit
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def _unicode_lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(dbapi_connection, connection_record) -> None:
    dbapi_connection.create_function("lower", 1, _unicode_lower)


def _is_memory_sqlite(database_url: str) -> bool:
    path = database_url.partition("://")[2].lstrip("/")
    return not path or path == ":memory:"
