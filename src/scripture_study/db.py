"""Database engine construction and schema management."""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from scripture_study.models import Base


def _unicode_lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite's built-in lower() folds ASCII only
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def create_db_engine(url: str | URL, *, echo: bool = False, **options: Any) -> AsyncEngine:
    """Create an async engine for either supported backend.

    ``postgresql+asyncpg://`` selects the networked server,
    ``sqlite+aiosqlite:///path`` an embedded database file. SQLite
    connections get a Unicode-aware ``lower()`` so case-insensitive search
    matches PostgreSQL.
    """
    engine = create_async_engine(url, echo=echo, **options)
    if make_url(url).get_backend_name() == "sqlite":
        event.listen(engine.sync_engine, "connect", _register_sqlite_functions)
    return engine


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db(engine: AsyncEngine) -> None:
    """Drop all scripture_study tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
