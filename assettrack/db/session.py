"""
Async engine, session factory and the get_db request dependency.
One session per request: committed when the handler returns, rolled back if
it raises, so an entity write and its activity log entry land together.
"""
from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from assettrack.core.config import settings

logger = logging.getLogger(__name__)


def engine_options(database_url: str) -> dict[str, Any]:
    """Pool settings for server databases; SQLite gets its default pool."""
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20, "pool_recycle": 3600}


def _unicode_lower(value: str | None) -> str | None:
    return None if value is None else value.lower()


def _register_sqlite_functions(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite's built-in lower() folds ASCII only; search needs full Unicode folding.
    dbapi_connection.create_function("lower", 1, _unicode_lower)


def build_engine(database_url: str, **overrides: Any) -> AsyncEngine:
    options = {**engine_options(database_url), **overrides}
    async_engine = create_async_engine(database_url, echo=settings.DEBUG, **options)
    if make_url(database_url).get_backend_name() == "sqlite":
        event.listen(async_engine.sync_engine, "connect", _register_sqlite_functions)
    return async_engine


engine = build_engine(settings.DATABASE_URL)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            logger.debug("Rolling back request session")
            await session.rollback()
            raise
