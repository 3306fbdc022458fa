from __future__ import annotations

"""
Asynchronous Database Utilities Module

This module owns the SQLAlchemy asyncio engine and the session factory used by
the credential repository. PostgreSQL (asyncpg) is the production target; the
same code runs on SQLite (aiosqlite) for the test suite.

**Security Note**: Ensure that DATABASE_URL enables SSL/TLS when connecting over
untrusted networks, and never log the URL itself since it embeds credentials.

Key Components:
    - engine: The application's asynchronous SQLAlchemy engine.
    - AsyncSessionFactory: A factory for creating asynchronous database sessions.
    - create_engine_for_url: Builds an engine with dialect-appropriate options.
    - create_async_db_and_tables: Utility to create tables using the async engine.
"""

from typing import Any, Dict, Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from structlog import get_logger

from src.core.config.settings import settings
from src.domain.entities import account  # noqa: F401  registers the tables on SQLModel.metadata

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_for_url(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Build an async engine for ``database_url``.

    SQLite URLs get a shared static pool (so an in-memory database survives
    across sessions) and enforced foreign keys. Other backends get the pool
    limits from settings.
    """
    url = make_url(database_url)
    options: Dict[str, Any] = {"echo": echo, "future": True}

    if url.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        options["poolclass"] = StaticPool
    else:
        options["pool_size"] = settings.POSTGRES_POOL_SIZE
        options["max_overflow"] = settings.POSTGRES_MAX_OVERFLOW
        options["pool_timeout"] = settings.POSTGRES_POOL_TIMEOUT
        options["pool_pre_ping"] = True

    async_engine = create_async_engine(url, **options)
    if url.get_backend_name() == "sqlite":
        event.listen(async_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    logger.debug("database_engine_created", backend=url.get_backend_name(), driver=url.get_driver_name())
    return async_engine


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False)


engine = create_engine_for_url(settings.DATABASE_URL)
AsyncSessionFactory: async_sessionmaker[AsyncSession] = create_session_factory(engine)


async def create_async_db_and_tables(bind: Optional[AsyncEngine] = None) -> None:
    """
    Create tables using the async engine (mainly for test suites and local runs).

    Production schemas are managed by Alembic migrations.
    """
    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("database_tables_created")


async def dispose_engine() -> None:
    await engine.dispose()
    logger.info("database_engine_disposed")
