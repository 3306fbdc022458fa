"""Database engine and session factory."""

from .async_db import (
    AsyncSessionFactory,
    create_async_db_and_tables,
    create_engine_for_url,
    create_session_factory,
    dispose_engine,
    engine,
)

__all__ = [
    "AsyncSessionFactory",
    "create_async_db_and_tables",
    "create_engine_for_url",
    "create_session_factory",
    "dispose_engine",
    "engine",
]
