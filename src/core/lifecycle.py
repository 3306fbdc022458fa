"""Startup and shutdown hooks for the ASGI lifespan protocol."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from src.core.config.settings import settings
from src.core.logging import logger
from src.infrastructure.database.async_db import create_async_db_and_tables, dispose_engine

# Staging and production schemas are managed by Alembic migrations
SCHEMA_BOOTSTRAP_ENVS = frozenset({"development", "test"})


def create_lifespan_manager():
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.APP_ENV in SCHEMA_BOOTSTRAP_ENVS:
            await create_async_db_and_tables()
        logger.info("portcullis_started", env=settings.APP_ENV, version=settings.VERSION)

        try:
            yield
        finally:
            # Hashing worker threads first, then pooled connections
            app.state.services.shutdown()
            await dispose_engine()
            logger.info("portcullis_stopped", env=settings.APP_ENV)

    return lifespan
