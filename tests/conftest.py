import os

# Settings are built once at import time, so the test environment has to be in
# place before anything under src is imported.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.core.application import create_application
from src.core.config.rate_limiting import DEFAULT_RATE_LIMIT_TIERS
from src.core.rate_limiting import RateLimiter
from src.domain.services.auth.password_hasher import PasswordHasher
from src.infrastructure.database.async_db import (
    create_async_db_and_tables,
    create_engine_for_url,
    create_session_factory,
)
from src.infrastructure.dependency_injection.auth_dependencies import build_services
from src.infrastructure.repositories.credential_repository import CredentialRepository
from tests.utils.fakes import FakeEmailDispatcher


@pytest_asyncio.fixture
async def engine():
    """A fresh in-memory SQLite database per test."""
    test_engine = create_engine_for_url("sqlite+aiosqlite://")
    await create_async_db_and_tables(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def repository(session_factory):
    return CredentialRepository(session_factory, timeout=5.0)


@pytest.fixture
def password_hasher():
    hasher = PasswordHasher(work_factor=4, max_workers=2)
    yield hasher
    hasher.shutdown()


@pytest.fixture
def email_dispatcher():
    return FakeEmailDispatcher()


@pytest.fixture
def services(session_factory, email_dispatcher):
    container = build_services(session_factory, email_dispatcher=email_dispatcher, oauth_providers={})
    yield container
    container.shutdown()


@pytest.fixture
def rate_limiter():
    """Limiter with room for any journey; rate limit tests build their own."""
    return RateLimiter(tiers={name: (1000, 60) for name in DEFAULT_RATE_LIMIT_TIERS})


@pytest.fixture
def app(services, rate_limiter):
    return create_application(services=services, rate_limiter=rate_limiter)


@pytest_asyncio.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
