"""Tests for the password reset token lifecycle with a mocked repository."""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from src.core.exceptions import (
    ResetTokenAlreadyUsedError,
    ResetTokenExpiredError,
    ResetTokenNotFoundError,
)
from src.domain.entities.account import ResetToken
from src.domain.interfaces.repositories import ICredentialRepository
from src.domain.interfaces.services import IPasswordHasher
from src.domain.services.auth.reset_token_manager import ResetTokenManager
from src.utils.clock import utc_now
from tests.factories import create_fake_account


@pytest.fixture
def repository():
    return Mock(spec=ICredentialRepository)


@pytest.fixture
def hasher():
    service = Mock(spec=IPasswordHasher)
    service.hash = AsyncMock(return_value="new-digest")
    return service


@pytest.fixture
def manager(repository, hasher):
    return ResetTokenManager(repository, hasher, expire_minutes=60)


def make_token(expires_in=timedelta(minutes=30), consumed=False):
    return ResetToken(
        id=uuid4(),
        account_id=uuid4(),
        secret="a" * 64,
        expires_at=utc_now() + expires_in,
        consumed_at=utc_now() if consumed else None,
    )


class TestRequestReset:
    @pytest.mark.asyncio
    async def test_known_email_rotates_token(self, manager, repository):
        account = create_fake_account(email="alice@example.com")
        repository.find_by_email = AsyncMock(return_value=account)
        repository.rotate_reset_token = AsyncMock()

        before = utc_now()
        outcome = await manager.request_reset("  Alice@Example.com ")

        repository.find_by_email.assert_awaited_once_with("alice@example.com")
        account_id, secret, expires_at = repository.rotate_reset_token.await_args.args
        assert account_id == account.id
        assert len(secret) == 64
        assert before + timedelta(minutes=60) <= expires_at <= utc_now() + timedelta(minutes=60)
        assert outcome.delivery.secret.value == secret
        assert outcome.delivery.email == "alice@example.com"

    @pytest.mark.asyncio
    async def test_unknown_email_writes_nothing(self, manager, repository):
        repository.find_by_email = AsyncMock(return_value=None)
        repository.rotate_reset_token = AsyncMock()

        outcome = await manager.request_reset("nobody@example.com")

        assert outcome.delivery is None
        repository.rotate_reset_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_secrets_are_unique_per_request(self, manager, repository):
        repository.find_by_email = AsyncMock(return_value=create_fake_account())
        repository.rotate_reset_token = AsyncMock()

        first = await manager.request_reset("alice@example.com")
        second = await manager.request_reset("alice@example.com")

        assert first.delivery.secret != second.delivery.secret


class TestConsume:
    @pytest.mark.asyncio
    async def test_valid_token_sets_new_password(self, manager, repository, hasher):
        token = make_token()
        repository.find_reset_token_by_secret = AsyncMock(return_value=token)
        repository.complete_password_reset = AsyncMock(return_value=True)

        account_id = await manager.consume(token.secret, "N3wPassword")

        assert account_id == token.account_id
        hasher.hash.assert_awaited_once_with("N3wPassword")
        repository.complete_password_reset.assert_awaited_once_with(token.id, token.account_id, "new-digest")

    @pytest.mark.asyncio
    async def test_unknown_secret(self, manager, repository, hasher):
        repository.find_reset_token_by_secret = AsyncMock(return_value=None)

        with pytest.raises(ResetTokenNotFoundError):
            await manager.consume("b" * 64, "N3wPassword")
        hasher.hash.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expired_token(self, manager, repository, hasher):
        repository.find_reset_token_by_secret = AsyncMock(return_value=make_token(expires_in=timedelta(seconds=-1)))
        repository.complete_password_reset = AsyncMock()

        with pytest.raises(ResetTokenExpiredError):
            await manager.consume("a" * 64, "N3wPassword")
        repository.complete_password_reset.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_consumed_token_reports_already_used_even_when_expired(self, manager, repository):
        token = make_token(expires_in=timedelta(minutes=-5), consumed=True)
        repository.find_reset_token_by_secret = AsyncMock(return_value=token)

        with pytest.raises(ResetTokenAlreadyUsedError):
            await manager.consume(token.secret, "N3wPassword")

    @pytest.mark.asyncio
    async def test_losing_the_consume_race(self, manager, repository):
        """The conditional update found the token already consumed."""
        token = make_token()
        repository.find_reset_token_by_secret = AsyncMock(return_value=token)
        repository.complete_password_reset = AsyncMock(return_value=False)

        with pytest.raises(ResetTokenAlreadyUsedError):
            await manager.consume(token.secret, "N3wPassword")


class TestPurge:
    @pytest.mark.asyncio
    async def test_purge_delegates_with_current_time(self, manager, repository):
        repository.purge_expired_reset_tokens = AsyncMock(return_value=3)

        assert await manager.purge_expired() == 3
        (now,) = repository.purge_expired_reset_tokens.await_args.args
        assert abs((utc_now() - now).total_seconds()) < 5
