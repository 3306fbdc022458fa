"""Credential Repository implementation using SQLAlchemy.

This module provides the repository for the Account aggregate and its
LoginEvent and ResetToken records.

Every public call:
- opens its own session and transaction,
- is bounded by ``DATABASE_OPERATION_TIMEOUT_SECONDS`` via ``asyncio.wait_for``,
- maps driver errors and timeouts to ``RepositoryUnavailableError``.

Mutating calls are additionally shielded, so a caller that gives up (request
aborted, timeout) does not roll back a write that is already in flight. The
outcome of such an abandoned write is still logged once it settles.
"""

import asyncio
import weakref
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Mapping, MutableMapping, Optional, TypeVar
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from src.core.config.settings import settings
from src.core.exceptions import AccountNotFoundError, EmailTakenError, RepositoryUnavailableError
from src.core.logging import mask_email
from src.domain.entities.account import Account, LoginEvent, ResetToken, normalize_email
from src.domain.interfaces.repositories import ICredentialRepository
from src.utils.clock import utc_now

logger = get_logger(__name__)

T = TypeVar("T")

_ROTATION_ATTEMPTS = 2

_UPDATABLE_ACCOUNT_FIELDS = frozenset(
    {
        "email",
        "password_hash",
        "first_name",
        "last_name",
        "date_of_birth",
        "avatar_url",
        "provider",
        "provider_id",
    }
)


class _ResetTokenConflict(Exception):
    """Another rotation committed a token for the same account first."""


def _log_late_outcome(operation: str) -> Callable[["asyncio.Future[Any]"], None]:
    """Done-callback for a shielded write whose caller stopped waiting."""

    def log(task: "asyncio.Future[Any]") -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            logger.info("repository_late_commit", operation=operation)
        else:
            logger.error(
                "repository_late_failure",
                operation=operation,
                error_type=type(exc).__name__,
                error=str(exc),
            )

    return log


class CredentialRepository(ICredentialRepository):
    """SQLAlchemy implementation of ICredentialRepository.

    Args:
        session_factory: Factory producing ``AsyncSession`` objects.
        timeout: Upper bound in seconds for every call.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        timeout: float = settings.DATABASE_OPERATION_TIMEOUT_SECONDS,
    ):
        self._session_factory = session_factory
        self._timeout = timeout
        self._rotation_locks: MutableMapping[UUID, asyncio.Lock] = weakref.WeakValueDictionary()

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._session_factory

    async def _run(
        self,
        operation: str,
        work: Callable[[AsyncSession], Awaitable[T]],
        write: bool = False,
        lock: Optional[asyncio.Lock] = None,
    ) -> T:
        async def in_transaction() -> T:
            async with self._session_factory() as session:
                async with session.begin():
                    return await work(session)

        async def serialized() -> T:
            if lock is None:
                return await in_transaction()
            async with lock:
                return await in_transaction()

        task: Optional["asyncio.Future[T]"] = None
        if write:
            task = asyncio.ensure_future(serialized())
            awaitable: Awaitable[T] = asyncio.shield(task)
        else:
            awaitable = serialized()

        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            logger.error("repository_timeout", operation=operation, timeout=self._timeout)
            if task is not None:
                task.add_done_callback(_log_late_outcome(operation))
            raise RepositoryUnavailableError() from exc
        except asyncio.CancelledError:
            if task is not None:
                task.add_done_callback(_log_late_outcome(operation))
            raise
        except SQLAlchemyError as exc:
            logger.error(
                "repository_error",
                operation=operation,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise RepositoryUnavailableError() from exc

    def _rotation_lock(self, account_id: UUID) -> asyncio.Lock:
        lock = self._rotation_locks.get(account_id)
        if lock is None:
            lock = asyncio.Lock()
            self._rotation_locks[account_id] = lock
        return lock

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def find_by_email(self, email: str) -> Optional[Account]:
        normalized = normalize_email(email)

        async def work(session: AsyncSession) -> Optional[Account]:
            result = await session.execute(select(Account).where(Account.email == normalized))
            return result.scalars().first()

        account = await self._run("find_by_email", work)
        logger.debug("account_lookup_by_email", email=mask_email(normalized), found=account is not None)
        return account

    async def find_by_id(self, account_id: UUID) -> Optional[Account]:
        async def work(session: AsyncSession) -> Optional[Account]:
            return await session.get(Account, account_id)

        return await self._run("find_by_id", work)

    async def find_by_provider_identity(self, provider: str, subject_id: str) -> Optional[Account]:
        async def work(session: AsyncSession) -> Optional[Account]:
            statement = select(Account).where(
                Account.provider == provider.lower(),
                Account.provider_id == subject_id,
            )
            result = await session.execute(statement)
            return result.scalars().first()

        return await self._run("find_by_provider_identity", work)

    async def insert_account(self, account: Account) -> Account:
        """Persists ``account``.

        Any uniqueness violation is reported as ``EmailTakenError``; for OAuth
        creations the caller re-runs resolution and finds the winner's row.
        """
        account.email = normalize_email(account.email)
        if account.provider:
            account.provider = account.provider.lower()

        async def work(session: AsyncSession) -> Account:
            session.add(account)
            try:
                await session.flush()
            except IntegrityError as exc:
                logger.info("account_insert_conflict", email=mask_email(account.email))
                raise EmailTakenError() from exc
            return account

        return await self._run("insert_account", work, write=True)

    async def update_account(self, account_id: UUID, changes: Mapping[str, Any]) -> Account:
        unknown = set(changes) - _UPDATABLE_ACCOUNT_FIELDS
        if unknown:
            raise ValueError(f"Cannot update account fields: {', '.join(sorted(unknown))}")

        values = dict(changes)
        if values.get("email"):
            values["email"] = normalize_email(values["email"])
        if values.get("provider"):
            values["provider"] = values["provider"].lower()

        async def work(session: AsyncSession) -> Account:
            account = await session.get(Account, account_id, with_for_update=True)
            if account is None:
                raise AccountNotFoundError()
            for field, value in values.items():
                setattr(account, field, value)
            account.updated_at = utc_now()
            await session.flush()
            return account

        return await self._run("update_account", work, write=True)

    # ------------------------------------------------------------------
    # Login events
    # ------------------------------------------------------------------

    async def record_login(
        self,
        account_id: UUID,
        ip_address: Optional[str],
        client_descriptor: Optional[str],
    ) -> LoginEvent:
        event = LoginEvent(
            account_id=account_id,
            ip_address=ip_address,
            client_descriptor=client_descriptor,
        )

        async def work(session: AsyncSession) -> LoginEvent:
            session.add(event)
            await session.flush()
            return event

        return await self._run("record_login", work, write=True)

    async def list_login_events(self, account_id: UUID, limit: int) -> List[LoginEvent]:
        async def work(session: AsyncSession) -> List[LoginEvent]:
            statement = (
                select(LoginEvent)
                .where(LoginEvent.account_id == account_id)
                .order_by(LoginEvent.created_at.desc())
                .limit(limit)
            )
            result = await session.execute(statement)
            return list(result.scalars().all())

        return await self._run("list_login_events", work)

    # ------------------------------------------------------------------
    # Reset tokens
    # ------------------------------------------------------------------

    async def insert_reset_token(self, account_id: UUID, secret: str, expires_at: datetime) -> ResetToken:
        """Stores a token for an account that has none.

        An account holds at most one token, so inserting next to an existing
        one fails as ``RepositoryUnavailableError``; use ``rotate_reset_token``
        to replace it.
        """

        async def work(session: AsyncSession) -> ResetToken:
            token = ResetToken(account_id=account_id, secret=secret, expires_at=expires_at)
            session.add(token)
            await session.flush()
            return token

        return await self._run("insert_reset_token", work, write=True)

    async def invalidate_reset_tokens_for(self, account_id: UUID) -> int:
        async def work(session: AsyncSession) -> int:
            result = await session.execute(delete(ResetToken).where(ResetToken.account_id == account_id))
            return result.rowcount or 0

        return await self._run("invalidate_reset_tokens_for", work, write=True)

    async def rotate_reset_token(self, account_id: UUID, secret: str, expires_at: datetime) -> ResetToken:
        """Replaces the account's reset token in one transaction.

        Rotations for one account are serialized in-process by a lock and
        across processes by the account row lock. The unique constraint on
        ``reset_tokens.account_id`` backs both up: a rotation that loses to a
        concurrent one is retried once, then reported as unavailable.
        """

        async def work(session: AsyncSession) -> ResetToken:
            locked = await session.execute(
                select(Account.id).where(Account.id == account_id).with_for_update()
            )
            if locked.scalar_one_or_none() is None:
                raise AccountNotFoundError()

            removed = await session.execute(delete(ResetToken).where(ResetToken.account_id == account_id))
            token = ResetToken(account_id=account_id, secret=secret, expires_at=expires_at)
            session.add(token)
            try:
                await session.flush()
            except IntegrityError as exc:
                raise _ResetTokenConflict() from exc
            logger.debug(
                "reset_token_rotated",
                account_id=str(account_id),
                invalidated=removed.rowcount or 0,
            )
            return token

        for attempt in range(1, _ROTATION_ATTEMPTS + 1):
            try:
                return await self._run(
                    "rotate_reset_token", work, write=True, lock=self._rotation_lock(account_id)
                )
            except _ResetTokenConflict:
                logger.warning("reset_token_rotation_conflict", account_id=str(account_id), attempt=attempt)

        raise RepositoryUnavailableError()

    async def find_reset_token_by_secret(self, secret: str) -> Optional[ResetToken]:
        async def work(session: AsyncSession) -> Optional[ResetToken]:
            result = await session.execute(select(ResetToken).where(ResetToken.secret == secret))
            return result.scalars().first()

        return await self._run("find_reset_token_by_secret", work)

    async def mark_reset_token_consumed(self, token_id: UUID) -> bool:
        async def work(session: AsyncSession) -> bool:
            return await self._consume(session, token_id)

        return await self._run("mark_reset_token_consumed", work, write=True)

    async def complete_password_reset(self, token_id: UUID, account_id: UUID, password_hash: str) -> bool:
        async def work(session: AsyncSession) -> bool:
            if not await self._consume(session, token_id):
                return False
            await session.execute(
                update(Account)
                .where(Account.id == account_id)
                .values(password_hash=password_hash, updated_at=utc_now())
            )
            return True

        return await self._run("complete_password_reset", work, write=True)

    async def purge_expired_reset_tokens(self, now: datetime) -> int:
        async def work(session: AsyncSession) -> int:
            result = await session.execute(delete(ResetToken).where(ResetToken.expires_at < now))
            return result.rowcount or 0

        return await self._run("purge_expired_reset_tokens", work, write=True)

    @staticmethod
    async def _consume(session: AsyncSession, token_id: UUID) -> bool:
        # Conditional transition: only one concurrent caller can see rowcount 1
        result = await session.execute(
            update(ResetToken)
            .where(ResetToken.id == token_id, ResetToken.consumed_at.is_(None))
            .values(consumed_at=utc_now())
        )
        return result.rowcount == 1
