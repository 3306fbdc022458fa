"""Password reset token lifecycle.

Per account the token moves ``NONE -> ISSUED -> {CONSUMED | EXPIRED}``. Issuing
a new token always invalidates the previous one, and consumption is a
conditional, one-way transition so two concurrent consumers can never both
succeed.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from structlog import get_logger

from src.core.config.settings import settings
from src.core.exceptions import (
    ResetTokenAlreadyUsedError,
    ResetTokenExpiredError,
    ResetTokenNotFoundError,
)
from src.core.logging import mask_email
from src.domain.entities.account import normalize_email
from src.domain.interfaces.repositories import ICredentialRepository
from src.domain.interfaces.services import IPasswordHasher
from src.domain.value_objects.reset_secret import ResetSecret
from src.utils.clock import as_utc, utc_now

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResetDelivery:
    """What the email collaborator needs to deliver a freshly issued token."""

    account_id: UUID
    email: str
    display_name: str
    secret: ResetSecret
    expires_at: datetime


@dataclass(frozen=True)
class ResetRequestOutcome:
    """Result of a reset request.

    Callers acknowledge every request the same way whether or not the email
    matched an account; only ``delivery`` differs, and it never leaves the
    service layer.
    """

    delivery: Optional[ResetDelivery] = None


class ResetTokenManager:
    """Issues and consumes single-use password reset tokens.

    Args:
        repository: Credential store.
        password_hasher: Hasher used for the new password.
        expire_minutes: Token lifetime, one hour by default.
    """

    def __init__(
        self,
        repository: ICredentialRepository,
        password_hasher: IPasswordHasher,
        expire_minutes: int = settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES,
    ):
        self.repository = repository
        self.password_hasher = password_hasher
        self.expire_minutes = expire_minutes

    async def request_reset(self, email: str) -> ResetRequestOutcome:
        """Issues a new reset token for the account owning ``email``.

        Unknown emails perform no writes and return the same acknowledged
        outcome as a real request.
        """
        normalized = normalize_email(email)
        account = await self.repository.find_by_email(normalized)
        if account is None:
            logger.info("password_reset_requested_unknown_email", email=mask_email(normalized))
            return ResetRequestOutcome()

        secret = ResetSecret.generate()
        expires_at = utc_now() + timedelta(minutes=self.expire_minutes)
        await self.repository.rotate_reset_token(account.id, secret.value, expires_at)

        logger.info(
            "password_reset_token_issued",
            account_id=str(account.id),
            token_prefix=secret.mask_for_logging(),
            expires_at=expires_at.isoformat(),
        )
        return ResetRequestOutcome(
            delivery=ResetDelivery(
                account_id=account.id,
                email=account.email,
                display_name=account.display_name,
                secret=secret,
                expires_at=expires_at,
            )
        )

    async def consume(self, secret: str, new_password: str) -> UUID:
        """Consumes a reset token and sets the account's new password.

        Returns:
            The id of the account whose password changed.

        Raises:
            ResetTokenNotFoundError: No token matches ``secret``.
            ResetTokenAlreadyUsedError: The token was consumed before, or by a
                concurrent request while this one was hashing.
            ResetTokenExpiredError: The token's expiry has passed.
        """
        token = await self.repository.find_reset_token_by_secret(secret)
        if token is None:
            logger.warning("password_reset_token_not_found")
            raise ResetTokenNotFoundError()

        if token.consumed_at is not None:
            logger.warning("password_reset_token_reused", token_id=str(token.id))
            raise ResetTokenAlreadyUsedError()

        if utc_now() >= as_utc(token.expires_at):
            logger.info("password_reset_token_expired", token_id=str(token.id))
            raise ResetTokenExpiredError()

        password_hash = await self.password_hasher.hash(new_password)
        consumed = await self.repository.complete_password_reset(token.id, token.account_id, password_hash)
        if not consumed:
            logger.warning("password_reset_token_lost_race", token_id=str(token.id))
            raise ResetTokenAlreadyUsedError()

        logger.info("password_reset_completed", account_id=str(token.account_id))
        return token.account_id

    async def purge_expired(self) -> int:
        """Deletes expired tokens. Correctness never depends on this running."""
        purged = await self.repository.purge_expired_reset_tokens(utc_now())
        logger.info("expired_reset_tokens_purged", count=purged)
        return purged
