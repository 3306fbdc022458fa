"""Repository interfaces for abstracting data persistence in the domain layer.

This module defines the abstract base class (interface) for the credential
repository, which acts as a "port" in the context of Hexagonal Architecture.
The domain services use it to read and write accounts, login events and reset
tokens without being coupled to any specific database technology.

The concrete implementation resides in the `infrastructure` layer.

Every implementation must:
- Normalize emails to lowercase before every read and write.
- Bound each call by a timeout and surface store failures as
  `RepositoryUnavailableError`, never as `None` or an empty result.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, List, Mapping, Optional
from uuid import UUID

from src.domain.entities.account import Account, LoginEvent, ResetToken


class ICredentialRepository(ABC):
    """An interface defining the contract for credential persistence operations.

    The repository is the sole serialization point for correctness-sensitive
    races: reset-token rotation and reset-token consumption are each executed
    as a single atomic transaction.
    """

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Account]:
        """Retrieves an account by its email address (case-insensitively).

        Args:
            email: The email address to search for.

        Returns:
            An optional `Account` entity. Returns `None` if no account is found.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, account_id: UUID) -> Optional[Account]:
        """Retrieves an account by its unique identifier."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_provider_identity(self, provider: str, subject_id: str) -> Optional[Account]:
        """Retrieves the account linked to an external provider identity.

        Args:
            provider: The provider name, e.g. ``google``.
            subject_id: The subject identifier issued by that provider.
        """
        raise NotImplementedError

    @abstractmethod
    async def insert_account(self, account: Account) -> Account:
        """Persists a new account.

        Raises:
            EmailTakenError: If another account already owns the email.
            RepositoryUnavailableError: If the store fails.
        """
        raise NotImplementedError

    @abstractmethod
    async def update_account(self, account_id: UUID, changes: Mapping[str, Any]) -> Account:
        """Applies a partial update to an account and refreshes `updated_at`.

        Raises:
            AccountNotFoundError: If the account does not exist.
        """
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Login events
    # ------------------------------------------------------------------

    @abstractmethod
    async def record_login(
        self,
        account_id: UUID,
        ip_address: Optional[str],
        client_descriptor: Optional[str],
    ) -> LoginEvent:
        """Appends a login event for an account."""
        raise NotImplementedError

    @abstractmethod
    async def list_login_events(self, account_id: UUID, limit: int) -> List[LoginEvent]:
        """Returns the most recent login events for an account, newest first."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Reset tokens
    # ------------------------------------------------------------------

    @abstractmethod
    async def insert_reset_token(self, account_id: UUID, secret: str, expires_at: datetime) -> ResetToken:
        """Stores a new reset token without touching existing ones."""
        raise NotImplementedError

    @abstractmethod
    async def invalidate_reset_tokens_for(self, account_id: UUID) -> int:
        """Removes every reset token of an account.

        Returns:
            The number of tokens removed.
        """
        raise NotImplementedError

    @abstractmethod
    async def rotate_reset_token(self, account_id: UUID, secret: str, expires_at: datetime) -> ResetToken:
        """Invalidates all prior reset tokens of an account and stores a new one.

        Both steps run in one transaction holding a lock on the account row, so
        two concurrent rotations can never leave two valid tokens behind.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_reset_token_by_secret(self, secret: str) -> Optional[ResetToken]:
        """Retrieves a reset token by its secret, whatever its state."""
        raise NotImplementedError

    @abstractmethod
    async def mark_reset_token_consumed(self, token_id: UUID) -> bool:
        """Sets `consumed_at` only if it is currently null.

        Returns:
            True if this call performed the transition, False if the token was
            already consumed (or no longer exists).
        """
        raise NotImplementedError

    @abstractmethod
    async def complete_password_reset(self, token_id: UUID, account_id: UUID, password_hash: str) -> bool:
        """Consumes a reset token and stores the new password hash atomically.

        The conditional consume and the password write share one transaction.

        Returns:
            True on success, False if the token had already been consumed, in
            which case the password is left untouched.
        """
        raise NotImplementedError

    @abstractmethod
    async def purge_expired_reset_tokens(self, now: datetime) -> int:
        """Deletes reset tokens that expired before ``now``.

        Returns:
            The number of tokens deleted.
        """
        raise NotImplementedError
