"""Service interfaces for domain services and their external collaborators.

These interfaces define contracts for the password hasher, the token issuer,
email dispatch and external identity providers, enabling dependency inversion
and better testability.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.value_objects.auth_session import AuthSession, IssuedToken
from src.domain.value_objects.oauth_assertion import OAuthAssertion


class IPasswordHasher(ABC):
    """Interface for one-way salted password hashing."""

    @abstractmethod
    async def hash(self, plaintext: str) -> str:
        """Returns a salted, adaptive digest of ``plaintext``."""
        raise NotImplementedError

    @abstractmethod
    async def verify(self, plaintext: str, digest: Optional[str]) -> bool:
        """Checks ``plaintext`` against ``digest`` in constant effort.

        An absent digest always yields False, after spending the same effort as
        a real verification.
        """
        raise NotImplementedError


class ITokenIssuer(ABC):
    """Interface for signing and validating bearer tokens."""

    @abstractmethod
    def issue(self, account_id: UUID, email: str, ttl_seconds: int) -> IssuedToken:
        """Signs a token carrying ``{sub, email, iat, exp}``."""
        raise NotImplementedError

    @abstractmethod
    def validate(self, token: str) -> AuthSession:
        """Verifies a token and returns its claims.

        Raises:
            InvalidTokenError: On a bad signature, a malformed payload or an
                expired token.
        """
        raise NotImplementedError


class IEmailDispatcher(ABC):
    """Interface for handing notifications to the email delivery system."""

    @abstractmethod
    async def send_password_reset(
        self, recipient_email: str, reset_secret: str, display_name: str, language: str = "en"
    ) -> None:
        """Sends the password reset link.

        Raises:
            EmailServiceError: If the message cannot be rendered or delivered.
        """
        raise NotImplementedError

    @abstractmethod
    async def send_welcome(self, recipient_email: str, display_name: str, language: str = "en") -> None:
        """Sends the welcome notification after registration.

        Raises:
            EmailServiceError: If the message cannot be rendered or delivered.
        """
        raise NotImplementedError


class IOAuthProvider(ABC):
    """Interface implemented once per external identity provider."""

    name: str

    @abstractmethod
    def authorization_url(self, state: str) -> str:
        """Builds the provider URL the browser is redirected to."""
        raise NotImplementedError

    @abstractmethod
    async def exchange_code(self, code: str) -> OAuthAssertion:
        """Exchanges an authorization code for a verified identity assertion.

        Raises:
            OAuthProviderError: If the provider rejects the code or fails.
        """
        raise NotImplementedError
