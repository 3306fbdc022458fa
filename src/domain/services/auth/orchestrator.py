"""Authentication flows composed from the identity components.

`AuthService` receives already deserialized input, delegates to the password
hasher, token issuer, reset token manager and OAuth identity resolver, and
returns an identity plus token or raises a typed error. Rate limiting wraps
these entry points from the outside and never runs in here.
"""

from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional

from structlog import get_logger

from src.core.config.settings import settings
from src.core.exceptions import (
    AccountNotFoundError,
    EmailServiceError,
    EmailTakenError,
    InvalidCredentialsError,
    PasswordMismatchError,
    UnsupportedOAuthProviderError,
)
from src.core.logging import mask_email
from src.domain.entities.account import Account, normalize_email
from src.domain.interfaces.repositories import ICredentialRepository
from src.domain.interfaces.services import IEmailDispatcher, IOAuthProvider, IPasswordHasher, ITokenIssuer
from src.domain.services.auth.oauth_resolver import OAuthIdentityResolver
from src.domain.services.auth.reset_token_manager import ResetTokenManager
from src.domain.value_objects.auth_session import AuthSession, IssuedToken
from src.domain.value_objects.oauth_assertion import OAuthAssertion
from src.utils.i18n import get_translated_message

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """An authenticated account together with its freshly issued token."""

    account: Account
    token: IssuedToken


class AuthService:
    """Composes the credential lifecycle into user-facing flows.

    All collaborators are passed in explicitly; nothing is looked up at
    runtime.

    Args:
        repository: Credential store.
        password_hasher: bcrypt hasher running on a worker pool.
        token_issuer: Bearer token signer and validator.
        reset_manager: Reset token lifecycle.
        oauth_resolver: OAuth identity to account mapping.
        email_dispatcher: Outbound email collaborator.
        oauth_providers: Configured providers keyed by name.
    """

    def __init__(
        self,
        repository: ICredentialRepository,
        password_hasher: IPasswordHasher,
        token_issuer: ITokenIssuer,
        reset_manager: ResetTokenManager,
        oauth_resolver: OAuthIdentityResolver,
        email_dispatcher: IEmailDispatcher,
        oauth_providers: Optional[Mapping[str, IOAuthProvider]] = None,
        access_token_ttl: int = settings.ACCESS_TOKEN_EXPIRE_SECONDS,
        remember_me_token_ttl: int = settings.REMEMBER_ME_TOKEN_EXPIRE_SECONDS,
    ):
        self.repository = repository
        self.password_hasher = password_hasher
        self.token_issuer = token_issuer
        self.reset_manager = reset_manager
        self.oauth_resolver = oauth_resolver
        self.email_dispatcher = email_dispatcher
        self.oauth_providers = dict(oauth_providers or {})
        self.access_token_ttl = access_token_ttl
        self.remember_me_token_ttl = remember_me_token_ttl

    async def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        date_of_birth: Optional[date] = None,
        language: str = "en",
    ) -> AuthResult:
        """Creates a password account and signs it in.

        Raises:
            EmailTakenError: If the email already belongs to an account.
        """
        email = normalize_email(email)
        if await self.repository.find_by_email(email) is not None:
            logger.info("registration_rejected_email_taken", email=mask_email(email))
            raise EmailTakenError()

        password_hash = await self.password_hasher.hash(password)
        account = await self.repository.insert_account(
            Account(
                email=email,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
                date_of_birth=date_of_birth,
            )
        )
        logger.info("account_registered", account_id=str(account.id), email=mask_email(email))

        await self._send_welcome(account, language)
        return AuthResult(account=account, token=self._issue(account, self.access_token_ttl))

    async def login(
        self,
        email: str,
        password: str,
        remember_me: bool = False,
        ip_address: Optional[str] = None,
        client_descriptor: Optional[str] = None,
    ) -> AuthResult:
        """Authenticates an email/password pair.

        Unknown email and wrong password raise the same error after the same
        hashing effort.

        Raises:
            InvalidCredentialsError: If the pair does not authenticate.
        """
        email = normalize_email(email)
        account = await self.repository.find_by_email(email)
        digest = account.password_hash if account is not None else None

        if not await self.password_hasher.verify(password, digest) or account is None:
            logger.info("login_failed", email=mask_email(email))
            raise InvalidCredentialsError()

        await self.repository.record_login(account.id, ip_address, client_descriptor)
        ttl = self.remember_me_token_ttl if remember_me else self.access_token_ttl
        logger.info("login_succeeded", account_id=str(account.id), remember_me=remember_me)
        return AuthResult(account=account, token=self._issue(account, ttl))

    async def forgot_password(self, email: str, language: str = "en") -> str:
        """Issues a reset token and emails the link.

        Always returns the same acknowledgement. Once the token is persisted a
        delivery failure is logged, never raised.
        """
        outcome = await self.reset_manager.request_reset(email)
        delivery = outcome.delivery
        if delivery is not None:
            try:
                await self.email_dispatcher.send_password_reset(
                    delivery.email, delivery.secret.value, delivery.display_name, language
                )
            except EmailServiceError as exc:
                logger.error(
                    "password_reset_email_failed",
                    account_id=str(delivery.account_id),
                    token_prefix=delivery.secret.mask_for_logging(),
                    error_code=exc.code,
                )
        return get_translated_message("forgot_password_acknowledged", language)

    async def reset_password(self, secret: str, new_password: str, confirm_password: str) -> None:
        """Sets a new password using a reset token.

        Raises:
            PasswordMismatchError: Before any repository access, if the two
                passwords differ.
            ResetTokenNotFoundError, ResetTokenExpiredError,
            ResetTokenAlreadyUsedError: From token consumption.
        """
        if new_password != confirm_password:
            raise PasswordMismatchError()
        await self.reset_manager.consume(secret, new_password)

    def get_oauth_provider(self, name: str) -> IOAuthProvider:
        provider = self.oauth_providers.get(name.lower())
        if provider is None:
            raise UnsupportedOAuthProviderError()
        return provider

    async def exchange_oauth_code(self, provider_name: str, code: str) -> OAuthAssertion:
        """Runs the provider's code exchange and returns its verified assertion."""
        return await self.get_oauth_provider(provider_name).exchange_code(code)

    async def oauth_callback(
        self,
        assertion: OAuthAssertion,
        ip_address: Optional[str] = None,
        client_descriptor: Optional[str] = None,
    ) -> AuthResult:
        """Signs in the account an OAuth assertion resolves to.

        A login event is recorded as for password logins.
        """
        account = await self.oauth_resolver.resolve(assertion)
        await self.repository.record_login(account.id, ip_address, client_descriptor)
        logger.info("oauth_login_succeeded", account_id=str(account.id), provider=assertion.provider)
        return AuthResult(account=account, token=self._issue(account, self.access_token_ttl))

    async def get_current_account(self, token: str) -> Account:
        """Validates a bearer token and loads its subject.

        Raises:
            InvalidTokenError: If the token does not validate.
            AccountNotFoundError: If the subject no longer exists.
        """
        session = self.token_issuer.validate(token)
        account = await self.repository.find_by_id(session.subject)
        if account is None:
            raise AccountNotFoundError()
        return account

    async def logout(self, session: AuthSession) -> None:
        # Sessions are stateless; the client discards the token.
        logger.info("logout", account_id=str(session.subject))

    def _issue(self, account: Account, ttl_seconds: int) -> IssuedToken:
        return self.token_issuer.issue(account.id, account.email, ttl_seconds)

    async def _send_welcome(self, account: Account, language: str) -> None:
        try:
            await self.email_dispatcher.send_welcome(account.email, account.display_name, language)
        except EmailServiceError as exc:
            logger.warning("welcome_email_failed", account_id=str(account.id), error_code=exc.code)
