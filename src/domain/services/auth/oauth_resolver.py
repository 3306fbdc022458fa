"""Maps a provider-verified identity onto a local account.

Resolution order, first match wins:

1. ``(provider, subject_id)`` already linked: return that account, refreshing
   the avatar when it changed. The email is never touched.
2. An account owns the asserted email: link the provider identity onto it,
   keeping the password hash and every other field.
3. Otherwise create an account without a password.

Matching on the provider identity before the email is what prevents a
re-issued subject id from taking over an unrelated account.
"""

from typing import Any, Dict

from structlog import get_logger

from src.core.exceptions import EmailTakenError, PortcullisError
from src.core.logging import mask_email
from src.domain.entities.account import Account
from src.domain.interfaces.repositories import ICredentialRepository
from src.domain.value_objects.oauth_assertion import OAuthAssertion

logger = get_logger(__name__)


class OAuthIdentityResolver:
    """Resolves OAuth assertions to accounts.

    Args:
        repository: Credential store.
        max_attempts: How many times resolution restarts after losing an
            account-creation race to a concurrent request for the same email.
    """

    def __init__(self, repository: ICredentialRepository, max_attempts: int = 2):
        self.repository = repository
        self.max_attempts = max_attempts

    async def resolve(self, assertion: OAuthAssertion) -> Account:
        attempt = 1
        while True:
            try:
                return await self._resolve_once(assertion)
            except EmailTakenError:
                if attempt >= self.max_attempts:
                    raise
                logger.info(
                    "oauth_resolution_race_retry",
                    provider=assertion.provider,
                    email=mask_email(assertion.email),
                )
                attempt += 1

    async def _resolve_once(self, assertion: OAuthAssertion) -> Account:
        account = await self.repository.find_by_provider_identity(assertion.provider, assertion.subject_id)
        if account is not None:
            return await self._refresh_avatar(account, assertion)

        account = await self.repository.find_by_email(assertion.email)
        if account is not None:
            return await self._link(account, assertion)

        return await self._create(assertion)

    async def _refresh_avatar(self, account: Account, assertion: OAuthAssertion) -> Account:
        if not assertion.avatar_url or assertion.avatar_url == account.avatar_url:
            return account
        try:
            return await self.repository.update_account(account.id, {"avatar_url": assertion.avatar_url})
        except PortcullisError as exc:
            # Best effort: the login itself must not fail because of the avatar
            logger.warning(
                "oauth_avatar_refresh_failed",
                account_id=str(account.id),
                error_code=exc.code,
            )
            return account

    async def _link(self, account: Account, assertion: OAuthAssertion) -> Account:
        changes: Dict[str, Any] = {
            "provider": assertion.provider,
            "provider_id": assertion.subject_id,
        }
        if assertion.avatar_url:
            changes["avatar_url"] = assertion.avatar_url

        linked = await self.repository.update_account(account.id, changes)
        logger.info(
            "oauth_identity_linked",
            account_id=str(account.id),
            provider=assertion.provider,
            replaced_provider=account.provider,
        )
        return linked

    async def _create(self, assertion: OAuthAssertion) -> Account:
        account = await self.repository.insert_account(
            Account(
                email=assertion.email,
                password_hash=None,
                first_name=assertion.first_name,
                last_name=assertion.last_name,
                avatar_url=assertion.avatar_url,
                provider=assertion.provider,
                provider_id=assertion.subject_id,
            )
        )
        logger.info("oauth_account_created", account_id=str(account.id), provider=assertion.provider)
        return account
