"""Account profile management.

Covers profile reads and edits, avatar references and the recent login
history. Avatar files themselves live in external storage; only the reference
is kept on the account.
"""

from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID

from structlog import get_logger

from src.core.exceptions import AccountNotFoundError
from src.domain.entities.account import Account, LoginEvent
from src.domain.interfaces.repositories import ICredentialRepository

logger = get_logger(__name__)

LOGIN_HISTORY_LIMIT = 5


class ProfileService:
    def __init__(self, repository: ICredentialRepository):
        self.repository = repository

    async def get_profile(self, account_id: UUID) -> Account:
        account = await self.repository.find_by_id(account_id)
        if account is None:
            raise AccountNotFoundError()
        return account

    async def update_profile(
        self,
        account_id: UUID,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        date_of_birth: Optional[date] = None,
    ) -> Account:
        """Updates the supplied profile fields; omitted fields are left as is."""
        changes: Dict[str, Any] = {}
        if first_name is not None:
            changes["first_name"] = first_name
        if last_name is not None:
            changes["last_name"] = last_name
        if date_of_birth is not None:
            changes["date_of_birth"] = date_of_birth

        if not changes:
            return await self.get_profile(account_id)

        account = await self.repository.update_account(account_id, changes)
        logger.info("profile_updated", account_id=str(account_id), fields=sorted(changes))
        return account

    async def set_avatar(self, account_id: UUID, avatar_url: str) -> Account:
        account = await self.repository.update_account(account_id, {"avatar_url": avatar_url})
        logger.info("avatar_updated", account_id=str(account_id))
        return account

    async def remove_avatar(self, account_id: UUID) -> Account:
        account = await self.repository.update_account(account_id, {"avatar_url": None})
        logger.info("avatar_removed", account_id=str(account_id))
        return account

    async def login_history(self, account_id: UUID, limit: int = LOGIN_HISTORY_LIMIT) -> List[LoginEvent]:
        """Returns the most recent login events, newest first."""
        await self.get_profile(account_id)
        return await self.repository.list_login_events(account_id, limit)
