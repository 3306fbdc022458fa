from __future__ import annotations

"""Response Pydantic models for account data."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from src.domain.entities.account import Account


class AccountOut(BaseModel):
    """Serialised representation of :class:`~src.domain.entities.account.Account`.

    The password hash and provider subject never leave the service.
    """

    id: UUID
    email: str
    first_name: str
    last_name: str
    date_of_birth: Optional[date] = None
    avatar_url: Optional[str] = None
    provider: Optional[str] = None
    has_password: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, account: Account) -> "AccountOut":
        return cls(
            id=account.id,
            email=account.email,
            first_name=account.first_name,
            last_name=account.last_name,
            date_of_birth=account.date_of_birth,
            avatar_url=account.avatar_url,
            provider=account.provider,
            has_password=account.has_password,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class LoginEventOut(BaseModel):
    ip_address: Optional[str] = None
    client_descriptor: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
