from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.core.exceptions import InvalidTokenError
from src.domain.entities.account import Account
from src.domain.value_objects.auth_session import AuthSession
from src.infrastructure.dependency_injection.auth_dependencies import (
    AuthServiceDep,
    TokenServiceDep,
)

__all__ = [
    "get_current_session",
    "get_current_account",
    "CurrentSession",
    "CurrentAccount",
]


_bearer = HTTPBearer(auto_error=False)
BearerCredentials = Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)]


def _bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise InvalidTokenError()
    return credentials.credentials


async def get_current_session(credentials: BearerCredentials, token_service: TokenServiceDep) -> AuthSession:
    """Return the verified claims of the request's bearer token."""
    return token_service.validate(_bearer_token(credentials))


async def get_current_account(
    request: Request, credentials: BearerCredentials, auth_service: AuthServiceDep
) -> Account:
    """Return the authenticated :class:`~src.domain.entities.account.Account`.

    Raises ``InvalidTokenError`` for a missing or bad token and
    ``AccountNotFoundError`` if the subject was deleted.
    """
    account = await auth_service.get_current_account(_bearer_token(credentials))
    request.state.account_id = str(account.id)
    return account


CurrentSession = Annotated[AuthSession, Depends(get_current_session)]
CurrentAccount = Annotated[Account, Depends(get_current_account)]
