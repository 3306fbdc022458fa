from __future__ import annotations

"""Response Pydantic model returned by sign-in endpoints."""

from pydantic import BaseModel

from src.domain.services.auth.orchestrator import AuthResult

from .token import TokenOut
from .user import AccountOut


class AuthData(BaseModel):
    """Account plus bearer token, the ``data`` of register/login/OAuth."""

    user: AccountOut
    token: TokenOut

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthData":
        return cls(user=AccountOut.from_entity(result.account), token=TokenOut.from_issued(result.token))
