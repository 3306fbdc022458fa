from __future__ import annotations

"""Response Pydantic model for issued bearer tokens."""

from datetime import datetime

from pydantic import BaseModel

from src.domain.value_objects.auth_session import IssuedToken


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    expires_at: datetime

    @classmethod
    def from_issued(cls, issued: IssuedToken) -> "TokenOut":
        return cls(
            access_token=issued.token,
            token_type=issued.token_type,
            expires_in=issued.expires_in,
            expires_at=issued.session.expires_at,
        )
