"""Auth Session value object.

An AuthSession is the claims bundle carried inside a signed bearer token. It is
never stored server-side; its validity is fully determined by signature
verification and the expiry check.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping
from uuid import UUID


@dataclass(frozen=True)
class AuthSession:
    """Verified identity claims ``{sub, email, iat, exp}``.

    Attributes:
        subject: Account id the token was issued for.
        email: Account email at issue time.
        issued_at: Issue timestamp (UTC, second precision).
        expires_at: Expiry timestamp (UTC, second precision).
    """

    subject: UUID
    email: str
    issued_at: datetime
    expires_at: datetime

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "AuthSession":
        """Builds a session from decoded JWT claims.

        Raises:
            ValueError: If a claim is missing or malformed.
        """
        try:
            subject = UUID(str(claims["sub"]))
            email = claims["email"]
            issued_at = datetime.fromtimestamp(int(claims["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc)
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Malformed session claims: {exc}") from exc

        if not isinstance(email, str) or not email:
            raise ValueError("Malformed session claims: email")

        return cls(subject=subject, email=email, issued_at=issued_at, expires_at=expires_at)

    def to_claims(self) -> Dict[str, Any]:
        return {
            "sub": str(self.subject),
            "email": self.email,
            "iat": int(self.issued_at.timestamp()),
            "exp": int(self.expires_at.timestamp()),
        }

    @property
    def ttl_seconds(self) -> int:
        return int((self.expires_at - self.issued_at).total_seconds())


@dataclass(frozen=True)
class IssuedToken:
    """A signed bearer token together with the session it encodes."""

    token: str
    session: AuthSession
    token_type: str = "bearer"

    @property
    def expires_in(self) -> int:
        return self.session.ttl_seconds
