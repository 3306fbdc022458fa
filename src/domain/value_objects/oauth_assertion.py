"""OAuth Assertion value object.

An assertion is the provider-verified identity handed to the OAuth identity
resolver once the provider's own protocol (code exchange, signature checks)
has completed.
"""

from dataclasses import dataclass
from typing import Optional

from src.domain.entities.account import normalize_email


@dataclass(frozen=True)
class OAuthAssertion:
    """Provider-verified claims ``{provider, subject_id, email, names, avatar}``.

    The email is normalized on construction. Names default to empty strings
    because some providers omit them.
    """

    provider: str
    subject_id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    avatar_url: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.provider:
            raise ValueError("OAuth assertion requires a provider")
        if not self.subject_id:
            raise ValueError("OAuth assertion requires a subject id")
        if not self.email or "@" not in self.email:
            raise ValueError("OAuth assertion requires a valid email")
        object.__setattr__(self, "provider", self.provider.lower())
        object.__setattr__(self, "email", normalize_email(self.email))
        object.__setattr__(self, "first_name", self.first_name or "")
        object.__setattr__(self, "last_name", self.last_name or "")
