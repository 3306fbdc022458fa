"""Reset secret value object.

Password reset secrets carry 256 bits of entropy rendered as 64 lowercase
hexadecimal characters.
"""

import secrets
import string
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class ResetSecret:
    """An opaque password reset secret."""

    value: str

    LENGTH: ClassVar[int] = 64
    ALPHABET: ClassVar[frozenset] = frozenset(string.hexdigits.lower())

    def __post_init__(self) -> None:
        if len(self.value) != self.LENGTH or not set(self.value) <= self.ALPHABET:
            raise ValueError(f"Reset secret must be {self.LENGTH} lowercase hex characters")

    @classmethod
    def generate(cls) -> "ResetSecret":
        # 32 bytes of entropy (256 bits)
        return cls(value=secrets.token_hex(cls.LENGTH // 2))

    def mask_for_logging(self) -> str:
        return self.value[:8] + "..."

    def __str__(self) -> str:
        return self.value
