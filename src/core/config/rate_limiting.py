"""Rate limiting settings.

Tiers are named ``(limit, window_seconds)`` pairs. The table is handed to the
rate limiter at construction; each gated endpoint refers to its tiers by name.
Counters are process-local.
"""

from typing import Dict, List, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_RATE_LIMIT_TIERS: Dict[str, Tuple[int, int]] = {
    "short": (3, 1),
    "medium": (20, 10),
    "long": (100, 60),
    "register": (3, 15 * 60),
    "forgot_password": (3, 15 * 60),
    "login": (5, 5 * 60),
}

GLOBAL_RATE_LIMIT_TIERS: List[str] = ["short", "medium", "long"]


class RateLimitSettings(BaseSettings):
    """Defines the rate limiter backend and its tier table.

    Attributes:
        RATE_LIMIT_ENABLED: Master switch; when off every check passes.
        RATE_LIMIT_STORAGE_URL: ``limits`` storage URI. Only ``memory://`` is
            supported since counters are deliberately process-local.
        RATE_LIMIT_STRATEGY: ``fixed-window`` or ``moving-window``.
        RATE_LIMIT_TIERS: Named ``(limit, window_seconds)`` pairs.
        RATE_LIMIT_GLOBAL_TIERS: Tier names applied to every endpoint.
    """

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URL: str = Field(default="memory://", pattern="^memory://")
    RATE_LIMIT_STRATEGY: str = Field(default="fixed-window", pattern="^(fixed-window|moving-window)$")
    RATE_LIMIT_TIERS: Dict[str, Tuple[int, int]] = Field(
        default_factory=lambda: dict(DEFAULT_RATE_LIMIT_TIERS)
    )
    RATE_LIMIT_GLOBAL_TIERS: List[str] = Field(
        default_factory=lambda: list(GLOBAL_RATE_LIMIT_TIERS)
    )

    @field_validator("RATE_LIMIT_TIERS")
    @classmethod
    def _validate_tiers(cls, tiers: Dict[str, Tuple[int, int]]) -> Dict[str, Tuple[int, int]]:
        for name, (limit, window) in tiers.items():
            if limit < 1 or window < 1:
                raise ValueError(f"Rate limit tier '{name}' needs a positive limit and window")
        return tiers
