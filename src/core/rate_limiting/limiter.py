"""Per-key request counters built on the ``limits`` library."""

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Tuple

from limits import RateLimitItem, RateLimitItemPerSecond
from limits.storage import MemoryStorage, storage_from_string
from limits.strategies import FixedWindowRateLimiter, MovingWindowRateLimiter, RateLimiter as LimitsStrategy
from structlog import get_logger

from src.core.exceptions import RateLimitExceededError

logger = get_logger(__name__)

_STRATEGIES = {
    "fixed-window": FixedWindowRateLimiter,
    "moving-window": MovingWindowRateLimiter,
}


@dataclass(frozen=True)
class RateLimitTier:
    """A named allowance of ``limit`` calls per ``window_seconds``."""

    name: str
    limit: int
    window_seconds: int

    def to_item(self) -> RateLimitItem:
        return RateLimitItemPerSecond(self.limit, self.window_seconds)


class RateLimiter:
    """Counts invocations per key within fixed or moving windows.

    Args:
        tiers: Tier table, name to ``(limit, window_seconds)``.
        storage_url: ``limits`` storage URI; counters stay in process memory.
        strategy: ``fixed-window`` or ``moving-window``.
        enabled: When False every call is allowed.
    """

    def __init__(
        self,
        tiers: Mapping[str, Tuple[int, int]],
        storage_url: str = "memory://",
        strategy: str = "fixed-window",
        enabled: bool = True,
    ):
        if strategy not in _STRATEGIES:
            raise ValueError(f"Unknown rate limit strategy: {strategy}")

        self.enabled = enabled
        self.tiers: Dict[str, RateLimitTier] = {
            name: RateLimitTier(name=name, limit=limit, window_seconds=window)
            for name, (limit, window) in tiers.items()
        }
        self._items: Dict[str, RateLimitItem] = {name: tier.to_item() for name, tier in self.tiers.items()}
        self._storage: MemoryStorage = storage_from_string(storage_url)
        self._strategy: LimitsStrategy = _STRATEGIES[strategy](self._storage)

    @classmethod
    def from_settings(cls, settings) -> "RateLimiter":
        return cls(
            tiers=settings.RATE_LIMIT_TIERS,
            storage_url=settings.RATE_LIMIT_STORAGE_URL,
            strategy=settings.RATE_LIMIT_STRATEGY,
            enabled=settings.RATE_LIMIT_ENABLED,
        )

    def allow(self, key: str, tier: str) -> bool:
        """Consumes one hit of ``tier`` for ``key``.

        Returns:
            False once the tier is exhausted for the current window.

        Raises:
            KeyError: If ``tier`` is not in the tier table.
        """
        item = self._items[tier]
        if not self.enabled:
            return True
        return self._strategy.hit(item, tier, key)

    def check(self, key: str, tiers: Iterable[str]) -> None:
        """Consumes one hit of every tier, failing on the first exhausted one.

        Raises:
            RateLimitExceededError: The caller must not run the gated operation.
        """
        for tier in tiers:
            if not self.allow(key, tier):
                logger.warning("rate_limit_exceeded", key=key, tier=tier)
                raise RateLimitExceededError()

    def reset(self) -> None:
        """Clears every counter."""
        self._storage.reset()
