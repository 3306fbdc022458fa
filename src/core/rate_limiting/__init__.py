"""Rate limiting for sensitive endpoints.

Named tiers of ``(limit, window_seconds)`` are handed to `RateLimiter` at
construction; endpoints refer to tiers by name. Counters are process-local.
"""

from .dependencies import client_address, rate_limit
from .limiter import RateLimiter, RateLimitTier

__all__ = ["RateLimiter", "RateLimitTier", "client_address", "rate_limit"]
