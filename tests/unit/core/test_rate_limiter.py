"""Tests for the tiered rate limiter."""

import pytest

from src.core.exceptions import RateLimitExceededError
from src.core.rate_limiting import RateLimiter


@pytest.fixture
def limiter():
    return RateLimiter(tiers={"burst": (2, 60), "login": (5, 300)})


class TestRateLimiter:
    def test_allows_up_to_limit(self, limiter):
        assert limiter.allow("1.2.3.4:login", "burst") is True
        assert limiter.allow("1.2.3.4:login", "burst") is True
        assert limiter.allow("1.2.3.4:login", "burst") is False

    def test_keys_are_counted_separately(self, limiter):
        limiter.allow("1.2.3.4:login", "burst")
        limiter.allow("1.2.3.4:login", "burst")

        assert limiter.allow("5.6.7.8:login", "burst") is True
        assert limiter.allow("1.2.3.4:register", "burst") is True

    def test_tiers_are_counted_separately(self, limiter):
        limiter.allow("k", "burst")
        limiter.allow("k", "burst")

        assert limiter.allow("k", "login") is True

    def test_check_raises_on_first_exhausted_tier(self, limiter):
        limiter.check("k", ["burst", "login"])
        limiter.check("k", ["burst", "login"])

        with pytest.raises(RateLimitExceededError):
            limiter.check("k", ["burst", "login"])

    def test_unknown_tier(self, limiter):
        with pytest.raises(KeyError):
            limiter.allow("k", "nope")

    def test_reset_clears_counters(self, limiter):
        limiter.allow("k", "burst")
        limiter.allow("k", "burst")

        limiter.reset()

        assert limiter.allow("k", "burst") is True

    def test_disabled_limiter_allows_everything(self):
        limiter = RateLimiter(tiers={"burst": (1, 60)}, enabled=False)

        assert all(limiter.allow("k", "burst") for _ in range(10))

    def test_moving_window_strategy(self):
        limiter = RateLimiter(tiers={"burst": (1, 60)}, strategy="moving-window")

        assert limiter.allow("k", "burst") is True
        assert limiter.allow("k", "burst") is False

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            RateLimiter(tiers={}, strategy="leaky-bucket")
