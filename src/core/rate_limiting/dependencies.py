"""FastAPI dependency attaching rate limit tiers to a route."""

from typing import Awaitable, Callable

from fastapi import Request

from src.core.config.settings import settings


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def rate_limit(endpoint: str, *tiers: str) -> Callable[[Request], Awaitable[None]]:
    """Builds a dependency gating ``endpoint`` with the global tiers plus ``tiers``.

    The limiter lives on ``app.state.rate_limiter``. The key is
    ``"{client_address}:{endpoint}"``.
    """
    tier_names = [*settings.RATE_LIMIT_GLOBAL_TIERS, *tiers]

    async def dependency(request: Request) -> None:
        limiter = request.app.state.rate_limiter
        limiter.check(f"{client_address(request)}:{endpoint}", tier_names)

    return dependency
