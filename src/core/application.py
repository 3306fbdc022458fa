"""Builds the portcullis FastAPI application."""

from typing import Optional

from fastapi import FastAPI

from src.adapters.api.v1 import api_router
from src.core.config.settings import settings
from src.core.handlers import register_exception_handlers
from src.core.lifecycle import create_lifespan_manager
from src.core.middleware import configure_middleware
from src.core.rate_limiting.limiter import RateLimiter
from src.infrastructure.dependency_injection.auth_dependencies import ServiceContainer, build_services


def create_application(
    services: Optional[ServiceContainer] = None,
    rate_limiter: Optional[RateLimiter] = None,
) -> FastAPI:
    """Returns a fully wired application.

    Both collaborators live on ``app.state`` so route dependencies can reach
    them; tests pass their own to run against an in-memory store, a fake mail
    dispatcher and relaxed rate limit tiers.

    Args:
        services: Identity services. Built from settings when omitted.
        rate_limiter: Limiter for the gated endpoints. Built from the
            configured tier table when omitted.
    """
    expose_docs = settings.DEBUG
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Registration, login, bearer sessions, password reset and OAuth account linking.",
        docs_url="/docs" if expose_docs else None,
        openapi_url="/openapi.json" if expose_docs else None,
        redoc_url=None,
        lifespan=create_lifespan_manager(),
    )

    app.state.services = services if services is not None else build_services()
    app.state.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter.from_settings(settings)

    configure_middleware(app)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)
    return app
