"""Composition root and FastAPI dependencies for the identity services.

Services are built once per application by `build_services` and stored on
``app.state``; route dependencies read them from there. Every collaborator is
passed explicitly, so tests can swap any of them.
"""

from dataclasses import dataclass
from typing import Annotated, Mapping, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.config.settings import settings
from src.domain.interfaces.services import IEmailDispatcher, IOAuthProvider
from src.domain.services.accounts.profile_service import ProfileService
from src.domain.services.auth.oauth_resolver import OAuthIdentityResolver
from src.domain.services.auth.orchestrator import AuthService
from src.domain.services.auth.password_hasher import PasswordHasher
from src.domain.services.auth.reset_token_manager import ResetTokenManager
from src.domain.services.auth.token import TokenService
from src.infrastructure.database.async_db import AsyncSessionFactory
from src.infrastructure.repositories.credential_repository import CredentialRepository
from src.infrastructure.services.email.email_service import EmailService
from src.infrastructure.services.oauth.providers import build_oauth_providers


@dataclass
class ServiceContainer:
    repository: CredentialRepository
    password_hasher: PasswordHasher
    token_service: TokenService
    auth_service: AuthService
    profile_service: ProfileService

    def shutdown(self) -> None:
        self.password_hasher.shutdown()


def build_services(
    session_factory: async_sessionmaker[AsyncSession] = AsyncSessionFactory,
    email_dispatcher: Optional[IEmailDispatcher] = None,
    oauth_providers: Optional[Mapping[str, IOAuthProvider]] = None,
) -> ServiceContainer:
    """Wires the repository, hasher, token issuer and flows together."""
    repository = CredentialRepository(session_factory, timeout=settings.DATABASE_OPERATION_TIMEOUT_SECONDS)
    password_hasher = PasswordHasher()
    token_service = TokenService()
    auth_service = AuthService(
        repository=repository,
        password_hasher=password_hasher,
        token_issuer=token_service,
        reset_manager=ResetTokenManager(repository, password_hasher),
        oauth_resolver=OAuthIdentityResolver(repository),
        email_dispatcher=email_dispatcher or EmailService(),
        oauth_providers=build_oauth_providers() if oauth_providers is None else oauth_providers,
    )
    return ServiceContainer(
        repository=repository,
        password_hasher=password_hasher,
        token_service=token_service,
        auth_service=auth_service,
        profile_service=ProfileService(repository),
    )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_auth_service(request: Request) -> AuthService:
    return get_services(request).auth_service


def get_profile_service(request: Request) -> ProfileService:
    return get_services(request).profile_service


def get_token_service(request: Request) -> TokenService:
    return get_services(request).token_service


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]
