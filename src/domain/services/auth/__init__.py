"""Authentication domain services."""

from .oauth_resolver import OAuthIdentityResolver
from .orchestrator import AuthService
from .password_hasher import PasswordHasher
from .reset_token_manager import ResetTokenManager
from .token import TokenService

__all__ = [
    "AuthService",
    "OAuthIdentityResolver",
    "PasswordHasher",
    "ResetTokenManager",
    "TokenService",
]
