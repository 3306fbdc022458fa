"""Authentication settings: bearer token signing, password hashing and OAuth clients.
"""

import logging

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class AuthSettings(BaseSettings):
    """Defines settings for bearer tokens, password hashing and OAuth providers.

    The signing secret is read once when the settings singleton is built and is
    never mutated afterwards. A missing or short secret aborts startup.

    Security Note:
        - JWT_SECRET must be a cryptographically random string of at least 32
          characters; anyone holding it can mint sessions for any account.
        - OAuth client secrets should never be exposed in logs or version control.
    """

    # Bearer token settings
    JWT_SECRET: SecretStr = Field(..., description="Symmetric signing secret for bearer tokens.")
    JWT_ALGORITHM: str = Field(default="HS256", pattern="^HS(256|384|512)$")
    ACCESS_TOKEN_EXPIRE_SECONDS: int = Field(default=7 * SECONDS_PER_DAY, ge=60)
    REMEMBER_ME_TOKEN_EXPIRE_SECONDS: int = Field(default=30 * SECONDS_PER_DAY, ge=60)

    # Password hashing
    BCRYPT_WORK_FACTOR: int = Field(default=12, ge=4, le=31)
    PASSWORD_HASH_WORKERS: int = Field(default=4, ge=1)

    # Password reset
    PASSWORD_RESET_TOKEN_EXPIRE_MINUTES: int = Field(default=60, ge=1, le=1440)

    # OAuth settings
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: SecretStr = SecretStr("")
    GOOGLE_REDIRECT_URI: str = "http://localhost:8000/api/v1/auth/oauth/google/callback"

    @field_validator("JWT_SECRET")
    @classmethod
    def _validate_jwt_secret(cls, value: SecretStr) -> SecretStr:
        """Rejects secrets too short to resist brute force.

        Raises:
            ValueError: If the secret is shorter than 32 characters.
        """
        if len(value.get_secret_value()) < 32:
            logger.error("JWT_SECRET is too short; refusing to start.")
            raise ValueError("JWT_SECRET must be at least 32 characters long")
        return value
