"""Credential store connection settings.

Production runs on PostgreSQL through asyncpg; any SQLAlchemy async URL can be
supplied through ``DATABASE_URL`` (the test suite uses ``sqlite+aiosqlite``).
"""
import logging

from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class DatabaseSettings(BaseSettings):
    """Connection, pool and per-call timeout settings.

    Security Note:
        - POSTGRES_PASSWORD is a secret and must stay out of logs and version
          control. The assembled URL embeds it, so the URL is never logged.
    """

    POSTGRES_USER: str = "portcullis"
    POSTGRES_PASSWORD: SecretStr = SecretStr("")
    POSTGRES_DB: str = "portcullis"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = Field(default=5432, ge=1, le=65535)

    # Pool sizing applies to PostgreSQL only
    POSTGRES_POOL_SIZE: int = Field(default=10, ge=1)
    POSTGRES_MAX_OVERFLOW: int = Field(default=20, ge=0)
    POSTGRES_POOL_TIMEOUT: float = Field(default=5.0, ge=1.0)

    # Upper bound for a single repository call, transaction included
    DATABASE_OPERATION_TIMEOUT_SECONDS: float = Field(default=5.0, gt=0)

    DATABASE_URL: str = Field(default="", validate_default=True)

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def build_database_url(cls, value: str | None, info: ValidationInfo) -> str:
        """Uses an explicit ``DATABASE_URL`` or builds an asyncpg URL from the
        POSTGRES_* fields.
        """
        if value:
            return value

        fields = info.data
        password = fields.get("POSTGRES_PASSWORD")
        secret = password.get_secret_value() if password else ""
        if not secret:
            logger.warning("POSTGRES_PASSWORD is empty; connecting without a password.")

        return (
            f"postgresql+asyncpg://{fields.get('POSTGRES_USER')}:{secret}"
            f"@{fields.get('POSTGRES_HOST')}:{fields.get('POSTGRES_PORT')}/{fields.get('POSTGRES_DB')}"
        )
