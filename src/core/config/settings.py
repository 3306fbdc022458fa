"""Aggregated portcullis configuration.

`Settings` merges the app, database, auth, email and rate limiting groups and
is instantiated exactly once, as the module-level ``settings`` object. The
dotenv file is chosen from ``APP_ENV``:

==============  ==================  ==========================
APP_ENV         dotenv file         email delivery
==============  ==================  ==========================
development     .env                logged only
test            .env.test           logged only
staging         .env.staging        SMTP, credentials required
production      .env.production     SMTP, credentials required
==============  ==================  ==========================

Importing this module without a usable JWT_SECRET raises, which stops the
process before any request is served.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .email import EmailSettings
from .rate_limiting import RateLimitSettings

logger = logging.getLogger(__name__)
logging.getLogger("passlib").setLevel(logging.ERROR)

ENV_FILES = {
    "development": ".env",
    "test": ".env.test",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Environments where mail is written to the log instead of an SMTP relay
LOG_ONLY_EMAIL_ENVS = frozenset({"development", "test"})


class Settings(AppSettings, DatabaseSettings, AuthSettings, EmailSettings, RateLimitSettings):
    """Every configuration value the service reads, validated on construction."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.APP_ENV in LOG_ONLY_EMAIL_ENVS:
            self.EMAIL_TEST_MODE = True
        if self.APP_ENV == "development":
            self.DEBUG = True

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    def validate_required_fields(self) -> None:
        """Cross-field checks that no single settings group can make alone.

        Raises:
            ValueError: If a global rate limit tier is not defined in the tier
                table. SMTP problems are only logged, since email delivery
                failures are already tolerated at runtime.
        """
        try:
            self.validate_smtp_config()
        except ValueError as exc:
            logger.error("Email configuration error: %s", exc)

        missing = sorted(set(self.RATE_LIMIT_GLOBAL_TIERS) - set(self.RATE_LIMIT_TIERS))
        if missing:
            raise ValueError(f"Unknown global rate limit tiers: {', '.join(missing)}")


def _resolve_env_file(env: str) -> Optional[str]:
    candidate = ENV_FILES.get(env, ".env")
    if Path(candidate).exists():
        return candidate
    if Path(".env").exists():
        return ".env"
    return None


def create_settings() -> Settings:
    """Builds the settings object for the environment named by ``APP_ENV``."""
    env = os.getenv("APP_ENV", "development")
    env_file = _resolve_env_file(env)

    if env_file is None:
        logger.warning("No dotenv file for %s; reading process environment only", env)
        instance = Settings()
    else:
        logger.info("Loading %s configuration from %s", env, env_file)
        instance = Settings(_env_file=env_file)

    logger.info("Email test mode: %s", instance.EMAIL_TEST_MODE)
    return instance


settings = create_settings()
settings.validate_required_fields()
