"""Service identity, HTTP surface and localisation settings."""

from typing import List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """HTTP server, CORS, logging and language settings for portcullis.

    Security Note:
        - ``ALLOWED_ORIGINS`` must list the trusted frontends explicitly in
          production; the default only covers a local frontend.
        - ``FRONTEND_URL`` is embedded in reset and welcome emails, so it must
          point at a host the account holder trusts.
    """

    PROJECT_NAME: str = "portcullis"
    VERSION: str = "0.1.0"
    APP_ENV: str = Field(default="development", pattern="^(development|test|staging|production)$")
    DEBUG: bool = False

    # Server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = Field(default=8000, ge=1, le=65535)
    API_WORKERS: int = Field(default=1, ge=1)
    API_V1_PREFIX: str = "/api/v1"
    RELOAD: bool = False

    # Logging
    LOG_LEVEL: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    LOG_JSON: bool = True

    # Clients and languages
    FRONTEND_URL: str = "http://localhost:4200"
    ALLOWED_ORIGINS: Union[str, List[str]] = Field(default="http://localhost:4200", validate_default=True)
    DEFAULT_LANGUAGE: str = "en"
    SUPPORTED_LANGUAGES: List[str] = ["en", "it"]

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, value: Union[str, List[str]]) -> List[str]:
        """Accepts either a list or a comma-separated string of origins."""
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("FRONTEND_URL")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")
