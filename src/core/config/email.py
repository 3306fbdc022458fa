"""Outbound mail settings for welcome and password reset messages."""

from typing import Optional

from pydantic import EmailStr, Field, SecretStr
from pydantic_settings import BaseSettings


class EmailSettings(BaseSettings):
    """SMTP relay and sender identity.

    With ``EMAIL_TEST_MODE`` on, rendered messages are logged and the relay is
    never contacted. Development and test environments always run that way.
    """

    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = Field(default=587, ge=1, le=65535)
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[SecretStr] = None
    SMTP_USE_TLS: bool = True  # STARTTLS on port 587
    SMTP_USE_SSL: bool = False  # implicit TLS on port 465

    EMAIL_FROM: EmailStr = "noreply@example.com"
    EMAIL_FROM_NAME: str = "Portcullis"
    EMAIL_SUPPORT_ADDRESS: EmailStr = "support@example.com"
    EMAIL_TEMPLATES_DIR: str = "src/templates/email"
    EMAIL_TEST_MODE: bool = False

    def validate_smtp_config(self) -> None:
        """Checks that staging and production can actually reach a relay.

        Raises:
            ValueError: On missing credentials or an unencrypted transport.
        """
        deployed = getattr(self, "APP_ENV", "development") in {"production", "staging"}
        if self.EMAIL_TEST_MODE or not deployed:
            return

        problems = []
        if not (self.SMTP_USERNAME and self.SMTP_PASSWORD):
            problems.append("SMTP_USERNAME and SMTP_PASSWORD are required")
        if self.SMTP_USE_TLS == self.SMTP_USE_SSL:
            problems.append("exactly one of SMTP_USE_TLS and SMTP_USE_SSL must be enabled")
        if problems:
            raise ValueError("; ".join(problems))
