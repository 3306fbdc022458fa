"""Email Service for sending password reset and welcome emails.

This service renders Jinja2 templates and hands the result to an SMTP relay
through FastMail. In test mode (always on in development and test) the message
is logged instead of sent.
"""

from pathlib import Path
from typing import Any, Optional

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateNotFound
from structlog import get_logger

from src.core.config.settings import Settings, settings as app_settings
from src.core.exceptions import EmailServiceError, TemplateRenderError
from src.core.logging import mask_email
from src.domain.interfaces.services import IEmailDispatcher
from src.utils.i18n import get_translated_message

logger = get_logger(__name__)

_PROJECT_ROOT = Path(__file__).resolve().parents[4]


class EmailService(IEmailDispatcher):
    """Infrastructure email dispatcher with template rendering and i18n support.

    Attributes:
        settings: Application settings (SMTP, sender identity, frontend URL).
        jinja_env: Jinja2 environment for template rendering.
        fastmail: FastMail instance, ``None`` in test mode.
    """

    def __init__(self, settings: Settings = app_settings):
        self.settings = settings
        self._setup_jinja_environment()
        self._setup_fastmail()

        logger.info(
            "email_service_initialized",
            test_mode=settings.EMAIL_TEST_MODE,
            smtp_host=settings.SMTP_HOST,
        )

    def _setup_jinja_environment(self) -> None:
        template_dir = Path(self.settings.EMAIL_TEMPLATES_DIR)
        if not template_dir.is_absolute():
            template_dir = _PROJECT_ROOT / template_dir

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def _setup_fastmail(self) -> None:
        if self.settings.EMAIL_TEST_MODE:
            self.fastmail: Optional[FastMail] = None
            return

        password = self.settings.SMTP_PASSWORD.get_secret_value() if self.settings.SMTP_PASSWORD else ""
        config = ConnectionConfig(
            MAIL_USERNAME=self.settings.SMTP_USERNAME or "",
            MAIL_PASSWORD=password,
            MAIL_FROM=self.settings.EMAIL_FROM,
            MAIL_FROM_NAME=self.settings.EMAIL_FROM_NAME,
            MAIL_PORT=self.settings.SMTP_PORT,
            MAIL_SERVER=self.settings.SMTP_HOST,
            MAIL_STARTTLS=self.settings.SMTP_USE_TLS,
            MAIL_SSL_TLS=self.settings.SMTP_USE_SSL,
            USE_CREDENTIALS=bool(self.settings.SMTP_USERNAME and self.settings.SMTP_PASSWORD),
            VALIDATE_CERTS=True,
        )
        self.fastmail = FastMail(config)

    def build_reset_url(self, reset_secret: str) -> str:
        return f"{self.settings.FRONTEND_URL}/reset-password?token={reset_secret}"

    def render_template(self, template_name: str, **context: Any) -> str:
        """Render an email template.

        Raises:
            TemplateRenderError: If the template is missing or fails to render.
        """
        try:
            return self.jinja_env.get_template(template_name).render(**context)
        except TemplateNotFound as exc:
            logger.error("email_template_not_found", template=template_name)
            raise TemplateRenderError() from exc
        except TemplateError as exc:
            logger.error("email_template_render_failed", template=template_name, error=str(exc))
            raise TemplateRenderError() from exc

    async def send_email(self, to_email: str, subject: str, html_content: str) -> None:
        """Deliver a rendered message, or log it in test mode.

        Raises:
            EmailServiceError: If the relay rejects the message or is unreachable.
        """
        if self.fastmail is None:
            logger.info(
                "email_logged_test_mode",
                to_email=mask_email(to_email),
                subject=subject,
                content_length=len(html_content),
            )
            return

        message = MessageSchema(
            subject=subject,
            recipients=[to_email],
            body=html_content,
            subtype=MessageType.html,
        )
        try:
            await self.fastmail.send_message(message)
        except Exception as exc:  # noqa: BLE001  relay errors vary by transport
            logger.error(
                "email_delivery_failed",
                to_email=mask_email(to_email),
                error_type=type(exc).__name__,
            )
            raise EmailServiceError() from exc

        logger.info("email_sent", to_email=mask_email(to_email), subject=subject)

    async def send_password_reset(
        self, recipient_email: str, reset_secret: str, display_name: str, language: str = "en"
    ) -> None:
        html = self.render_template(
            "password_reset.html",
            user_name=display_name,
            reset_url=self.build_reset_url(reset_secret),
            expires_minutes=self.settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES,
            app_name=self.settings.PROJECT_NAME,
            support_email=self.settings.EMAIL_SUPPORT_ADDRESS,
            language=language,
        )
        subject = get_translated_message("password_reset_email_subject", language)
        await self.send_email(recipient_email, subject, html)

    async def send_welcome(self, recipient_email: str, display_name: str, language: str = "en") -> None:
        html = self.render_template(
            "welcome.html",
            user_name=display_name,
            dashboard_url=f"{self.settings.FRONTEND_URL}/dashboard",
            app_name=self.settings.PROJECT_NAME,
            support_email=self.settings.EMAIL_SUPPORT_ADDRESS,
            language=language,
        )
        subject = get_translated_message("welcome_email_subject", language)
        await self.send_email(recipient_email, subject, html)
