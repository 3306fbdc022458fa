"""Process-wide setup that has to happen before the app object exists."""

from dotenv import load_dotenv

from src.core.config.settings import settings
from src.core.logging import configure_logging, logger
from src.utils.i18n import setup_i18n


def initialize_application() -> None:
    """Exports dotenv values to ``os.environ``, installs the structlog
    pipeline and loads the message catalogs.

    Values already present in the environment win over the dotenv file.
    """
    load_dotenv(override=False)
    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
    setup_i18n()
    logger.debug("initialization_complete", languages=settings.SUPPORTED_LANGUAGES)
