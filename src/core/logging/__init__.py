"""structlog setup shared by every portcullis module.

Output is one JSON object per line when ``LOG_JSON`` is on and the colored
console renderer otherwise. Request-scoped keys bound through
``structlog.contextvars`` (request id, path) are merged into every event.
"""

import logging

import structlog

from src.core.config.settings import settings

# Emitted by passlib/uvicorn at INFO on every request or hash; too noisy to keep
_QUIET_LOGGERS = ("passlib", "uvicorn.access")


def configure_logging(log_level: str = settings.LOG_LEVEL, json_logs: bool = settings.LOG_JSON) -> None:
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def mask_email(email: str | None) -> str:
    """``alice@example.com`` becomes ``al***@example.com``."""
    if not email or "@" not in email:
        return "***"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


logger = structlog.get_logger()
