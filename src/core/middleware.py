"""HTTP middleware stack: CORS, request context and response language."""

import secrets
import time

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.core.config.settings import settings
from src.core.logging import logger
from src.utils.i18n import get_request_language

REQUEST_ID_HEADER = "X-Request-ID"


def configure_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept-Language", REQUEST_ID_HEADER],
        expose_headers=["Content-Language", REQUEST_ID_HEADER],
    )
    app.middleware("http")(request_context_middleware)


async def request_context_middleware(request: Request, call_next):
    """Binds a request id to every log line of the request and negotiates
    the response language.

    The chosen language is kept on ``request.state.language`` for the error
    handlers and echoed back as ``Content-Language``.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or secrets.token_hex(8)
    language = get_request_language(request)
    request.state.language = language

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, path=request.url.path)

    started = time.perf_counter()
    response = await call_next(request)
    logger.debug(
        "request_completed",
        method=request.method,
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
    )

    response.headers["Content-Language"] = language
    response.headers[REQUEST_ID_HEADER] = request_id
    return response
