from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

This module translates the application's exception hierarchy into HTTP
responses. Every error body uses the same envelope as successful responses:
``{"success": false, "message": <translated>, "code": <machine code>}``.
"""

from typing import Dict, Type

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from src.core.exceptions import (
    AccountNotFoundError,
    AuthenticationError,
    EmailServiceError,
    EmailTakenError,
    OAuthProviderError,
    PasswordResetError,
    PortcullisError,
    RateLimitError,
    RepositoryUnavailableError,
    ValidationError,
)
from src.utils.i18n import get_request_language, get_translated_message

__all__ = [
    "STATUS_BY_ERROR",
    "portcullis_error_handler",
    "request_validation_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)

# Most specific class wins; lookup walks the exception's MRO.
STATUS_BY_ERROR: Dict[Type[PortcullisError], int] = {
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    AccountNotFoundError: status.HTTP_404_NOT_FOUND,
    EmailTakenError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    PasswordResetError: status.HTTP_400_BAD_REQUEST,
    RateLimitError: status.HTTP_429_TOO_MANY_REQUESTS,
    RepositoryUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    EmailServiceError: status.HTTP_503_SERVICE_UNAVAILABLE,
    OAuthProviderError: status.HTTP_502_BAD_GATEWAY,
}


def status_for(exc: PortcullisError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _language(request: Request) -> str:
    return getattr(request.state, "language", None) or get_request_language(request)


async def portcullis_error_handler(request: Request, exc: PortcullisError) -> JSONResponse:
    """Handles every `PortcullisError`.

    The message is re-translated from the error code into the caller's
    language. Authentication failures carry a ``WWW-Authenticate`` header.
    """
    status_code = status_for(exc)
    log = logger.error if status_code >= 500 else logger.info
    log(
        "request_failed",
        error_code=exc.code,
        status_code=status_code,
        path=request.url.path,
        client_ip=request.client.host if request.client else None,
    )

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": get_translated_message(exc.code, _language(request)),
            "code": exc.code,
        },
        headers=headers,
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handles FastAPI request validation, returning a `422` in the common envelope."""
    errors = [
        {"field": ".".join(str(part) for part in error.get("loc", ())[1:]), "message": error.get("msg", "")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "message": get_translated_message("validation_error", _language(request)),
            "code": "validation_error",
            "data": {"errors": errors},
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application."""
    app.add_exception_handler(PortcullisError, portcullis_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
