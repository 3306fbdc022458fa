from __future__ import annotations

"""Centralized, structured exception hierarchy for Portcullis.

Every error carries a machine-readable `code` and a human-readable `message`.
The code doubles as the i18n catalog key, so the HTTP layer can re-translate a
message into the caller's language without knowing where it was raised.

The hierarchy is designed to:
- Give each credential lifecycle failure its own type.
- Keep business-rule failures (returned to the caller) apart from
  infrastructure failures (surfaced as-is, never retried here).
- Map cleanly to HTTP status codes in the API layer.
"""

from typing import Final

from src.utils.i18n import get_translated_message

__all__: Final = [
    "PortcullisError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "AccountNotFoundError",
    "EmailTakenError",
    "ValidationError",
    "PasswordMismatchError",
    "UnsupportedOAuthProviderError",
    "PasswordResetError",
    "ResetTokenNotFoundError",
    "ResetTokenExpiredError",
    "ResetTokenAlreadyUsedError",
    "RateLimitError",
    "RateLimitExceededError",
    "RepositoryUnavailableError",
    "EmailServiceError",
    "TemplateRenderError",
    "OAuthProviderError",
]


class PortcullisError(Exception):
    """Base exception class for all custom errors in the application.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code; also the key of the
                    translated user-facing message.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str | None = None, code: str = "generic_error"):
        if message is None:
            message = get_translated_message(code, "en")
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Auth-related errors (401 / 404 / 409)
# ---------------------------------------------------------------------------


class AuthenticationError(PortcullisError):
    """Raised for general authentication failures.

    Maps to a `401 Unauthorized` HTTP status code.
    """

    def __init__(self, message: str | None = None, code: str = "authentication_error"):
        super().__init__(message, code)


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email/password pair does not authenticate.

    Unknown email and wrong password both raise this error with the same
    message; callers must not be able to tell them apart.
    """

    def __init__(self, message: str | None = None, code: str = "invalid_credentials"):
        super().__init__(message, code)


class InvalidTokenError(AuthenticationError):
    """Raised when a bearer token has a bad signature, a malformed payload or is expired."""

    def __init__(self, message: str | None = None, code: str = "invalid_token"):
        super().__init__(message, code)


class AccountNotFoundError(PortcullisError):
    """Raised by authenticated lookups when the account no longer exists.

    Maps to a `404 Not Found` HTTP status code.
    """

    def __init__(self, message: str | None = None, code: str = "account_not_found"):
        super().__init__(message, code)


class EmailTakenError(PortcullisError):
    """Raised when registering with an email that already belongs to an account.

    Maps to a `409 Conflict` HTTP status code.
    """

    def __init__(self, message: str | None = None, code: str = "email_taken"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Validation errors (400)
# ---------------------------------------------------------------------------


class ValidationError(PortcullisError):
    """Raised for input that passed deserialization but breaks a business rule."""

    def __init__(self, message: str | None = None, code: str = "validation_error"):
        super().__init__(message, code)


class PasswordMismatchError(ValidationError):
    """Raised when a new password and its confirmation differ."""

    def __init__(self, message: str | None = None, code: str = "password_mismatch"):
        super().__init__(message, code)


class UnsupportedOAuthProviderError(ValidationError):
    """Raised when a callback names a provider that is not configured."""

    def __init__(self, message: str | None = None, code: str = "unsupported_oauth_provider"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Password reset errors (400)
# ---------------------------------------------------------------------------


class PasswordResetError(PortcullisError):
    """Base class for reset-token consumption failures."""

    def __init__(self, message: str | None = None, code: str = "password_reset_error"):
        super().__init__(message, code)


class ResetTokenNotFoundError(PasswordResetError):
    """Raised when no reset token matches the presented secret."""

    def __init__(self, message: str | None = None, code: str = "reset_token_not_found"):
        super().__init__(message, code)


class ResetTokenExpiredError(PasswordResetError):
    """Raised when the reset token's expiry has passed."""

    def __init__(self, message: str | None = None, code: str = "reset_token_expired"):
        super().__init__(message, code)


class ResetTokenAlreadyUsedError(PasswordResetError):
    """Raised when the reset token was already consumed, including by a concurrent request."""

    def __init__(self, message: str | None = None, code: str = "reset_token_already_used"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Operational errors (429 / 503 / 502)
# ---------------------------------------------------------------------------


class RateLimitError(PortcullisError):
    """Base class for rate limiting related errors.

    This exception and its subclasses map to a `429 Too Many Requests` HTTP
    status code.
    """

    def __init__(self, message: str | None = None, code: str = "rate_limit_exceeded"):
        super().__init__(message, code)


class RateLimitExceededError(RateLimitError):
    """Raised when a rate limit tier is exhausted.

    The gated operation has not run. The message never hints at anything
    beyond the limit itself.
    """

    def __init__(self, message: str | None = None, code: str = "rate_limit_exceeded"):
        super().__init__(message, code)


class RepositoryUnavailableError(PortcullisError):
    """Raised when the credential store is unreachable, failing or too slow.

    This wraps underlying driver errors and timeouts. It is never retried by
    the services and maps to a `503 Service Unavailable` HTTP status.
    """

    def __init__(self, message: str | None = None, code: str = "repository_unavailable"):
        super().__init__(message, code)


class EmailServiceError(PortcullisError):
    """Raised when an email cannot be rendered or handed to the relay.

    Maps to a `503 Service Unavailable` HTTP status.
    """

    def __init__(self, message: str | None = None, code: str = "email_service_error"):
        super().__init__(message, code)


class TemplateRenderError(EmailServiceError):
    """Raised when an email template fails to render."""

    def __init__(self, message: str | None = None, code: str = "template_render_error"):
        super().__init__(message, code)


class OAuthProviderError(PortcullisError):
    """Raised when an external identity provider rejects or fails a code exchange.

    Maps to a `502 Bad Gateway` HTTP status.
    """

    def __init__(self, message: str | None = None, code: str = "oauth_provider_error"):
        super().__init__(message, code)
