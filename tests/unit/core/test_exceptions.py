"""Tests for the exception hierarchy and its HTTP mapping."""

import pytest

from src.core.exceptions import (
    AccountNotFoundError,
    EmailServiceError,
    EmailTakenError,
    InvalidCredentialsError,
    InvalidTokenError,
    OAuthProviderError,
    PasswordMismatchError,
    PortcullisError,
    RateLimitExceededError,
    RepositoryUnavailableError,
    ResetTokenAlreadyUsedError,
    ResetTokenExpiredError,
    ResetTokenNotFoundError,
    UnsupportedOAuthProviderError,
)
from src.core.handlers import status_for


class TestExceptionHierarchy:
    def test_default_message_is_translated_from_code(self):
        error = EmailTakenError()

        assert error.code == "email_taken"
        assert error.message != "email_taken"

    def test_explicit_message_is_kept(self):
        error = PortcullisError("custom", code="something")

        assert str(error) == "custom"
        assert error.code == "something"

    @pytest.mark.parametrize(
        "error_class, status_code",
        [
            (InvalidCredentialsError, 401),
            (InvalidTokenError, 401),
            (AccountNotFoundError, 404),
            (EmailTakenError, 409),
            (PasswordMismatchError, 400),
            (UnsupportedOAuthProviderError, 400),
            (ResetTokenNotFoundError, 400),
            (ResetTokenExpiredError, 400),
            (ResetTokenAlreadyUsedError, 400),
            (RateLimitExceededError, 429),
            (RepositoryUnavailableError, 503),
            (EmailServiceError, 503),
            (OAuthProviderError, 502),
        ],
    )
    def test_status_mapping(self, error_class, status_code):
        assert status_for(error_class()) == status_code

    def test_unmapped_error_is_internal(self):
        assert status_for(PortcullisError()) == 500
