"""Tests for the Google OAuth provider with the network calls patched out."""

from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from src.core.exceptions import OAuthProviderError
from src.infrastructure.services.oauth.providers import GoogleOAuthProvider, build_oauth_providers

PROFILE = {
    "sub": "110169484474386276334",
    "email": "Bob@Example.com",
    "email_verified": True,
    "given_name": "Bob",
    "family_name": "Builder",
    "picture": "https://lh3.googleusercontent.com/a/photo.jpg",
}


@pytest.fixture
def provider():
    return GoogleOAuthProvider("client-id", "client-secret", "http://test/callback")


class TestGoogleOAuthProvider:
    def test_authorization_url_carries_state(self, provider):
        url = provider.authorization_url("state-123")
        query = parse_qs(urlparse(url).query)

        assert url.startswith(GoogleOAuthProvider.AUTHORIZE_URL)
        assert query["state"] == ["state-123"]
        assert query["client_id"] == ["client-id"]
        assert query["redirect_uri"] == ["http://test/callback"]

    @pytest.mark.asyncio
    async def test_exchange_code_maps_profile(self, provider, mocker):
        mocker.patch.object(provider, "_fetch_token", AsyncMock(return_value={"access_token": "t"}))
        mocker.patch.object(provider, "_fetch_userinfo", AsyncMock(return_value=PROFILE))

        assertion = await provider.exchange_code("auth-code")

        assert assertion.provider == "google"
        assert assertion.subject_id == PROFILE["sub"]
        assert assertion.email == "bob@example.com"
        assert assertion.first_name == "Bob"
        assert assertion.avatar_url == PROFILE["picture"]
        provider._fetch_token.assert_awaited_once_with("auth-code")

    @pytest.mark.asyncio
    async def test_unverified_email_is_rejected(self, provider, mocker):
        mocker.patch.object(provider, "_fetch_token", AsyncMock(return_value={"access_token": "t"}))
        mocker.patch.object(provider, "_fetch_userinfo", AsyncMock(return_value={**PROFILE, "email_verified": False}))

        with pytest.raises(OAuthProviderError):
            await provider.exchange_code("auth-code")

    @pytest.mark.asyncio
    async def test_profile_without_email_is_rejected(self, provider, mocker):
        mocker.patch.object(provider, "_fetch_token", AsyncMock(return_value={"access_token": "t"}))
        mocker.patch.object(provider, "_fetch_userinfo", AsyncMock(return_value={"sub": "1"}))

        with pytest.raises(OAuthProviderError):
            await provider.exchange_code("auth-code")

    @pytest.mark.asyncio
    async def test_transport_failure(self, provider, mocker):
        mocker.patch.object(provider, "_fetch_token", AsyncMock(side_effect=httpx.ConnectError("down")))

        with pytest.raises(OAuthProviderError):
            await provider.exchange_code("auth-code")


class TestProviderRegistry:
    def test_unconfigured_google_is_left_out(self):
        from src.core.config.settings import settings

        configured = settings.model_copy(update={"GOOGLE_CLIENT_ID": ""})

        assert build_oauth_providers(configured) == {}

    def test_configured_google_is_registered(self):
        from pydantic import SecretStr

        from src.core.config.settings import settings

        configured = settings.model_copy(
            update={"GOOGLE_CLIENT_ID": "id", "GOOGLE_CLIENT_SECRET": SecretStr("secret")}
        )

        assert isinstance(build_oauth_providers(configured)["google"], GoogleOAuthProvider)
