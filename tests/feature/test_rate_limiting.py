"""Rate limit tiers attached to the HTTP routes."""

from urllib.parse import parse_qs, urlparse

import pytest
from httpx import ASGITransport, AsyncClient

from src.core.application import create_application
from src.core.config.rate_limiting import DEFAULT_RATE_LIMIT_TIERS
from src.core.rate_limiting import RateLimiter
from tests.factories import create_fake_assertion
from tests.feature.conftest import API
from tests.utils.fakes import FakeOAuthProvider


@pytest.fixture
def limited_client(services):
    """Client whose only tight tier is the endpoint tier under test."""
    tiers = dict(DEFAULT_RATE_LIMIT_TIERS)
    tiers.update({"short": (100, 1), "medium": (100, 10), "long": (100, 60)})
    app = create_application(services=services, rate_limiter=RateLimiter(tiers=tiers))
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestRateLimiting:
    @pytest.mark.asyncio
    async def test_login_tier_blocks_sixth_attempt(self, limited_client):
        payload = {"email": "nobody@example.com", "password": "Passw0rd"}
        async with limited_client as client:
            statuses = [(await client.post(f"{API}/auth/login", json=payload)).status_code for _ in range(6)]

        assert statuses == [401] * 5 + [429]

    @pytest.mark.asyncio
    async def test_forgot_password_tier(self, limited_client):
        async with limited_client as client:
            for _ in range(3):
                await client.post(f"{API}/auth/forgot-password", json={"email": "nobody@example.com"})
            blocked = await client.post(f"{API}/auth/forgot-password", json={"email": "nobody@example.com"})

        assert blocked.status_code == 429
        assert blocked.json()["code"] == "rate_limit_exceeded"

    @pytest.mark.asyncio
    async def test_register_tier_blocks_before_insert(self, limited_client, services, mocker):
        insert_account = mocker.spy(services.repository, "insert_account")

        async with limited_client as client:
            statuses = []
            for index in range(4):
                payload = {
                    "email": f"user{index}@example.com",
                    "password": "Passw0rd",
                    "first_name": "Test",
                    "last_name": "User",
                }
                statuses.append((await client.post(f"{API}/auth/register", json=payload)).status_code)

        assert statuses == [201, 201, 201, 429]
        assert insert_account.call_count == 3
        assert await services.repository.find_by_email("user3@example.com") is None

    @pytest.mark.asyncio
    async def test_oauth_callback_uses_login_tier(self, limited_client, services, mocker):
        provider = FakeOAuthProvider(create_fake_assertion(subject_id="g-7", email="carol@example.com"))
        services.auth_service.oauth_providers["google"] = provider
        record_login = mocker.spy(services.repository, "record_login")

        async with limited_client as client:
            redirect = await client.get(f"{API}/auth/oauth/google", follow_redirects=False)
            state = parse_qs(urlparse(redirect.headers["location"]).query)["state"][0]
            statuses = [
                (
                    await client.get(
                        f"{API}/auth/oauth/google/callback", params={"code": f"code-{attempt}", "state": state}
                    )
                ).status_code
                for attempt in range(6)
            ]

        assert statuses == [200] * 5 + [429]
        assert provider.exchanged_codes == [f"code-{attempt}" for attempt in range(5)]
        assert record_login.call_count == 5
    @pytest.mark.asyncio
    async def test_endpoints_are_limited_independently(self, limited_client):
        async with limited_client as client:
            for _ in range(5):
                await client.post(f"{API}/auth/login", json={"email": "a@example.com", "password": "x"})
            response = await client.post(f"{API}/auth/forgot-password", json={"email": "a@example.com"})

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_global_short_tier(self, services):
        app = create_application(services=services, rate_limiter=RateLimiter(tiers=DEFAULT_RATE_LIMIT_TIERS))
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            statuses = [(await client.get(f"{API}/auth/me")).status_code for _ in range(4)]

        assert statuses == [401, 401, 401, 429]
