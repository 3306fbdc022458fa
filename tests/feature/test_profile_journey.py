"""HTTP journeys for the account profile endpoints."""

import pytest

from tests.feature.conftest import API


class TestProfile:
    @pytest.mark.asyncio
    async def test_read_and_patch_profile(self, async_client, auth_headers):
        patched = await async_client.patch(
            f"{API}/users/me", json={"first_name": "Alicia"}, headers=auth_headers
        )
        fetched = await async_client.get(f"{API}/users/me", headers=auth_headers)

        assert patched.status_code == 200
        assert fetched.json()["data"]["first_name"] == "Alicia"
        assert fetched.json()["data"]["last_name"] == "Liddell"
        assert fetched.json()["data"]["date_of_birth"] == "1990-05-15"

    @pytest.mark.asyncio
    async def test_patch_ignores_email(self, async_client, auth_headers):
        response = await async_client.patch(
            f"{API}/users/me", json={"email": "mallory@example.com"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "alice@example.com"

    @pytest.mark.asyncio
    async def test_avatar_set_and_remove(self, async_client, auth_headers):
        set_response = await async_client.put(
            f"{API}/users/me/avatar", json={"avatar_url": "https://cdn.example.com/a.png"}, headers=auth_headers
        )
        assert set_response.json()["data"]["avatar_url"] == "https://cdn.example.com/a.png"

        removed = await async_client.delete(f"{API}/users/me/avatar", headers=auth_headers)

        assert removed.status_code == 200
        assert removed.json()["data"]["avatar_url"] is None

    @pytest.mark.asyncio
    async def test_login_history_newest_first(self, async_client, registered):
        for agent in ("first-agent", "second-agent"):
            await async_client.post(
                f"{API}/auth/login",
                json={"email": "alice@example.com", "password": "Passw0rd"},
                headers={"User-Agent": agent},
            )
        headers = {"Authorization": f"Bearer {registered['token']['access_token']}"}

        response = await async_client.get(f"{API}/users/me/login-history", headers=headers)

        assert response.status_code == 200
        agents = [event["client_descriptor"] for event in response.json()["data"]]
        assert agents == ["second-agent", "first-agent"]

    @pytest.mark.asyncio
    async def test_profile_requires_authentication(self, async_client):
        response = await async_client.get(f"{API}/users/me")

        assert response.status_code == 401
