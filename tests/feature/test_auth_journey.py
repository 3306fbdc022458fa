"""HTTP journeys through registration, login, session and password reset."""

import pytest

from tests.feature.conftest import API


class TestRegistration:
    @pytest.mark.asyncio
    async def test_register_returns_account_and_token(self, async_client, registration_payload):
        response = await async_client.post(f"{API}/auth/register", json=registration_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["user"]["email"] == "alice@example.com"
        assert body["data"]["user"]["has_password"] is True
        assert "password_hash" not in body["data"]["user"]
        assert body["data"]["token"]["token_type"] == "bearer"
        assert body["data"]["token"]["expires_in"] == 7 * 86400

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, async_client, registered, registration_payload):
        response = await async_client.post(
            f"{API}/auth/register", json={**registration_payload, "email": "ALICE@example.com"}
        )

        assert response.status_code == 409
        assert response.json() == {"success": False, "message": "Email already registered.", "code": "email_taken"}

    @pytest.mark.asyncio
    async def test_error_message_follows_language(self, async_client, registered, registration_payload):
        response = await async_client.post(
            f"{API}/auth/register", json=registration_payload, headers={"Accept-Language": "it"}
        )

        assert response.status_code == 409
        assert response.json()["message"] == "Email già registrata."
        assert response.headers["Content-Language"] == "it"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("password", ["short1A", "alllowercase1", "NoDigitsAtAll"])
    async def test_weak_password_is_rejected(self, async_client, registration_payload, password):
        response = await async_client.post(f"{API}/auth/register", json={**registration_payload, "password": password})

        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"


class TestLoginAndSession:
    @pytest.mark.asyncio
    async def test_login_and_fetch_current_account(self, async_client, registered):
        login = await async_client.post(
            f"{API}/auth/login", json={"email": "alice@example.com", "password": "Passw0rd"}
        )
        assert login.status_code == 200
        token = login.json()["data"]["token"]["access_token"]

        me = await async_client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert me.status_code == 200
        assert me.json()["data"]["id"] == registered["user"]["id"]

    @pytest.mark.asyncio
    async def test_remember_me_issues_long_token(self, async_client, registered):
        login = await async_client.post(
            f"{API}/auth/login",
            json={"email": "alice@example.com", "password": "Passw0rd", "remember_me": True},
        )

        assert login.json()["data"]["token"]["expires_in"] == 30 * 86400

    @pytest.mark.asyncio
    async def test_bad_credentials_are_indistinguishable(self, async_client, registered):
        wrong_password = await async_client.post(
            f"{API}/auth/login", json={"email": "alice@example.com", "password": "wrong"}
        )
        unknown_email = await async_client.post(
            f"{API}/auth/login", json={"email": "nobody@example.com", "password": "Passw0rd"}
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer not-a-jwt"}, {"Authorization": "Basic abc"}])
    async def test_me_requires_valid_bearer(self, async_client, headers):
        response = await async_client.get(f"{API}/auth/me", headers=headers)

        assert response.status_code == 401
        assert response.json()["code"] == "invalid_token"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_logout_acknowledges(self, async_client, auth_headers):
        response = await async_client.post(f"{API}/auth/logout", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["success"] is True


class TestPasswordReset:
    @pytest.mark.asyncio
    async def test_full_reset_journey(self, async_client, registered, email_dispatcher, new_password):
        forgot = await async_client.post(f"{API}/auth/forgot-password", json={"email": "alice@example.com"})
        assert forgot.status_code == 200
        secret = email_dispatcher.last_reset_secret()

        reset = await async_client.post(
            f"{API}/auth/reset-password",
            json={"token": secret, "new_password": new_password, "confirm_password": new_password},
        )
        assert reset.status_code == 200

        old = await async_client.post(f"{API}/auth/login", json={"email": "alice@example.com", "password": "Passw0rd"})
        new = await async_client.post(f"{API}/auth/login", json={"email": "alice@example.com", "password": new_password})
        assert old.status_code == 401
        assert new.status_code == 200

        again = await async_client.post(
            f"{API}/auth/reset-password",
            json={"token": secret, "new_password": new_password, "confirm_password": new_password},
        )
        assert again.status_code == 400
        assert again.json()["code"] == "reset_token_already_used"

    @pytest.mark.asyncio
    async def test_unknown_email_gets_same_acknowledgement(self, async_client, registered):
        known = await async_client.post(f"{API}/auth/forgot-password", json={"email": "alice@example.com"})
        unknown = await async_client.post(f"{API}/auth/forgot-password", json={"email": "nobody@example.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()

    @pytest.mark.asyncio
    async def test_mismatched_confirmation(self, async_client):
        response = await async_client.post(
            f"{API}/auth/reset-password",
            json={"token": "a" * 64, "new_password": "NewPass1", "confirm_password": "NewPass2"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "password_mismatch"

    @pytest.mark.asyncio
    async def test_unknown_token(self, async_client):
        response = await async_client.post(
            f"{API}/auth/reset-password",
            json={"token": "a" * 64, "new_password": "NewPass1", "confirm_password": "NewPass1"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "reset_token_not_found"

    @pytest.mark.asyncio
    async def test_malformed_token_is_a_validation_error(self, async_client):
        response = await async_client.post(
            f"{API}/auth/reset-password",
            json={"token": "short", "new_password": "NewPass1", "confirm_password": "NewPass1"},
        )

        assert response.status_code == 422
