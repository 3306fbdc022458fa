import pytest

from tests.factories import strong_password

API = "/api/v1"


@pytest.fixture
def registration_payload():
    return {
        "email": "alice@example.com",
        "password": "Passw0rd",
        "first_name": "Alice",
        "last_name": "Liddell",
        "date_of_birth": "1990-05-15",
    }


@pytest.fixture
def new_password():
    return strong_password()


@pytest.fixture
async def registered(async_client, registration_payload):
    """Registers Alice and returns the response ``data``."""
    response = await async_client.post(f"{API}/auth/register", json=registration_payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def auth_headers(registered):
    return {"Authorization": f"Bearer {registered['token']['access_token']}"}
