import pytest

from tests.feature.conftest import API


@pytest.mark.asyncio
async def test_health_reports_database(async_client):
    response = await async_client.get(f"{API}/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["env"] == "test"
    assert body["services"]["database"]["status"] == "healthy"
