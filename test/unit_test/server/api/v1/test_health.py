import pytest
from httpx import AsyncClient

from plancraft_ai.server.core import constant

# Mark all tests in this module as async
pytestmark = pytest.mark.asyncio


async def test_health_check(client: AsyncClient):
    response = await client.get("http://localhost/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_version(client: AsyncClient):
    response = await client.get("http://localhost/version")
    assert response.status_code == 200
    assert response.json() == {"version": constant.VERSION, "schema_version": "v1"}
