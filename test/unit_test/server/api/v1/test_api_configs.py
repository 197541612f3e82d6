import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/api-configs"


def _payload(name: str, **overrides) -> dict:
    data = {"name": name, "provider": "openai", "api_key": "sk-1", "model": "gpt-4o-mini"}
    data.update(overrides)
    return data


async def test_create_and_get(client: AsyncClient):
    response = await client.post(BASE, json=_payload("Work", temperature=0.3))
    assert response.status_code == 201
    created = response.json()
    assert created["name"] == "Work"
    assert created["temperature"] == 0.3
    assert created["is_default"] is False

    fetched = await client.get(f"{BASE}/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["id"] == created["id"]


async def test_single_default(client: AsyncClient):
    first = (await client.post(BASE, json=_payload("A", is_default=True))).json()
    second = (await client.post(BASE, json=_payload("B", is_default=True))).json()

    listed = (await client.get(BASE)).json()
    assert [c["name"] for c in listed] == ["B", "A"]
    assert [c["is_default"] for c in listed] == [True, False]

    default = await client.get(f"{BASE}/default")
    assert default.json()["id"] == second["id"]

    await client.put(f"{BASE}/{first['id']}", json={"is_default": True})
    assert (await client.get(f"{BASE}/default")).json()["id"] == first["id"]


async def test_default_missing(client: AsyncClient):
    assert (await client.get(f"{BASE}/default")).status_code == 404


async def test_partial_update_ignores_nulls(client: AsyncClient):
    created = (await client.post(BASE, json=_payload("Work"))).json()
    response = await client.put(f"{BASE}/{created['id']}", json={"model": "gpt-4o", "name": None})
    assert response.status_code == 200
    body = response.json()
    assert body["model"] == "gpt-4o"
    assert body["name"] == "Work"


async def test_invalid_provider_rejected(client: AsyncClient):
    response = await client.post(BASE, json=_payload("X", provider="mistral"))
    assert response.status_code == 422


async def test_delete_rules(client: AsyncClient):
    a = (await client.post(BASE, json=_payload("A"))).json()
    assert (await client.delete(f"{BASE}/{a['id']}")).status_code == 409

    b = (await client.post(BASE, json=_payload("B"))).json()
    await client.post("/api/v1/chats", json={"title": "pinned", "api_config_id": b["id"]})
    conflict = await client.delete(f"{BASE}/{b['id']}")
    assert conflict.status_code == 409
    assert "being used by chats" in conflict.json()["detail"]

    assert (await client.delete(f"{BASE}/{a['id']}")).status_code == 204
    assert (await client.delete(f"{BASE}/{a['id']}")).status_code == 404
