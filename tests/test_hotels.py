"""Hotel profile and settings tests."""

import pytest
from httpx import AsyncClient


async def _setup(client: AsyncClient, slug: str = "prefs") -> dict:
    resp = await client.post("/v1/auth/register", json={
        "hotel_name": f"{slug.title()} Heritage",
        "email": f"owner@{slug}-heritage.com",
        "password": "password1234",
        "phone": "9666666666",
        "total_rooms": 12,
    })
    data = resp.json()
    return {
        "headers": {"Authorization": f"Bearer {data['access_token']}"},
        "hotel_id": data["hotel"]["id"],
        "url": f"/v1/hotels/{data['hotel']['id']}",
    }


@pytest.mark.asyncio
async def test_get_hotel(client: AsyncClient):
    ctx = await _setup(client)
    resp = await client.get(ctx["url"], headers=ctx["headers"])
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_rooms"] == 12
    assert data["settings"]["notifications"] == {"sound": True, "email": True}


@pytest.mark.asyncio
async def test_settings_merge_keeps_other_flags(client: AsyncClient):
    ctx = await _setup(client, "merge")
    resp = await client.put(ctx["url"], json={
        "name": "Merge Heritage & Spa",
        "settings": {"services_enabled": {"complaint": False}},
    }, headers=ctx["headers"])
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Merge Heritage & Spa"
    assert data["settings"]["services_enabled"]["complaint"] is False
    assert data["settings"]["services_enabled"]["order_food"] is True
    assert data["settings"]["notifications"]["sound"] is True

    resp = await client.put(ctx["url"], json={
        "settings": {"notifications": {"sound": False}},
    }, headers=ctx["headers"])
    settings = resp.json()["settings"]
    assert settings["notifications"]["sound"] is False
    assert settings["services_enabled"]["complaint"] is False


@pytest.mark.asyncio
async def test_invalid_settings_rejected(client: AsyncClient):
    ctx = await _setup(client, "broken")
    resp = await client.put(ctx["url"], json={
        "settings": {"services_enabled": {"order_food": "sometimes"}},
    }, headers=ctx["headers"])
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_other_hotel_forbidden(client: AsyncClient):
    a = await _setup(client, "mine")
    b = await _setup(client, "theirs")
    resp = await client.get(b["url"], headers=a["headers"])
    assert resp.status_code == 403
    resp = await client.put(b["url"], json={"name": "Hijacked"}, headers=a["headers"])
    assert resp.status_code == 403
