"""Room management tests — tokens, QR codes, scoping."""

import pytest
from httpx import AsyncClient


async def _setup(client: AsyncClient, slug: str) -> dict:
    resp = await client.post("/v1/auth/register", json={
        "hotel_name": f"{slug} Inn",
        "email": f"admin@{slug}-inn.com",
        "password": "password1234",
        "phone": "9000000000",
    })
    assert resp.status_code == 201
    data = resp.json()
    return {
        "headers": {"Authorization": f"Bearer {data['access_token']}"},
        "hotel_id": data["hotel"]["id"],
    }


@pytest.mark.asyncio
async def test_create_room_generates_token_and_qr(client: AsyncClient):
    ctx = await _setup(client, "qr")
    resp = await client.post(
        f"/v1/hotels/{ctx['hotel_id']}/rooms",
        json={"number": "101"},
        headers=ctx["headers"],
    )
    assert resp.status_code == 201, resp.text
    room = resp.json()
    assert room["number"] == "101"
    assert room["name"] == "Room 101"
    assert len(room["access_token"]) >= 16
    assert room["access_token"] != room["id"]
    assert room["qr_code"].startswith("data:image/png;base64,")
    assert room["guest_url"] == (
        f"http://portal.test/guest/{ctx['hotel_id']}/{room['access_token']}"
    )


@pytest.mark.asyncio
async def test_access_tokens_are_unique(client: AsyncClient):
    ctx = await _setup(client, "unique")
    tokens = set()
    for number in ("1", "2", "3"):
        resp = await client.post(
            f"/v1/hotels/{ctx['hotel_id']}/rooms",
            json={"number": number},
            headers=ctx["headers"],
        )
        tokens.add(resp.json()["access_token"])
    assert len(tokens) == 3


@pytest.mark.asyncio
async def test_duplicate_room_number_rejected(client: AsyncClient):
    ctx = await _setup(client, "dupe")
    url = f"/v1/hotels/{ctx['hotel_id']}/rooms"
    assert (await client.post(url, json={"number": "7"}, headers=ctx["headers"])).status_code == 201
    resp = await client.post(url, json={"number": "7"}, headers=ctx["headers"])
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_same_number_allowed_in_other_hotel(client: AsyncClient):
    a = await _setup(client, "north")
    b = await _setup(client, "south")
    for ctx in (a, b):
        resp = await client.post(
            f"/v1/hotels/{ctx['hotel_id']}/rooms",
            json={"number": "12"},
            headers=ctx["headers"],
        )
        assert resp.status_code == 201


@pytest.mark.asyncio
async def test_list_and_update_room(client: AsyncClient):
    ctx = await _setup(client, "update")
    url = f"/v1/hotels/{ctx['hotel_id']}/rooms"
    room = (await client.post(url, json={"number": "5", "name": "Garden"}, headers=ctx["headers"])).json()

    resp = await client.put(f"{url}/{room['id']}", json={"name": "Garden Suite"}, headers=ctx["headers"])
    assert resp.status_code == 200
    assert resp.json()["name"] == "Garden Suite"
    # The guest token never changes on update
    assert resp.json()["access_token"] == room["access_token"]

    resp = await client.get(url, headers=ctx["headers"])
    assert [r["name"] for r in resp.json()] == ["Garden Suite"]


@pytest.mark.asyncio
async def test_deleted_room_stops_resolving(client: AsyncClient):
    ctx = await _setup(client, "gone")
    url = f"/v1/hotels/{ctx['hotel_id']}/rooms"
    room = (await client.post(url, json={"number": "9"}, headers=ctx["headers"])).json()

    portal = f"/v1/guest/{ctx['hotel_id']}/{room['access_token']}"
    assert (await client.get(portal)).status_code == 200

    resp = await client.delete(f"{url}/{room['id']}", headers=ctx["headers"])
    assert resp.status_code == 204

    assert (await client.get(portal)).status_code == 404


@pytest.mark.asyncio
async def test_room_of_other_hotel_not_found(client: AsyncClient):
    a = await _setup(client, "east")
    b = await _setup(client, "west")
    room = (await client.post(
        f"/v1/hotels/{a['hotel_id']}/rooms", json={"number": "1"}, headers=a["headers"],
    )).json()

    resp = await client.put(
        f"/v1/hotels/{b['hotel_id']}/rooms/{room['id']}",
        json={"name": "Stolen"},
        headers=b["headers"],
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_deleted_room_number_can_be_created_again(client: AsyncClient):
    ctx = await _setup(client, "reuse")
    url = f"/v1/hotels/{ctx['hotel_id']}/rooms"
    old = (await client.post(url, json={"number": "101"}, headers=ctx["headers"])).json()
    assert (await client.delete(f"{url}/{old['id']}", headers=ctx["headers"])).status_code == 204

    resp = await client.post(url, json={"number": "101", "name": "Corner"}, headers=ctx["headers"])
    assert resp.status_code == 201, resp.text
    room = resp.json()
    assert room["id"] == old["id"]
    assert room["is_active"] is True
    assert room["name"] == "Corner"
    assert room["access_token"] != old["access_token"]

    # Printed QR codes of the deleted room stay dead
    assert (await client.get(f"/v1/guest/{ctx['hotel_id']}/{old['access_token']}")).status_code == 404
    assert (await client.get(f"/v1/guest/{ctx['hotel_id']}/{room['access_token']}")).status_code == 200

    resp = await client.post(url, json={"number": "101"}, headers=ctx["headers"])
    assert resp.status_code == 409
