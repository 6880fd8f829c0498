"""Staff user management — admin-only, hotel-scoped."""

import pytest
from httpx import AsyncClient


async def _setup(client: AsyncClient, slug: str = "team") -> dict:
    resp = await client.post("/v1/auth/register", json={
        "hotel_name": f"{slug.title()} Suites",
        "email": f"gm@{slug}-suites.com",
        "password": "password1234",
        "phone": "9555555555",
    })
    data = resp.json()
    return {
        "headers": {"Authorization": f"Bearer {data['access_token']}"},
        "hotel_id": data["hotel"]["id"],
        "admin_id": data["user"]["id"],
        "users_url": f"/v1/hotels/{data['hotel']['id']}/users",
    }


async def _add_staff(client: AsyncClient, ctx: dict, email: str) -> dict:
    resp = await client.post(ctx["users_url"], json={
        "email": email, "password": "staffpass123", "name": "Ravi",
    }, headers=ctx["headers"])
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_admin_creates_staff_who_can_log_in(client: AsyncClient):
    ctx = await _setup(client)
    staff = await _add_staff(client, ctx, "ravi@team-suites.com")
    assert staff["role"] == "staff"
    assert staff["hotel_id"] == ctx["hotel_id"]
    assert "password_hash" not in staff

    resp = await client.post("/v1/auth/login", json={
        "email": "ravi@team-suites.com", "password": "staffpass123",
    })
    assert resp.status_code == 200
    assert resp.json()["hotel"]["id"] == ctx["hotel_id"]

    users = (await client.get(ctx["users_url"], headers=ctx["headers"])).json()
    assert {u["email"] for u in users} == {"gm@team-suites.com", "ravi@team-suites.com"}


@pytest.mark.asyncio
async def test_duplicate_staff_email(client: AsyncClient):
    ctx = await _setup(client, "dup")
    await _add_staff(client, ctx, "sam@dup-suites.com")
    resp = await client.post(ctx["users_url"], json={
        "email": "sam@dup-suites.com", "password": "staffpass123",
    }, headers=ctx["headers"])
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_staff_cannot_manage_users(client: AsyncClient):
    ctx = await _setup(client, "ranks")
    await _add_staff(client, ctx, "junior@ranks-suites.com")
    login = (await client.post("/v1/auth/login", json={
        "email": "junior@ranks-suites.com", "password": "staffpass123",
    })).json()
    staff_headers = {"Authorization": f"Bearer {login['access_token']}"}

    resp = await client.post(ctx["users_url"], json={
        "email": "another@ranks-suites.com", "password": "staffpass123",
    }, headers=staff_headers)
    assert resp.status_code == 403

    # Staff still work the request queue
    resp = await client.get(f"/v1/hotels/{ctx['hotel_id']}/requests", headers=staff_headers)
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_deactivated_staff_cannot_log_in(client: AsyncClient):
    ctx = await _setup(client, "exit")
    staff = await _add_staff(client, ctx, "leaver@exit-suites.com")

    resp = await client.delete(f"{ctx['users_url']}/{staff['id']}", headers=ctx["headers"])
    assert resp.status_code == 204

    resp = await client.post("/v1/auth/login", json={
        "email": "leaver@exit-suites.com", "password": "staffpass123",
    })
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_admin_cannot_deactivate_self(client: AsyncClient):
    ctx = await _setup(client, "self")
    resp = await client.delete(f"{ctx['users_url']}/{ctx['admin_id']}", headers=ctx["headers"])
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_update_staff_name_and_password(client: AsyncClient):
    ctx = await _setup(client, "rename")
    staff = await _add_staff(client, ctx, "lee@rename-suites.com")

    resp = await client.patch(f"{ctx['users_url']}/{staff['id']}", json={
        "name": "Lee Park", "password": "newstaffpass1",
    }, headers=ctx["headers"])
    assert resp.status_code == 200
    assert resp.json()["name"] == "Lee Park"

    resp = await client.post("/v1/auth/login", json={
        "email": "lee@rename-suites.com", "password": "newstaffpass1",
    })
    assert resp.status_code == 200
