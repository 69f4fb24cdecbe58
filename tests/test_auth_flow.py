"""End-to-end auth flow: register → login → me → account deletion."""

import pytest
from httpx import AsyncClient


async def _register(client: AsyncClient, email: str, password: str = "testpass123") -> dict:
    resp = await client.post("/v1/auth/register", json={
        "email": email,
        "password": password,
        "display_name": "Dr. Test",
    })
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.mark.asyncio
async def test_register_login_and_me(client: AsyncClient):
    headers = await _register(client, "nurse@auth-flow.com")

    resp = await client.get("/v1/auth/me", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["user"]["email"] == "nurse@auth-flow.com"
    assert data["current_clinic_id"] is None

    resp = await client.post("/v1/auth/login", json={
        "email": "nurse@auth-flow.com",
        "password": "testpass123",
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"
    assert "." in body["access_token"]


@pytest.mark.asyncio
async def test_duplicate_email_rejected(client: AsyncClient):
    await _register(client, "dup@auth-flow.com")
    resp = await client.post("/v1/auth/register", json={
        "email": "dup@auth-flow.com",
        "password": "testpass123",
    })
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient):
    await _register(client, "wrong@auth-flow.com")
    resp = await client.post("/v1/auth/login", json={
        "email": "wrong@auth-flow.com",
        "password": "not-the-password",
    })
    assert resp.status_code == 401
    assert "Invalid" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_invalid_token_rejected(client: AsyncClient):
    resp = await client.get(
        "/v1/auth/me",
        headers={"Authorization": "Bearer totally.fake.token"},
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_missing_auth_rejected(client: AsyncClient):
    """No Authorization header → 401 or 403 depending on FastAPI version."""
    resp = await client.get("/v1/auth/me")
    assert resp.status_code in (401, 403)


@pytest.mark.asyncio
async def test_delete_account_requires_confirmation(client: AsyncClient):
    headers = await _register(client, "confirm@auth-flow.com")
    resp = await client.delete("/v1/auth/me", params={"confirm": "nope"}, headers=headers)
    assert resp.status_code == 422
    assert resp.json()["next"] == "/settings"


@pytest.mark.asyncio
async def test_delete_account(client: AsyncClient):
    headers = await _register(client, "leaving@auth-flow.com")

    resp = await client.delete("/v1/auth/me", params={"confirm": "withdraw"}, headers=headers)
    assert resp.status_code == 204

    # Token no longer works and the email cannot log in
    resp = await client.get("/v1/auth/me", headers=headers)
    assert resp.status_code == 401
    resp = await client.post("/v1/auth/login", json={
        "email": "leaving@auth-flow.com",
        "password": "testpass123",
    })
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_delete_account_refused_while_owning_a_clinic(client: AsyncClient):
    headers = await _register(client, "owner@auth-flow.com")
    resp = await client.post("/v1/clinics", json={"name": "Sunrise Pediatrics"}, headers=headers)
    assert resp.status_code == 201

    resp = await client.delete("/v1/auth/me", params={"confirm": "withdraw"}, headers=headers)
    assert resp.status_code == 422
    assert "clinic" in resp.json()["detail"]
