"""Tests for clinic setup, tenant resolution and clinic deletion."""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_stock.core.errors import NoTenant
from clinic_stock.models.clinic import ClinicMember, MemberRole
from clinic_stock.models.user import Profile
from clinic_stock.services.tenancy import resolve_tenant


async def _register(client: AsyncClient, email: str) -> dict:
    resp = await client.post("/v1/auth/register", json={
        "email": email,
        "password": "testpass123",
    })
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


async def _user_id(client: AsyncClient, headers: dict) -> uuid.UUID:
    resp = await client.get("/v1/auth/me", headers=headers)
    return uuid.UUID(resp.json()["user"]["id"])


@pytest.mark.asyncio
async def test_setup_creates_clinic_owner_and_default_categories(client: AsyncClient):
    headers = await _register(client, "owner@setup.com")

    resp = await client.post("/v1/clinics", json={"name": "Maple Clinic"}, headers=headers)
    assert resp.status_code == 201, resp.text
    clinic = resp.json()
    assert clinic["name"] == "Maple Clinic"

    resp = await client.get("/v1/clinics/me", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["clinic"]["id"] == clinic["id"]
    assert resp.json()["role"] == "owner"

    resp = await client.get("/v1/categories", headers=headers)
    names = [c["name"] for c in resp.json()]
    assert names == ["Vaccines", "Topicals", "Growth clinic injectables"]

    resp = await client.get("/v1/auth/me", headers=headers)
    assert resp.json()["current_clinic_id"] == clinic["id"]


@pytest.mark.asyncio
async def test_setup_requires_a_name(client: AsyncClient):
    headers = await _register(client, "noname@setup.com")
    resp = await client.post("/v1/clinics", json={"name": "   "}, headers=headers)
    assert resp.status_code == 422
    assert resp.json()["next"] == "/setup"


@pytest.mark.asyncio
async def test_setup_twice_rejected(client: AsyncClient):
    headers = await _register(client, "twice@setup.com")
    resp = await client.post("/v1/clinics", json={"name": "First"}, headers=headers)
    assert resp.status_code == 201
    resp = await client.post("/v1/clinics", json={"name": "Second"}, headers=headers)
    assert resp.status_code == 409
    assert resp.json()["next"] == "/dashboard"
    assert resp.json()["detail"] == "You already belong to a clinic"


@pytest.mark.asyncio
async def test_resolve_tenant_without_membership(client: AsyncClient, session: AsyncSession):
    headers = await _register(client, "nobody@setup.com")
    user_id = await _user_id(client, headers)
    with pytest.raises(NoTenant):
        await resolve_tenant(session, user_id)


@pytest.mark.asyncio
async def test_resolve_tenant_adopts_first_membership(client: AsyncClient, session: AsyncSession):
    owner = await _register(client, "owner@adopt.com")
    resp = await client.post("/v1/clinics", json={"name": "Adopt"}, headers=owner)
    clinic_id = uuid.UUID(resp.json()["id"])

    staff = await _register(client, "staff@adopt.com")
    staff_id = await _user_id(client, staff)
    session.add(ClinicMember(clinic_id=clinic_id, user_id=staff_id, role=MemberRole.STAFF))
    await session.commit()

    assert await session.get(Profile, staff_id) is None
    assert await resolve_tenant(session, staff_id) == clinic_id

    profile = await session.get(Profile, staff_id)
    assert profile.current_clinic_id == clinic_id
    # Idempotent
    assert await resolve_tenant(session, staff_id) == clinic_id


@pytest.mark.asyncio
async def test_delete_clinic(client: AsyncClient):
    headers = await _register(client, "owner@delete.com")
    await client.post("/v1/clinics", json={"name": "Doomed"}, headers=headers)

    resp = await client.delete("/v1/clinics/me", params={"confirm": "wrong"}, headers=headers)
    assert resp.status_code == 422

    resp = await client.delete("/v1/clinics/me", params={"confirm": "delete"}, headers=headers)
    assert resp.status_code == 204

    resp = await client.get("/v1/dashboard", headers=headers)
    assert resp.status_code == 409
    assert resp.json()["next"] == "/setup"

    # The owner may set up a fresh clinic afterwards
    resp = await client.post("/v1/clinics", json={"name": "Phoenix"}, headers=headers)
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_staff_cannot_delete_clinic(client: AsyncClient):
    owner = await _register(client, "owner@staffdel.com")
    await client.post("/v1/clinics", json={"name": "Kept"}, headers=owner)
    resp = await client.post("/v1/members/invitations", headers=owner)
    token = resp.json()["token"]

    staff = await _register(client, "staff@staffdel.com")
    resp = await client.post(f"/v1/invitations/{token}/accept", headers=staff)
    assert resp.status_code == 200

    resp = await client.delete("/v1/clinics/me", params={"confirm": "delete"}, headers=staff)
    assert resp.status_code == 403
    assert resp.json()["next"] == "/dashboard"
