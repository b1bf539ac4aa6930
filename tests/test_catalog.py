"""Tests for branch and service catalogue endpoints."""

import uuid

import pytest

from app.services.catalog import slugify


def test_slugify():
    assert slugify("Laser Hair Removal") == "laser-hair-removal"
    assert slugify("  CoolSculpting - Fat Freezing! ") == "coolsculpting-fat-freezing"


@pytest.fixture
def branch_payload():
    return {
        "name": "Banjara Hills",
        "code": "HYD-BH-002",
        "address": "Road No. 12, Banjara Hills",
        "city": "Hyderabad",
        "state": "Telangana",
        "pincode": "500034",
        "phone": "+914040123457",
    }


@pytest.mark.asyncio
async def test_create_branch_uses_default_hours(client, branch_payload, admin_headers):
    resp = await client.post("/api/v1/branches", json=branch_payload, headers=admin_headers)

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["openingTime"] == "09:00"
    assert data["closingTime"] == "20:00"
    assert data["isActive"] is True


@pytest.mark.asyncio
async def test_create_branch_duplicate_code_conflicts(client, branch, branch_payload, admin_headers):
    resp = await client.post(
        "/api/v1/branches", json={**branch_payload, "code": branch.code}, headers=admin_headers
    )

    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_create_branch_requires_admin(client, branch_payload, patient_headers):
    resp = await client.post("/api/v1/branches", json=branch_payload, headers=patient_headers)

    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_create_branch_rejects_malformed_hours(client, branch_payload, admin_headers):
    resp = await client.post(
        "/api/v1/branches", json={**branch_payload, "openingTime": "9am"}, headers=admin_headers
    )

    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_branch_with_inverted_hours_has_no_slots(client, branch_payload, admin_headers, tomorrow):
    created = await client.post(
        "/api/v1/branches",
        json={**branch_payload, "openingTime": "18:00", "closingTime": "09:00"},
        headers=admin_headers,
    )
    branch_id = created.json()["data"]["id"]

    resp = await client.get(f"/api/v1/branches/{branch_id}/slots", params={"date": tomorrow.isoformat()})

    assert resp.status_code == 200
    assert resp.json()["data"]["availableSlots"] == []


@pytest.mark.asyncio
async def test_list_branches_hides_inactive(client, db, branch, branch_payload, admin_headers):
    await client.post("/api/v1/branches", json=branch_payload, headers=admin_headers)
    await client.delete(f"/api/v1/branches/{branch.id}", headers=admin_headers)

    public = await client.get("/api/v1/branches")
    assert public.status_code == 200
    assert [b["code"] for b in public.json()["data"]["items"]] == ["HYD-BH-002"]

    everything = await client.get(
        "/api/v1/branches", params={"includeInactive": "true"}, headers=admin_headers
    )
    assert everything.json()["data"]["pagination"]["total"] == 2


@pytest.mark.asyncio
async def test_update_branch_hours_changes_slots(client, branch, admin_headers, tomorrow):
    resp = await client.put(
        f"/api/v1/branches/{branch.id}", json={"closingTime": "10:00"}, headers=admin_headers
    )
    assert resp.status_code == 200

    slots = await client.get(f"/api/v1/branches/{branch.id}/slots", params={"date": tomorrow.isoformat()})
    assert slots.json()["data"]["availableSlots"] == ["09:00", "09:30"]


@pytest.mark.asyncio
async def test_get_unknown_branch_returns_404(client):
    resp = await client.get(f"/api/v1/branches/{uuid.uuid4()}")

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Resource not found"}


@pytest.mark.asyncio
async def test_branch_services(client, branch, service):
    resp = await client.get(f"/api/v1/branches/{branch.id}/services")

    assert resp.status_code == 200
    [item] = resp.json()["data"]
    assert item["slug"] == "hydrafacial"
    assert item["category"]["slug"] == "skin-care"


@pytest.mark.asyncio
async def test_create_service_derives_slug_and_links_branches(client, branch, category, admin_headers):
    resp = await client.post("/api/v1/services", json={
        "name": "Laser Hair Removal",
        "duration": 30,
        "price": 4000,
        "categoryId": str(category.id),
        "branchIds": [str(branch.id)],
    }, headers=admin_headers)

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["slug"] == "laser-hair-removal"
    assert data["category"]["name"] == "Skin Care"

    offered = await client.get(f"/api/v1/branches/{branch.id}/services")
    assert [s["slug"] for s in offered.json()["data"]] == ["laser-hair-removal"]


@pytest.mark.asyncio
async def test_create_service_duplicate_slug_conflicts(client, service, category, admin_headers):
    resp = await client.post("/api/v1/services", json={
        "name": "Hydrafacial",
        "duration": 30,
        "price": 100,
        "categoryId": str(category.id),
    }, headers=admin_headers)

    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_create_service_unknown_category(client, admin_headers):
    resp = await client.post("/api/v1/services", json={
        "name": "Mystery", "duration": 30, "price": 100, "categoryId": str(uuid.uuid4()),
    }, headers=admin_headers)

    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_service_lookup_and_listing(client, service):
    by_slug = await client.get("/api/v1/services/slug/hydrafacial")
    assert by_slug.status_code == 200
    assert by_slug.json()["data"]["id"] == str(service.id)

    by_id = await client.get(f"/api/v1/services/{service.id}")
    assert by_id.json()["data"]["price"] == 6000.0

    listed = await client.get("/api/v1/services", params={"search": "hydra"})
    assert listed.json()["data"]["pagination"]["total"] == 1

    missing = await client.get("/api/v1/services/slug/unknown")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_deactivated_service_is_not_listed(client, service, admin_headers):
    resp = await client.delete(f"/api/v1/services/{service.id}", headers=admin_headers)
    assert resp.status_code == 200

    listed = await client.get("/api/v1/services")
    assert listed.json()["data"]["items"] == []


@pytest.mark.asyncio
async def test_update_service(client, service, admin_headers):
    resp = await client.put(
        f"/api/v1/services/{service.id}",
        json={"price": 5500, "isPopular": True},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["price"] == 5500.0
    assert data["isPopular"] is True


@pytest.mark.asyncio
async def test_replace_service_branches(client, branch, service, admin_headers):
    resp = await client.put(f"/api/v1/services/{service.id}/branches", json={"branchIds": []}, headers=admin_headers)
    assert resp.status_code == 200

    offered = await client.get(f"/api/v1/branches/{branch.id}/services")
    assert offered.json()["data"] == []

    bad = await client.put(
        f"/api/v1/services/{service.id}/branches",
        json={"branchIds": [str(uuid.uuid4())]},
        headers=admin_headers,
    )
    assert bad.status_code == 400


@pytest.mark.asyncio
async def test_categories(client, category, admin_headers):
    created = await client.post(
        "/api/v1/services/categories", json={"name": "Hair Care", "sortOrder": 3}, headers=admin_headers
    )
    assert created.status_code == 201
    assert created.json()["data"]["slug"] == "hair-care"

    listed = await client.get("/api/v1/services/categories")
    assert [c["slug"] for c in listed.json()["data"]] == ["skin-care", "hair-care"]
