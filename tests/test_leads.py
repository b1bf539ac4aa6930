"""Tests for lead capture, management, conversion and contact messages."""

import uuid

import pytest
from sqlalchemy import func, select

from app.models.appointment import Appointment, AppointmentStatus
from app.models.lead import ContactMessage, Lead, LeadStatus
from app.models.service import Service


@pytest.fixture
def lead_payload():
    return {
        "name": "Lakshmi Nair",
        "phone": "+919123456782",
        "email": "lakshmi@example.com",
        "message": "Interested in a facial before my wedding",
        "serviceInterest": "Hydrafacial",
        "source": "CALLBACK_REQUEST",
    }


@pytest.fixture
def convert_payload(branch, service, tomorrow):
    return {
        "serviceId": str(service.id),
        "branchId": str(branch.id),
        "appointmentDate": tomorrow.isoformat(),
        "timeSlot": "10:00",
    }


async def _create_lead(client, payload) -> str:
    resp = await client.post("/api/v1/leads", json=payload)
    assert resp.status_code == 201
    return resp.json()["data"]["id"]


async def _count(db, column) -> int:
    return (await db.execute(select(func.count(column)))).scalar()


@pytest.mark.asyncio
async def test_create_lead_is_public(client, lead_payload):
    resp = await client.post("/api/v1/leads", json=lead_payload)

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["status"] == "NEW"
    assert data["source"] == "CALLBACK_REQUEST"
    assert data["serviceInterest"] == "Hydrafacial"


@pytest.mark.asyncio
async def test_create_lead_defaults_source(client):
    resp = await client.post("/api/v1/leads", json={"name": "Rohan", "phone": "+919123456783"})

    assert resp.status_code == 201
    assert resp.json()["data"]["source"] == "WEBSITE_FORM"


@pytest.mark.asyncio
async def test_lead_from_logged_in_patient_is_linked(client, lead_payload, patient, patient_headers):
    resp = await client.post("/api/v1/leads", json=lead_payload, headers=patient_headers)

    assert resp.json()["data"]["userId"] == str(patient.id)


@pytest.mark.asyncio
async def test_convert_lead_creates_one_appointment(client, db, lead_payload, convert_payload, admin_headers):
    lead_id = await _create_lead(client, lead_payload)

    resp = await client.put(f"/api/v1/leads/{lead_id}/convert", json=convert_payload, headers=admin_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Lead converted to appointment successfully"
    appointment = body["data"]
    assert appointment["status"] == "PENDING"
    assert appointment["patientName"] == "Lakshmi Nair"
    assert appointment["patientPhone"] == "+919123456782"
    assert appointment["patientEmail"] == "lakshmi@example.com"
    assert appointment["timeSlot"] == "10:00"
    assert appointment["notes"] == (
        "Converted from lead. Original message: Interested in a facial before my wedding"
    )

    assert await _count(db, Appointment.id) == 1
    lead = (
        await db.execute(
            select(Lead).where(Lead.id == uuid.UUID(lead_id)).execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert lead.status == LeadStatus.CONVERTED


@pytest.mark.asyncio
async def test_convert_lead_without_message_notes_na(client, convert_payload, admin_headers):
    lead_id = await _create_lead(client, {"name": "Rohan", "phone": "+919123456783"})

    resp = await client.put(f"/api/v1/leads/{lead_id}/convert", json=convert_payload, headers=admin_headers)

    assert resp.json()["data"]["notes"] == "Converted from lead. Original message: N/A"


@pytest.mark.asyncio
async def test_convert_unknown_lead_returns_404_and_creates_nothing(client, db, convert_payload, admin_headers):
    resp = await client.put(f"/api/v1/leads/{uuid.uuid4()}/convert", json=convert_payload, headers=admin_headers)

    assert resp.status_code == 404
    assert await _count(db, Appointment.id) == 0


@pytest.mark.asyncio
async def test_convert_into_taken_slot_leaves_lead_unconverted(
    client, db, lead_payload, convert_payload, branch, service, tomorrow, admin_headers
):
    db.add(Appointment(
        appointment_date=tomorrow,
        time_slot="10:00",
        status=AppointmentStatus.CONFIRMED,
        patient_name="Someone Else",
        patient_phone="+919000000000",
        service_id=service.id,
        branch_id=branch.id,
    ))
    await db.commit()
    lead_id = await _create_lead(client, lead_payload)

    resp = await client.put(f"/api/v1/leads/{lead_id}/convert", json=convert_payload, headers=admin_headers)

    assert resp.status_code == 409
    assert await _count(db, Appointment.id) == 1
    lead = (
        await db.execute(
            select(Lead).where(Lead.id == uuid.UUID(lead_id)).execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert lead.status == LeadStatus.NEW


@pytest.mark.asyncio
async def test_create_lead_requires_name_and_phone(client, db):
    resp = await client.post("/api/v1/leads", json={"name": "", "phone": ""})

    assert resp.status_code == 422
    fields = {error["field"] for error in resp.json()["errors"]}
    assert {"name", "phone"} <= fields
    assert await _count(db, Lead.id) == 0


@pytest.mark.asyncio
async def test_convert_to_service_not_offered_at_branch_is_rejected(
    client, db, lead_payload, convert_payload, category, admin_headers
):
    unlinked = Service(
        name="Chemical Peel",
        slug="chemical-peel",
        duration=30,
        price=3500.0,
        category_id=category.id,
    )
    db.add(unlinked)
    await db.commit()
    lead_id = await _create_lead(client, lead_payload)

    resp = await client.put(
        f"/api/v1/leads/{lead_id}/convert",
        json={**convert_payload, "serviceId": str(unlinked.id)},
        headers=admin_headers,
    )

    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid service or branch"
    assert await _count(db, Appointment.id) == 0


@pytest.mark.asyncio
async def test_convert_twice_is_rejected(client, db, lead_payload, convert_payload, admin_headers):
    lead_id = await _create_lead(client, lead_payload)
    await client.put(f"/api/v1/leads/{lead_id}/convert", json=convert_payload, headers=admin_headers)

    resp = await client.put(
        f"/api/v1/leads/{lead_id}/convert",
        json={**convert_payload, "timeSlot": "10:30"},
        headers=admin_headers,
    )

    assert resp.status_code == 400
    assert await _count(db, Appointment.id) == 1


@pytest.mark.asyncio
async def test_convert_requires_admin(client, lead_payload, convert_payload, patient_headers):
    lead_id = await _create_lead(client, lead_payload)

    resp = await client.put(f"/api/v1/leads/{lead_id}/convert", json=convert_payload, headers=patient_headers)

    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_list_and_filter_leads(client, lead_payload, admin_headers):
    await _create_lead(client, lead_payload)
    await _create_lead(client, {"name": "Sneha Patel", "phone": "+919123456784", "source": "WALK_IN"})

    resp = await client.get("/api/v1/leads", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["pagination"]["total"] == 2

    walk_ins = await client.get("/api/v1/leads", params={"source": "WALK_IN"}, headers=admin_headers)
    items = walk_ins.json()["data"]["items"]
    assert [lead["name"] for lead in items] == ["Sneha Patel"]

    searched = await client.get("/api/v1/leads", params={"search": "lakshmi"}, headers=admin_headers)
    assert searched.json()["data"]["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_update_and_delete_lead(client, db, lead_payload, admin_headers):
    lead_id = await _create_lead(client, lead_payload)

    updated = await client.put(
        f"/api/v1/leads/{lead_id}",
        json={"status": "CONTACTED", "assignedTo": "Priya", "notes": "Call back Monday"},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["status"] == "CONTACTED"
    assert updated.json()["data"]["assignedTo"] == "Priya"

    deleted = await client.delete(f"/api/v1/leads/{lead_id}", headers=admin_headers)
    assert deleted.status_code == 200
    assert await _count(db, Lead.id) == 0


@pytest.mark.asyncio
async def test_contact_message_flow(client, db, admin_headers):
    resp = await client.post("/api/v1/leads/contact", json={
        "name": "Vikram Singh",
        "email": "vikram@example.com",
        "subject": "Parking",
        "message": "Is there parking at the Jubilee Hills branch?",
    })
    assert resp.status_code == 201
    message_id = resp.json()["data"]["id"]
    assert resp.json()["data"]["isRead"] is False

    unread = await client.get("/api/v1/leads/contact/messages", params={"isRead": "false"}, headers=admin_headers)
    assert unread.json()["data"]["pagination"]["total"] == 1

    marked = await client.put(f"/api/v1/leads/contact/{message_id}/read", headers=admin_headers)
    assert marked.status_code == 200
    assert marked.json()["data"]["isRead"] is True

    unread = await client.get("/api/v1/leads/contact/messages", params={"isRead": "false"}, headers=admin_headers)
    assert unread.json()["data"]["pagination"]["total"] == 0
    assert await _count(db, ContactMessage.id) == 1


@pytest.mark.asyncio
async def test_contact_message_requires_valid_email(client):
    resp = await client.post("/api/v1/leads/contact", json={
        "name": "Vikram", "email": "not-an-email", "subject": "Hi", "message": "Hello",
    })

    assert resp.status_code == 422
