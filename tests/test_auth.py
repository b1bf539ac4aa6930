"""Tests for authentication endpoints."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from app.models.user import User, UserRole
from app.services.auth import create_access_token, decode_access_token, hash_password, verify_password


def test_password_hashing():
    """Password hashing should be one-way and verifiable."""
    password = "supersecret123"
    hashed = hash_password(password)

    assert hashed != password
    assert verify_password(password, hashed) is True
    assert verify_password("wrongpassword", hashed) is False


def test_token_round_trip():
    token = create_access_token({"sub": "abc", "role": "PATIENT"})
    payload = decode_access_token(token)

    assert payload["sub"] == "abc"
    assert payload["role"] == "PATIENT"
    assert decode_access_token(token + "tampered") is None


@pytest.mark.asyncio
async def test_register_creates_patient_and_returns_token(client, db, mock_email):
    resp = await client.post("/api/v1/auth/register", json={
        "email": "ananya@example.com",
        "password": "testpass123",
        "firstName": "Ananya",
        "lastName": "Reddy",
        "phone": "+919123456780",
    })

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["tokenType"] == "bearer"
    assert data["accessToken"]
    assert data["user"]["role"] == "PATIENT"
    assert data["user"]["firstName"] == "Ananya"
    assert "hashedPassword" not in data["user"]

    user = (await db.execute(select(User).where(User.email == "ananya@example.com"))).scalar_one()
    assert user.role == UserRole.PATIENT
    mock_email.assert_awaited_once()


@pytest.mark.asyncio
async def test_register_duplicate_email_fails(client):
    user_data = {"email": "dup@example.com", "password": "testpass123", "firstName": "A", "lastName": "B"}

    assert (await client.post("/api/v1/auth/register", json=user_data)).status_code == 201
    resp = await client.post("/api/v1/auth/register", json=user_data)

    assert resp.status_code == 409
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_register_duplicate_phone_fails(client, patient):
    resp = await client.post("/api/v1/auth/register", json={
        "email": "new@example.com",
        "password": "testpass123",
        "firstName": "New",
        "lastName": "Patient",
        "phone": patient.phone,
    })

    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_register_short_password_is_validation_error(client):
    resp = await client.post("/api/v1/auth/register", json={
        "email": "short@example.com", "password": "short", "firstName": "A", "lastName": "B",
    })

    assert resp.status_code == 422
    assert any(error["field"] == "password" for error in resp.json()["errors"])


@pytest.mark.asyncio
async def test_login_and_me(client, patient):
    resp = await client.post("/api/v1/auth/login", json={"email": "patient@example.com", "password": "testpass123"})

    assert resp.status_code == 200
    token = resp.json()["data"]["accessToken"]

    me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "patient@example.com"


@pytest.mark.asyncio
async def test_login_wrong_password(client, patient):
    resp = await client.post("/api/v1/auth/login", json={"email": "patient@example.com", "password": "nope12345"})

    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Incorrect email or password"}


@pytest.mark.asyncio
async def test_login_inactive_user_is_forbidden(client, db, patient):
    patient.is_active = False
    await db.commit()

    resp = await client.post("/api/v1/auth/login", json={"email": "patient@example.com", "password": "testpass123"})

    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_me_rejects_missing_and_invalid_tokens(client):
    assert (await client.get("/api/v1/auth/me")).status_code == 401
    resp = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_public_endpoint_treats_invalid_token_as_anonymous(client, booking_payload):
    resp = await client.post(
        "/api/v1/appointments", json=booking_payload, headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert resp.status_code == 201
    assert resp.json()["data"]["userId"] is None


async def _fetch_user(db, email: str) -> User:
    result = await db.execute(
        select(User).where(User.email == email).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def _login(client, email: str, password: str):
    return await client.post("/api/v1/auth/login", json={"email": email, "password": password})


@pytest.mark.asyncio
async def test_update_profile(client, patient, patient_headers):
    resp = await client.put("/api/v1/auth/me", json={
        "firstName": "Ananya",
        "city": "Hyderabad",
        "pincode": "500033",
    }, headers=patient_headers)

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["firstName"] == "Ananya"
    assert data["lastName"] == "Patient"
    assert data["city"] == "Hyderabad"
    assert data["pincode"] == "500033"


@pytest.mark.asyncio
async def test_update_profile_phone_taken_by_other_user(client, patient, other_patient, patient_headers):
    resp = await client.put("/api/v1/auth/me", json={"phone": other_patient.phone}, headers=patient_headers)

    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_update_profile_requires_authentication(client):
    assert (await client.put("/api/v1/auth/me", json={"city": "Pune"})).status_code == 401


@pytest.mark.asyncio
async def test_change_password(client, patient, patient_headers):
    resp = await client.put("/api/v1/auth/change-password", json={
        "currentPassword": "testpass123",
        "newPassword": "newpassword123",
    }, headers=patient_headers)

    assert resp.status_code == 200
    assert resp.json()["message"] == "Password changed successfully"
    assert (await _login(client, "patient@example.com", "testpass123")).status_code == 401
    assert (await _login(client, "patient@example.com", "newpassword123")).status_code == 200


@pytest.mark.asyncio
async def test_change_password_rejects_wrong_current_password(client, patient, patient_headers):
    resp = await client.put("/api/v1/auth/change-password", json={
        "currentPassword": "wrongpass123",
        "newPassword": "newpassword123",
    }, headers=patient_headers)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Current password is incorrect"
    assert (await _login(client, "patient@example.com", "testpass123")).status_code == 200


@pytest.mark.asyncio
async def test_forgot_password_emails_reset_link(client, db, patient, mock_email):
    resp = await client.post("/api/v1/auth/forgot-password", json={"email": "patient@example.com"})

    assert resp.status_code == 200
    user = await _fetch_user(db, "patient@example.com")
    assert user.reset_token is not None
    assert user.reset_expires > datetime.utcnow()
    mock_email.assert_awaited_once()
    assert mock_email.await_args.args[0] == "patient@example.com"
    assert f"token={user.reset_token}" in mock_email.await_args.args[2]


@pytest.mark.asyncio
async def test_forgot_password_unknown_email_looks_the_same(client, mock_email):
    resp = await client.post("/api/v1/auth/forgot-password", json={"email": "nobody@example.com"})

    assert resp.status_code == 200
    assert resp.json()["message"] == "If the email exists, a password reset link has been sent"
    mock_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_reset_password_changes_password_once(client, db, patient):
    await client.post("/api/v1/auth/forgot-password", json={"email": "patient@example.com"})
    token = (await _fetch_user(db, "patient@example.com")).reset_token

    resp = await client.post("/api/v1/auth/reset-password", json={"token": token, "newPassword": "newpassword123"})

    assert resp.status_code == 200
    assert (await _login(client, "patient@example.com", "testpass123")).status_code == 401
    assert (await _login(client, "patient@example.com", "newpassword123")).status_code == 200

    reused = await client.post("/api/v1/auth/reset-password", json={"token": token, "newPassword": "another12345"})
    assert reused.status_code == 400


@pytest.mark.asyncio
async def test_reset_password_rejects_expired_token(client, db, patient):
    patient.reset_token = "expired-token"
    patient.reset_expires = datetime.utcnow() - timedelta(minutes=1)
    await db.commit()

    resp = await client.post(
        "/api/v1/auth/reset-password", json={"token": "expired-token", "newPassword": "newpassword123"}
    )

    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid or expired reset token"


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
