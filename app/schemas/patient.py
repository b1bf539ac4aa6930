"""Pydantic schemas for admin patient management."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID
from app.schemas.appointment import AppointmentOut
from app.schemas.common import CamelModel


class PatientUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    city: Optional[str] = None
    is_active: Optional[bool] = None


class PatientOut(CamelModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    city: Optional[str] = None
    is_active: bool
    is_verified: bool
    created_at: Optional[datetime] = None
    appointment_count: int = 0


class PatientDetail(PatientOut):
    """Patient with their full appointment history, newest first."""
    appointments: list[AppointmentOut] = []
