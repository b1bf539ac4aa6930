"""Pydantic schemas for Appointments."""

from datetime import datetime, date
from uuid import UUID
from pydantic import EmailStr, Field
from typing import Optional
from app.models.appointment import AppointmentStatus
from app.schemas.common import CamelModel, TimeSlotStr
from app.schemas.branch import BranchBrief
from app.schemas.service import ServiceBrief


class AppointmentCreate(CamelModel):
    """Schema for booking an appointment (guest or logged-in patient)."""
    appointment_date: date
    time_slot: TimeSlotStr
    patient_name: str = Field(min_length=1)
    patient_phone: str = Field(min_length=1)
    patient_email: Optional[EmailStr] = None
    service_id: UUID
    branch_id: UUID
    notes: Optional[str] = None


class AppointmentReschedule(CamelModel):
    appointment_date: date
    time_slot: TimeSlotStr


class AppointmentCancel(CamelModel):
    cancel_reason: Optional[str] = None


class AppointmentStatusUpdate(CamelModel):
    status: AppointmentStatus
    admin_notes: Optional[str] = None


class AppointmentOut(CamelModel):
    """Schema for returning appointment details."""
    id: UUID
    appointment_date: date
    time_slot: str
    status: AppointmentStatus
    notes: Optional[str] = None
    patient_name: str
    patient_phone: str
    patient_email: Optional[str] = None
    user_id: Optional[UUID] = None
    service_id: UUID
    branch_id: UUID
    admin_notes: Optional[str] = None
    cancel_reason: Optional[str] = None
    service: Optional[ServiceBrief] = None
    branch: Optional[BranchBrief] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AvailableSlotsOut(CamelModel):
    """Schema for available slots response."""
    date: date
    available_slots: list[str]  # ["09:00", "09:30", ...]
    total_slots: int
