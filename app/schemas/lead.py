"""Pydantic schemas for Leads and contact messages."""

from datetime import datetime, date
from uuid import UUID
from pydantic import EmailStr, Field
from typing import Optional
from app.models.lead import LeadSource, LeadStatus
from app.schemas.common import CamelModel, TimeSlotStr


class LeadCreate(CamelModel):
    """Schema for creating a lead."""
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: Optional[EmailStr] = None
    message: Optional[str] = None
    service_interest: Optional[str] = None
    source: LeadSource = LeadSource.WEBSITE_FORM


class LeadUpdate(CamelModel):
    """Schema for updating a lead (admin)."""
    status: Optional[LeadStatus] = None
    assigned_to: Optional[str] = None
    notes: Optional[str] = None
    follow_up_date: Optional[datetime] = None
    service_interest: Optional[str] = None


class LeadConvert(CamelModel):
    """Target booking for a lead conversion."""
    service_id: UUID
    branch_id: UUID
    appointment_date: date
    time_slot: TimeSlotStr


class LeadOut(CamelModel):
    """Schema for returning lead details."""
    id: UUID
    name: str
    phone: str
    email: Optional[str] = None
    message: Optional[str] = None
    service_interest: Optional[str] = None
    source: LeadSource
    status: LeadStatus
    assigned_to: Optional[str] = None
    notes: Optional[str] = None
    follow_up_date: Optional[datetime] = None
    user_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime


class ContactMessageCreate(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    subject: str = Field(min_length=1)
    message: str = Field(min_length=1)


class ContactMessageOut(CamelModel):
    id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    subject: str
    message: str
    is_read: bool
    created_at: datetime
