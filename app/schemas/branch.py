"""Pydantic schemas for Branches."""

from datetime import datetime
from uuid import UUID
from typing import Optional
from pydantic import EmailStr
from app.schemas.common import CamelModel, TimeSlotStr


class BranchCreate(CamelModel):
    """Schema for creating a branch."""
    name: str
    code: str
    address: str
    city: str
    state: str
    pincode: str
    phone: str
    email: Optional[EmailStr] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    opening_time: Optional[TimeSlotStr] = None  # defaults from settings
    closing_time: Optional[TimeSlotStr] = None
    image: Optional[str] = None


class BranchUpdate(CamelModel):
    """Schema for updating a branch (all fields optional)."""
    name: Optional[str] = None
    code: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    opening_time: Optional[TimeSlotStr] = None
    closing_time: Optional[TimeSlotStr] = None
    is_active: Optional[bool] = None
    image: Optional[str] = None


class BranchBrief(CamelModel):
    id: UUID
    name: str
    code: str
    address: str
    city: str
    phone: str


class BranchOut(BranchBrief):
    """Schema for returning branch details."""
    state: str
    pincode: str
    email: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    opening_time: str
    closing_time: str
    image: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
