"""Leads endpoints for lead capture, management and conversion.

- POST /api/v1/leads                        → Create new lead (public)
- GET  /api/v1/leads                        → List leads (admin)
- PUT  /api/v1/leads/{id}                   → Update lead (admin)
- DELETE /api/v1/leads/{id}                 → Delete lead (admin)
- PUT  /api/v1/leads/{id}/convert           → Book an appointment for the lead (admin)
- POST /api/v1/leads/contact                → Contact form submission (public)
- GET  /api/v1/leads/contact/messages       → List contact messages (admin)
- PUT  /api/v1/leads/contact/{id}/read      → Mark a contact message read (admin)
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_user_optional, require_admin
from app.models.lead import LeadSource, LeadStatus
from app.models.user import User
from app.schemas.appointment import AppointmentOut
from app.schemas.common import ApiResponse, Page, PageParams
from app.schemas.lead import (
    ContactMessageCreate,
    ContactMessageOut,
    LeadConvert,
    LeadCreate,
    LeadOut,
    LeadUpdate,
)
from app.services import leads as lead_service

router = APIRouter()


@router.post("", response_model=ApiResponse[LeadOut], status_code=201)
async def create_lead(
    data: LeadCreate,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    lead = await lead_service.create_lead(db, data, current_user)
    return ApiResponse(message="Thank you! We will contact you shortly.", data=LeadOut.model_validate(lead))


@router.get("", response_model=ApiResponse[Page[LeadOut]])
async def list_leads(
    params: PageParams = Depends(),
    status: Optional[LeadStatus] = None,
    source: Optional[LeadSource] = None,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    search: Optional[str] = None,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    leads, total = await lead_service.list_leads(db, params, status, source, start_date, end_date, search)
    return ApiResponse(data=Page(
        items=[LeadOut.model_validate(lead) for lead in leads],
        pagination=params.meta(total),
    ))


@router.post("/contact", response_model=ApiResponse[ContactMessageOut], status_code=201)
async def submit_contact_message(data: ContactMessageCreate, db: AsyncSession = Depends(get_db)):
    contact_message = await lead_service.create_contact_message(db, data)
    return ApiResponse(
        message="Message sent successfully",
        data=ContactMessageOut.model_validate(contact_message),
    )


@router.get("/contact/messages", response_model=ApiResponse[Page[ContactMessageOut]])
async def list_contact_messages(
    params: PageParams = Depends(),
    is_read: Optional[bool] = Query(None, alias="isRead"),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    messages, total = await lead_service.list_contact_messages(db, params, is_read)
    return ApiResponse(data=Page(
        items=[ContactMessageOut.model_validate(m) for m in messages],
        pagination=params.meta(total),
    ))


@router.put("/contact/{message_id}/read", response_model=ApiResponse[ContactMessageOut])
async def mark_contact_message_read(
    message_id: UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    contact_message = await lead_service.mark_message_read(db, message_id)
    return ApiResponse(
        message="Resource updated successfully",
        data=ContactMessageOut.model_validate(contact_message),
    )


@router.put("/{lead_id}", response_model=ApiResponse[LeadOut])
async def update_lead(
    lead_id: UUID,
    data: LeadUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    lead = await lead_service.update_lead(db, lead_id, data)
    return ApiResponse(message="Resource updated successfully", data=LeadOut.model_validate(lead))


@router.delete("/{lead_id}", response_model=ApiResponse[None])
async def delete_lead(
    lead_id: UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await lead_service.delete_lead(db, lead_id)
    return ApiResponse(message="Lead deleted successfully")


@router.put("/{lead_id}/convert", response_model=ApiResponse[AppointmentOut])
async def convert_lead(
    lead_id: UUID,
    data: LeadConvert,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create an appointment from a lead and mark the lead CONVERTED."""
    appointment = await lead_service.convert_lead(db, lead_id, data)
    return ApiResponse(
        message="Lead converted to appointment successfully",
        data=AppointmentOut.model_validate(appointment),
    )
