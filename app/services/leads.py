"""Lead capture, management and conversion into appointments."""

import logging
from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestError, NotFoundError
from app.models.appointment import Appointment
from app.models.lead import ContactMessage, Lead, LeadSource, LeadStatus
from app.models.user import User
from app.schemas.common import PageParams
from app.schemas.lead import ContactMessageCreate, LeadConvert, LeadCreate, LeadUpdate
from app.services.booking import (
    commit_or_conflict,
    get_appointment,
    load_booking_targets,
    send_confirmation,
    stage_appointment,
)

logger = logging.getLogger(__name__)


async def get_lead(db: AsyncSession, lead_id: UUID) -> Lead:
    lead = await db.get(Lead, lead_id)
    if not lead:
        raise NotFoundError()
    return lead


async def create_lead(db: AsyncSession, data: LeadCreate, requester: Optional[User] = None) -> Lead:
    lead = Lead(
        name=data.name,
        phone=data.phone,
        email=data.email,
        message=data.message,
        service_interest=data.service_interest,
        source=data.source,
        user_id=requester.id if requester else None,
    )
    db.add(lead)
    await db.commit()
    await db.refresh(lead)

    logger.info("Created lead %s: %s (%s) via %s", lead.id, lead.name, lead.phone, lead.source.value)
    return lead


async def list_leads(
    db: AsyncSession,
    params: PageParams,
    status: Optional[LeadStatus] = None,
    source: Optional[LeadSource] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    search: Optional[str] = None,
) -> tuple[Sequence[Lead], int]:
    """List leads, newest first."""
    filters = []
    if status:
        filters.append(Lead.status == status)
    if source:
        filters.append(Lead.source == source)
    if start_date and end_date:
        filters.append(Lead.created_at.between(start_date, end_date))
    if search:
        pattern = f"%{search}%"
        filters.append(or_(Lead.name.ilike(pattern), Lead.phone.ilike(pattern), Lead.email.ilike(pattern)))

    total = (await db.execute(select(func.count(Lead.id)).where(*filters))).scalar_one()
    result = await db.execute(
        select(Lead).where(*filters).order_by(Lead.created_at.desc()).offset(params.skip).limit(params.limit)
    )
    return result.scalars().all(), total


async def update_lead(db: AsyncSession, lead_id: UUID, data: LeadUpdate) -> Lead:
    lead = await get_lead(db, lead_id)

    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(lead, key, value)

    await db.commit()
    await db.refresh(lead)

    logger.info("Updated lead %s", lead_id)
    return lead


async def delete_lead(db: AsyncSession, lead_id: UUID) -> None:
    lead = await get_lead(db, lead_id)
    await db.delete(lead)
    await db.commit()
    logger.info("Deleted lead %s", lead_id)


async def convert_lead(db: AsyncSession, lead_id: UUID, data: LeadConvert) -> Appointment:
    """Book an appointment for a lead and mark the lead CONVERTED.

    The new appointment and the lead status change are committed together.
    The appointment keeps no foreign key back to the lead, only a note.
    """
    lead = await get_lead(db, lead_id)
    if lead.status == LeadStatus.CONVERTED:
        raise BadRequestError("Lead already converted")

    service, branch = await load_booking_targets(db, data.service_id, data.branch_id)

    appointment = await stage_appointment(
        db,
        service=service,
        branch=branch,
        appointment_date=data.appointment_date,
        time_slot=data.time_slot,
        patient_name=lead.name,
        patient_phone=lead.phone,
        patient_email=lead.email,
        user_id=lead.user_id,
        notes=f"Converted from lead. Original message: {lead.message or 'N/A'}",
    )
    appointment_id = appointment.id
    lead.status = LeadStatus.CONVERTED
    await commit_or_conflict(db, data.branch_id, data.appointment_date, data.time_slot)

    logger.info("Converted lead %s into appointment %s", lead_id, appointment_id)
    appointment = await get_appointment(db, appointment_id)
    await send_confirmation(appointment)
    return appointment


# ---------------------------------------------------------------------------
# Contact messages
# ---------------------------------------------------------------------------

async def create_contact_message(db: AsyncSession, data: ContactMessageCreate) -> ContactMessage:
    contact_message = ContactMessage(**data.model_dump())
    db.add(contact_message)
    await db.commit()
    await db.refresh(contact_message)
    logger.info("Contact message %s received from %s", contact_message.id, contact_message.email)
    return contact_message


async def list_contact_messages(
    db: AsyncSession,
    params: PageParams,
    is_read: Optional[bool] = None,
) -> tuple[Sequence[ContactMessage], int]:
    filters = []
    if is_read is not None:
        filters.append(ContactMessage.is_read == is_read)

    total = (await db.execute(select(func.count(ContactMessage.id)).where(*filters))).scalar_one()
    result = await db.execute(
        select(ContactMessage)
        .where(*filters)
        .order_by(ContactMessage.created_at.desc())
        .offset(params.skip)
        .limit(params.limit)
    )
    return result.scalars().all(), total


async def mark_message_read(db: AsyncSession, message_id: UUID) -> ContactMessage:
    contact_message = await db.get(ContactMessage, message_id)
    if not contact_message:
        raise NotFoundError()
    contact_message.is_read = True
    await db.commit()
    await db.refresh(contact_message)
    return contact_message
