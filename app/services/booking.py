"""Appointment booking, rescheduling, cancellation and status changes.

The rule enforced here: at most one PENDING/CONFIRMED appointment per
(branch, date, slot). A read-side check gives a clear error message, and the
partial unique index ``uq_appointments_active_slot`` rejects whichever of two
concurrent requests commits second. Both paths surface as ``SlotConflictError``.
"""

import logging
import uuid
from datetime import date
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.exceptions import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    SlotConflictError,
    UnauthorizedError,
)
from app.models.appointment import Appointment, AppointmentStatus
from app.models.branch import Branch
from app.models.service import BranchService, Service
from app.models.user import User
from app.schemas.appointment import (
    AppointmentCancel,
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentStatusUpdate,
)
from app.schemas.common import PageParams
from app.services.email_service import email_service
from app.services.slots import get_booked_slots, is_on_slot_grid

logger = logging.getLogger(__name__)

# Appointments in these states are finished and cannot be moved.
_CLOSED_STATUSES = (AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED, AppointmentStatus.NO_SHOW)


def _with_relations(query):
    return query.options(selectinload(Appointment.service), selectinload(Appointment.branch))


async def get_appointment(db: AsyncSession, appointment_id: UUID) -> Appointment:
    """Fetch an appointment with its service and branch, or raise NotFoundError."""
    result = await db.execute(
        _with_relations(select(Appointment))
        .where(Appointment.id == appointment_id)
        .execution_options(populate_existing=True)
    )
    appointment = result.scalar_one_or_none()
    if not appointment:
        raise NotFoundError()
    return appointment


def ensure_can_modify(appointment: Appointment, requester: Optional[User]) -> None:
    """Only the owning patient or an admin may change an appointment."""
    if requester is None:
        raise UnauthorizedError("Authentication token required")
    if not requester.is_admin and appointment.user_id != requester.id:
        raise ForbiddenError()


async def load_booking_targets(db: AsyncSession, service_id: UUID, branch_id: UUID) -> tuple[Service, Branch]:
    """Both must be active and the branch must offer the service."""
    service = await db.get(Service, service_id)
    branch = await db.get(Branch, branch_id)
    if not service or not service.is_active or not branch or not branch.is_active:
        raise BadRequestError("Invalid service or branch")

    offered = await db.execute(
        select(BranchService.id).where(
            BranchService.branch_id == branch_id,
            BranchService.service_id == service_id,
            BranchService.is_active.is_(True),
        )
    )
    if offered.first() is None:
        raise BadRequestError("Invalid service or branch")
    return service, branch


def ensure_on_grid(branch: Branch, time_slot: str) -> None:
    if not is_on_slot_grid(branch, time_slot):
        raise BadRequestError(
            f"Time slot {time_slot} is not available at this branch. "
            f"Opening hours are {branch.opening_time}-{branch.closing_time} "
            f"in {settings.SLOT_DURATION_MINUTES}-minute slots."
        )


async def ensure_slot_free(
    db: AsyncSession,
    branch_id: UUID,
    appointment_date: date,
    time_slot: str,
    exclude_appointment_id: Optional[UUID] = None,
) -> None:
    booked = await get_booked_slots(db, branch_id, appointment_date, exclude_appointment_id)
    if time_slot in booked:
        logger.warning(
            "Slot %s on %s at branch %s is already booked", time_slot, appointment_date, branch_id
        )
        raise SlotConflictError()


async def commit_or_conflict(db: AsyncSession, branch_id: UUID, appointment_date: date, time_slot: str) -> None:
    """Commit, translating a unique-slot violation into SlotConflictError.

    Arguments are plain values because every ORM instance is expired by the
    rollback.
    """
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        if time_slot in await get_booked_slots(db, branch_id, appointment_date):
            logger.warning(
                "Concurrent booking lost the race for slot %s on %s at branch %s",
                time_slot, appointment_date, branch_id,
            )
            raise SlotConflictError()
        raise


async def stage_appointment(
    db: AsyncSession,
    *,
    service: Service,
    branch: Branch,
    appointment_date: date,
    time_slot: str,
    patient_name: str,
    patient_phone: str,
    patient_email: Optional[str] = None,
    user_id: Optional[UUID] = None,
    notes: Optional[str] = None,
) -> Appointment:
    """Validate the slot and add a PENDING appointment to the session without committing."""
    ensure_on_grid(branch, time_slot)
    await ensure_slot_free(db, branch.id, appointment_date, time_slot)

    appointment = Appointment(
        id=uuid.uuid4(),
        appointment_date=appointment_date,
        time_slot=time_slot,
        patient_name=patient_name,
        patient_phone=patient_phone,
        patient_email=patient_email,
        user_id=user_id,
        service_id=service.id,
        branch_id=branch.id,
        notes=notes,
        status=AppointmentStatus.PENDING,
    )
    db.add(appointment)
    return appointment


async def send_confirmation(appointment: Appointment) -> None:
    """Best-effort confirmation email; never fails the booking."""
    if not appointment.patient_email:
        return
    try:
        await email_service.send_appointment_confirmation(
            patient_email=appointment.patient_email,
            patient_name=appointment.patient_name,
            service_name=appointment.service.name,
            branch_name=appointment.branch.name,
            branch_address=appointment.branch.address,
            branch_phone=appointment.branch.phone,
            appointment_date=appointment.appointment_date.strftime("%A, %B %d, %Y"),
            time_slot=appointment.time_slot,
        )
    except Exception as e:
        logger.error("Failed to send appointment confirmation email: %s", e)


async def create_appointment(
    db: AsyncSession,
    data: AppointmentCreate,
    requester: Optional[User] = None,
) -> Appointment:
    """Book a slot. Guests may book; a logged-in patient becomes the owner."""
    service, branch = await load_booking_targets(db, data.service_id, data.branch_id)

    appointment = await stage_appointment(
        db,
        service=service,
        branch=branch,
        appointment_date=data.appointment_date,
        time_slot=data.time_slot,
        patient_name=data.patient_name,
        patient_phone=data.patient_phone,
        patient_email=data.patient_email,
        user_id=requester.id if requester else None,
        notes=data.notes,
    )
    appointment_id = appointment.id
    await commit_or_conflict(db, data.branch_id, data.appointment_date, data.time_slot)

    appointment = await get_appointment(db, appointment_id)
    logger.info(
        "Booked appointment %s: branch=%s date=%s slot=%s",
        appointment.id, appointment.branch_id, appointment.appointment_date, appointment.time_slot,
    )
    await send_confirmation(appointment)
    return appointment


async def reschedule_appointment(
    db: AsyncSession,
    appointment_id: UUID,
    data: AppointmentReschedule,
    requester: Optional[User],
) -> Appointment:
    """Move an appointment to a new date/slot and mark it RESCHEDULED."""
    appointment = await get_appointment(db, appointment_id)
    ensure_can_modify(appointment, requester)

    if appointment.status in _CLOSED_STATUSES:
        raise BadRequestError(f"Cannot reschedule a {appointment.status.value.lower()} appointment")

    ensure_on_grid(appointment.branch, data.time_slot)
    await ensure_slot_free(
        db, appointment.branch_id, data.appointment_date, data.time_slot,
        exclude_appointment_id=appointment.id,
    )

    branch_id = appointment.branch_id
    appointment.appointment_date = data.appointment_date
    appointment.time_slot = data.time_slot
    appointment.status = AppointmentStatus.RESCHEDULED
    await commit_or_conflict(db, branch_id, data.appointment_date, data.time_slot)

    logger.info("Rescheduled appointment %s to %s %s", appointment_id, data.appointment_date, data.time_slot)
    return await get_appointment(db, appointment_id)


async def cancel_appointment(
    db: AsyncSession,
    appointment_id: UUID,
    data: AppointmentCancel,
    requester: Optional[User],
) -> Appointment:
    """Cancel an appointment. The slot becomes bookable again immediately."""
    appointment = await get_appointment(db, appointment_id)
    ensure_can_modify(appointment, requester)

    if appointment.status == AppointmentStatus.CANCELLED:
        raise BadRequestError("Appointment already cancelled")

    appointment.status = AppointmentStatus.CANCELLED
    appointment.cancel_reason = data.cancel_reason
    await db.commit()

    logger.info("Cancelled appointment %s", appointment_id)
    return await get_appointment(db, appointment_id)


async def update_appointment_status(
    db: AsyncSession,
    appointment_id: UUID,
    data: AppointmentStatusUpdate,
) -> Appointment:
    """Admin status change. Reviving a row into a re-booked slot is a conflict."""
    appointment = await get_appointment(db, appointment_id)

    branch_id, appointment_date, time_slot = appointment.branch_id, appointment.appointment_date, appointment.time_slot
    appointment.status = data.status
    if data.admin_notes is not None:
        appointment.admin_notes = data.admin_notes
    await commit_or_conflict(db, branch_id, appointment_date, time_slot)

    logger.info("Appointment %s status set to %s", appointment_id, data.status.value)
    return await get_appointment(db, appointment_id)


def ensure_can_view(appointment: Appointment, requester: Optional[User]) -> None:
    """Patients may only read their own appointments."""
    if requester and not requester.is_admin and appointment.user_id != requester.id:
        raise ForbiddenError()


async def list_appointments(
    db: AsyncSession,
    params: PageParams,
    status: Optional[AppointmentStatus] = None,
    branch_id: Optional[UUID] = None,
    service_id: Optional[UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
) -> tuple[Sequence[Appointment], int]:
    """Admin listing with filters; newest appointment date first."""
    filters = []
    if status:
        filters.append(Appointment.status == status)
    if branch_id:
        filters.append(Appointment.branch_id == branch_id)
    if service_id:
        filters.append(Appointment.service_id == service_id)
    if start_date and end_date:
        filters.append(Appointment.appointment_date.between(start_date, end_date))
    if search:
        pattern = f"%{search}%"
        filters.append(or_(
            Appointment.patient_name.ilike(pattern),
            Appointment.patient_phone.ilike(pattern),
            Appointment.patient_email.ilike(pattern),
        ))

    total = (await db.execute(select(func.count(Appointment.id)).where(*filters))).scalar_one()
    result = await db.execute(
        _with_relations(select(Appointment))
        .where(*filters)
        .order_by(Appointment.appointment_date.desc(), Appointment.time_slot)
        .offset(params.skip)
        .limit(params.limit)
    )
    return result.scalars().all(), total


async def list_user_appointments(
    db: AsyncSession,
    user_id: UUID,
    status: Optional[AppointmentStatus] = None,
) -> Sequence[Appointment]:
    query = _with_relations(select(Appointment)).where(Appointment.user_id == user_id)
    if status:
        query = query.where(Appointment.status == status)
    result = await db.execute(query.order_by(Appointment.appointment_date.desc(), Appointment.time_slot))
    return result.scalars().all()
