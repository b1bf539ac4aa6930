"""Appointment endpoints: booking, rescheduling, cancellation and status changes.

- POST /api/v1/appointments                     → Book (guest or patient)
- GET  /api/v1/appointments                     → Admin list with filters
- GET  /api/v1/appointments/my                  → Current patient's appointments
- GET  /api/v1/appointments/{id}                → Appointment details
- PUT  /api/v1/appointments/{id}/reschedule     → Move to another date/slot
- PUT  /api/v1/appointments/{id}/cancel         → Cancel, freeing the slot
- PUT  /api/v1/appointments/{id}/status         → Admin status change
"""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_user, get_current_user_optional, require_admin
from app.models.appointment import AppointmentStatus
from app.models.user import User
from app.schemas.appointment import (
    AppointmentCancel,
    AppointmentCreate,
    AppointmentOut,
    AppointmentReschedule,
    AppointmentStatusUpdate,
)
from app.schemas.common import ApiResponse, Page, PageParams
from app.services import booking

router = APIRouter()


@router.post("", response_model=ApiResponse[AppointmentOut], status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    """Book an appointment. Returns 409 if the slot is already taken."""
    appointment = await booking.create_appointment(db, data, current_user)
    return ApiResponse(
        message="Appointment booked successfully",
        data=AppointmentOut.model_validate(appointment),
    )


@router.get("", response_model=ApiResponse[Page[AppointmentOut]])
async def list_appointments(
    params: PageParams = Depends(),
    status: Optional[AppointmentStatus] = None,
    branch_id: Optional[UUID] = Query(None, alias="branchId"),
    service_id: Optional[UUID] = Query(None, alias="serviceId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    search: Optional[str] = None,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    appointments, total = await booking.list_appointments(
        db, params, status, branch_id, service_id, start_date, end_date, search
    )
    return ApiResponse(data=Page(
        items=[AppointmentOut.model_validate(a) for a in appointments],
        pagination=params.meta(total),
    ))


@router.get("/my", response_model=ApiResponse[list[AppointmentOut]])
async def my_appointments(
    status: Optional[AppointmentStatus] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    appointments = await booking.list_user_appointments(db, current_user.id, status)
    return ApiResponse(data=[AppointmentOut.model_validate(a) for a in appointments])


@router.get("/{appointment_id}", response_model=ApiResponse[AppointmentOut])
async def get_appointment(
    appointment_id: UUID,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    appointment = await booking.get_appointment(db, appointment_id)
    booking.ensure_can_view(appointment, current_user)
    return ApiResponse(data=AppointmentOut.model_validate(appointment))


@router.put("/{appointment_id}/reschedule", response_model=ApiResponse[AppointmentOut])
async def reschedule_appointment(
    appointment_id: UUID,
    data: AppointmentReschedule,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    appointment = await booking.reschedule_appointment(db, appointment_id, data, current_user)
    return ApiResponse(
        message="Appointment rescheduled successfully",
        data=AppointmentOut.model_validate(appointment),
    )


@router.put("/{appointment_id}/cancel", response_model=ApiResponse[AppointmentOut])
async def cancel_appointment(
    appointment_id: UUID,
    data: AppointmentCancel,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    appointment = await booking.cancel_appointment(db, appointment_id, data, current_user)
    return ApiResponse(
        message="Appointment cancelled successfully",
        data=AppointmentOut.model_validate(appointment),
    )


@router.put("/{appointment_id}/status", response_model=ApiResponse[AppointmentOut])
async def update_appointment_status(
    appointment_id: UUID,
    data: AppointmentStatusUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    appointment = await booking.update_appointment_status(db, appointment_id, data)
    return ApiResponse(
        message="Resource updated successfully",
        data=AppointmentOut.model_validate(appointment),
    )
