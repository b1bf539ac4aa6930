"""Admin patient management: list, view history, update profile/activation."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_db
from app.core.deps import require_admin
from app.models.appointment import Appointment
from app.models.user import User, UserRole
from app.schemas.appointment import AppointmentOut
from app.schemas.common import ApiResponse, Page, PageParams
from app.schemas.patient import PatientDetail, PatientOut, PatientUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


async def _get_patient(db: AsyncSession, patient_id: UUID) -> User:
    result = await db.execute(select(User).where(User.id == patient_id, User.role == UserRole.PATIENT))
    patient = result.scalar_one_or_none()
    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")
    return patient


async def _appointment_count(db: AsyncSession, patient_id: UUID) -> int:
    result = await db.execute(select(func.count(Appointment.id)).where(Appointment.user_id == patient_id))
    return result.scalar() or 0


@router.get("", response_model=ApiResponse[Page[PatientOut]])
async def list_patients(
    params: PageParams = Depends(),
    search: Optional[str] = None,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """List patients, newest first, with their appointment counts.

    ``search`` matches first name, last name, email or phone.
    """
    filters = [User.role == UserRole.PATIENT]
    if search:
        pattern = f"%{search}%"
        filters.append(or_(
            User.first_name.ilike(pattern),
            User.last_name.ilike(pattern),
            User.email.ilike(pattern),
            User.phone.ilike(pattern),
        ))

    total = (await db.execute(select(func.count(User.id)).where(*filters))).scalar() or 0
    result = await db.execute(
        select(User).where(*filters).order_by(User.created_at.desc()).offset(params.skip).limit(params.limit)
    )
    patients = result.scalars().all()

    counts = {}
    if patients:
        count_rows = await db.execute(
            select(Appointment.user_id, func.count(Appointment.id))
            .where(Appointment.user_id.in_([p.id for p in patients]))
            .group_by(Appointment.user_id)
        )
        counts = dict(count_rows.all())

    items = [
        PatientOut.model_validate(p).model_copy(update={"appointment_count": counts.get(p.id, 0)})
        for p in patients
    ]
    return ApiResponse(data=Page(items=items, pagination=params.meta(total)))


@router.get("/{patient_id}", response_model=ApiResponse[PatientDetail])
async def get_patient(
    patient_id: UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    patient = await _get_patient(db, patient_id)
    result = await db.execute(
        select(Appointment)
        .options(selectinload(Appointment.service), selectinload(Appointment.branch))
        .where(Appointment.user_id == patient_id)
        .order_by(Appointment.appointment_date.desc())
    )
    appointments = [AppointmentOut.model_validate(a) for a in result.scalars().all()]

    # Built from PatientOut so the lazy User.appointments relationship is never touched.
    summary = PatientOut.model_validate(patient).model_dump(exclude={"appointment_count"})
    detail = PatientDetail(**summary, appointment_count=len(appointments), appointments=appointments)
    return ApiResponse(data=detail)


@router.put("/{patient_id}", response_model=ApiResponse[PatientOut])
async def update_patient(
    patient_id: UUID,
    update_data: PatientUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    patient = await _get_patient(db, patient_id)

    changes = update_data.model_dump(exclude_unset=True)
    if changes.get("phone") and changes["phone"] != patient.phone:
        taken = await db.execute(select(User.id).where(User.phone == changes["phone"]))
        if taken.first():
            raise HTTPException(status_code=409, detail="Phone number already registered")

    for key, value in changes.items():
        setattr(patient, key, value)
    await db.commit()
    await db.refresh(patient)

    if "is_active" in changes:
        logger.info(
            "Admin %s %s patient %s",
            admin.email, "activated" if patient.is_active else "deactivated", patient.email,
        )

    out = PatientOut.model_validate(patient).model_copy(
        update={"appointment_count": await _appointment_count(db, patient_id)}
    )
    return ApiResponse(message="Resource updated successfully", data=out)
