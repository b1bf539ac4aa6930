"""Appointment slot calculation.

A slot is identified by its start time ("HH:MM"). Slots for a branch and day
start at the branch's opening time and step forward by a fixed duration for
as long as the whole slot fits before closing time. A slot is taken while a
PENDING or CONFIRMED appointment holds it.
"""

from datetime import date
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.appointment import Appointment, ACTIVE_STATUSES
from app.models.branch import Branch


def time_to_minutes(t: str) -> int:
    """Convert HH:MM string to minutes since midnight."""
    h, m = map(int, t.split(":"))
    return h * 60 + m


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to HH:MM string."""
    h = minutes // 60
    m = minutes % 60
    return f"{h:02d}:{m:02d}"


def generate_time_slots(
    opening_time: str,
    closing_time: str,
    slot_duration: int = 30,
    booked_slots: Iterable[str] = (),
) -> list[str]:
    """Return the free slots between opening and closing time, ascending.

    Pure function. ``opening_time >= closing_time`` yields an empty list.
    """
    if slot_duration <= 0:
        raise ValueError("slot_duration must be positive")

    booked = set(booked_slots)
    current = time_to_minutes(opening_time)
    end = time_to_minutes(closing_time)

    slots = []
    while current + slot_duration <= end:
        slot = minutes_to_time(current)
        if slot not in booked:
            slots.append(slot)
        current += slot_duration
    return slots


def is_on_slot_grid(branch: Branch, time_slot: str, slot_duration: Optional[int] = None) -> bool:
    """True if ``time_slot`` is one of the branch's slots, booked or not."""
    duration = slot_duration or settings.SLOT_DURATION_MINUTES
    return time_slot in generate_time_slots(branch.opening_time, branch.closing_time, duration)


async def get_booked_slots(
    db: AsyncSession,
    branch_id: UUID,
    target_date: date,
    exclude_appointment_id: Optional[UUID] = None,
) -> set[str]:
    """Time slots held by active appointments for a branch on a date."""
    query = select(Appointment.time_slot).where(
        Appointment.branch_id == branch_id,
        Appointment.appointment_date == target_date,
        Appointment.status.in_(ACTIVE_STATUSES),
    )
    if exclude_appointment_id is not None:
        query = query.where(Appointment.id != exclude_appointment_id)

    result = await db.execute(query)
    return set(result.scalars().all())


async def get_available_slots(db: AsyncSession, branch: Branch, target_date: date) -> list[str]:
    """Free slots for a branch on a date, computed fresh on every call."""
    booked = await get_booked_slots(db, branch.id, target_date)
    return generate_time_slots(
        branch.opening_time,
        branch.closing_time,
        settings.SLOT_DURATION_MINUTES,
        booked,
    )
