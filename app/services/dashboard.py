"""Read-only aggregates for the admin dashboard."""

from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.appointment import Appointment, AppointmentStatus
from app.models.branch import Branch
from app.models.lead import Lead
from app.models.service import Service
from app.models.user import User, UserRole
from app.schemas.appointment import AppointmentOut
from app.schemas.branch import BranchBrief
from app.schemas.dashboard import (
    AppointmentStatusCount,
    BranchPerformance,
    ChartPoint,
    DashboardStats,
    LeadStatusCount,
    PopularService,
    RecentActivity,
)
from app.schemas.lead import LeadOut
from app.schemas.service import ServiceBrief


def _rate(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total > 0 else 0.0


async def _count(db: AsyncSession, column, *filters) -> int:
    result = await db.execute(select(func.count(column)).where(*filters))
    return result.scalar() or 0


async def get_dashboard_stats(db: AsyncSession, today: Optional[date] = None) -> DashboardStats:
    """Headline counts, revenue and status breakdowns.

    Weeks start on Monday. Day/week/month counts include every appointment
    dated on or after the start of the period.
    """
    today = today or date.today()
    week_start = today - timedelta(days=today.weekday())
    month_start = today.replace(day=1)

    total_appointments = await _count(db, Appointment.id)
    today_appointments = await _count(db, Appointment.id, Appointment.appointment_date >= today)
    week_appointments = await _count(db, Appointment.id, Appointment.appointment_date >= week_start)
    month_appointments = await _count(db, Appointment.id, Appointment.appointment_date >= month_start)
    total_patients = await _count(db, User.id, User.role == UserRole.PATIENT)
    total_leads = await _count(db, Lead.id)
    new_leads = await _count(
        db, Lead.id, Lead.created_at >= datetime.combine(week_start, datetime.min.time())
    )

    appointment_rows = (await db.execute(
        select(Appointment.status, func.count(Appointment.id)).group_by(Appointment.status)
    )).all()
    lead_rows = (await db.execute(
        select(Lead.status, func.count(Lead.id)).group_by(Lead.status)
    )).all()

    revenue = (await db.execute(
        select(func.coalesce(func.sum(Service.price), 0))
        .select_from(Appointment)
        .join(Service, Appointment.service_id == Service.id)
        .where(Appointment.status == AppointmentStatus.COMPLETED)
    )).scalar()

    completed = next((count for status, count in appointment_rows if status == AppointmentStatus.COMPLETED), 0)

    return DashboardStats(
        total_appointments=total_appointments,
        today_appointments=today_appointments,
        week_appointments=week_appointments,
        month_appointments=month_appointments,
        total_patients=total_patients,
        total_leads=total_leads,
        new_leads=new_leads,
        estimated_revenue=float(revenue or 0),
        completion_rate=_rate(completed, total_appointments),
        appointments_by_status=[AppointmentStatusCount(status=s, count=c) for s, c in appointment_rows],
        leads_by_status=[LeadStatusCount(status=s, count=c) for s, c in lead_rows],
    )


async def get_appointment_chart(db: AsyncSession, days: int = 30) -> list[ChartPoint]:
    """Bookings per creation day over the last ``days`` days, oldest first."""
    start = datetime.combine(date.today() - timedelta(days=days), datetime.min.time())
    rows = (await db.execute(
        select(Appointment.created_at, Appointment.status).where(Appointment.created_at >= start)
    )).all()

    points: dict[date, ChartPoint] = {}
    for created_at, status in rows:
        day = created_at.date()
        point = points.setdefault(day, ChartPoint(date=day))
        point.count += 1
        if status == AppointmentStatus.CONFIRMED:
            point.confirmed += 1
        elif status == AppointmentStatus.PENDING:
            point.pending += 1
        elif status == AppointmentStatus.COMPLETED:
            point.completed += 1

    return [points[day] for day in sorted(points)]


async def get_popular_services(db: AsyncSession, limit: int = 10) -> list[PopularService]:
    """Services ranked by number of appointments booked."""
    booking_count = func.count(Appointment.id).label("booking_count")
    rows = (await db.execute(
        select(Appointment.service_id, booking_count)
        .group_by(Appointment.service_id)
        .order_by(booking_count.desc())
        .limit(limit)
    )).all()
    if not rows:
        return []

    services = (await db.execute(
        select(Service).where(Service.id.in_([service_id for service_id, _ in rows]))
    )).scalars().all()
    by_id = {service.id: service for service in services}

    return [
        PopularService(service=ServiceBrief.model_validate(by_id[service_id]), booking_count=count)
        for service_id, count in rows
        if service_id in by_id
    ]


async def get_branch_performance(db: AsyncSession) -> list[BranchPerformance]:
    """Appointment volume, completions and revenue per active branch."""
    branches = (await db.execute(
        select(Branch).where(Branch.is_active.is_(True)).order_by(Branch.name)
    )).scalars().all()

    totals = dict((await db.execute(
        select(Appointment.branch_id, func.count(Appointment.id)).group_by(Appointment.branch_id)
    )).all())
    completed = dict((await db.execute(
        select(Appointment.branch_id, func.count(Appointment.id))
        .where(Appointment.status == AppointmentStatus.COMPLETED)
        .group_by(Appointment.branch_id)
    )).all())
    revenue = dict((await db.execute(
        select(Appointment.branch_id, func.sum(Service.price))
        .join(Service, Appointment.service_id == Service.id)
        .where(Appointment.status == AppointmentStatus.COMPLETED)
        .group_by(Appointment.branch_id)
    )).all())

    performance = []
    for branch in branches:
        total = totals.get(branch.id, 0)
        done = completed.get(branch.id, 0)
        performance.append(BranchPerformance(
            branch=BranchBrief.model_validate(branch),
            total_appointments=total,
            completed_appointments=done,
            revenue=float(revenue.get(branch.id) or 0),
            completion_rate=_rate(done, total),
        ))
    return performance


async def get_recent_activity(db: AsyncSession, limit: int = 10) -> RecentActivity:
    appointments = (await db.execute(
        select(Appointment)
        .options(selectinload(Appointment.service), selectinload(Appointment.branch))
        .order_by(Appointment.created_at.desc())
        .limit(limit)
    )).scalars().all()
    leads = (await db.execute(
        select(Lead).order_by(Lead.created_at.desc()).limit(limit)
    )).scalars().all()

    return RecentActivity(
        recent_appointments=[AppointmentOut.model_validate(a) for a in appointments],
        recent_leads=[LeadOut.model_validate(lead) for lead in leads],
    )
