"""Pydantic schemas for the admin dashboard."""

from datetime import date
from app.models.appointment import AppointmentStatus
from app.models.lead import LeadStatus
from app.schemas.common import CamelModel
from app.schemas.appointment import AppointmentOut
from app.schemas.branch import BranchBrief
from app.schemas.lead import LeadOut
from app.schemas.service import ServiceBrief


class AppointmentStatusCount(CamelModel):
    status: AppointmentStatus
    count: int


class LeadStatusCount(CamelModel):
    status: LeadStatus
    count: int


class DashboardStats(CamelModel):
    total_appointments: int
    today_appointments: int
    week_appointments: int
    month_appointments: int
    total_patients: int
    total_leads: int
    new_leads: int
    estimated_revenue: float
    completion_rate: float
    appointments_by_status: list[AppointmentStatusCount]
    leads_by_status: list[LeadStatusCount]


class ChartPoint(CamelModel):
    date: date
    count: int = 0
    confirmed: int = 0
    pending: int = 0
    completed: int = 0


class PopularService(CamelModel):
    service: ServiceBrief
    booking_count: int


class BranchPerformance(CamelModel):
    branch: BranchBrief
    total_appointments: int
    completed_appointments: int
    revenue: float
    completion_rate: float


class RecentActivity(CamelModel):
    recent_appointments: list[AppointmentOut]
    recent_leads: list[LeadOut]
