"""Admin dashboard endpoints (read-only aggregates)."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import require_admin
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.dashboard import (
    BranchPerformance,
    ChartPoint,
    DashboardStats,
    PopularService,
    RecentActivity,
)
from app.services import dashboard as dashboard_service

router = APIRouter()


@router.get("/stats", response_model=ApiResponse[DashboardStats])
async def get_stats(admin: User = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await dashboard_service.get_dashboard_stats(db))


@router.get("/appointments/chart", response_model=ApiResponse[list[ChartPoint]])
async def get_appointment_chart(
    days: int = Query(30, ge=1, le=365),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await dashboard_service.get_appointment_chart(db, days))


@router.get("/services/popular", response_model=ApiResponse[list[PopularService]])
async def get_popular_services(
    limit: int = Query(10, ge=1, le=50),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await dashboard_service.get_popular_services(db, limit))


@router.get("/branches/performance", response_model=ApiResponse[list[BranchPerformance]])
async def get_branch_performance(admin: User = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await dashboard_service.get_branch_performance(db))


@router.get("/recent-activity", response_model=ApiResponse[RecentActivity])
async def get_recent_activity(
    limit: int = Query(10, ge=1, le=50),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await dashboard_service.get_recent_activity(db, limit))
