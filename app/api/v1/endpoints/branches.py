"""Branch endpoints, including the public slot availability lookup."""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_user_optional, require_admin
from app.models.user import User
from app.schemas.appointment import AvailableSlotsOut
from app.schemas.branch import BranchCreate, BranchOut, BranchUpdate
from app.schemas.common import ApiResponse, Page, PageParams
from app.schemas.service import ServiceOut
from app.services import catalog
from app.services.slots import get_available_slots

router = APIRouter()


@router.get("", response_model=ApiResponse[Page[BranchOut]])
async def list_branches(
    params: PageParams = Depends(),
    city: Optional[str] = None,
    state: Optional[str] = None,
    include_inactive: bool = Query(False, alias="includeInactive"),
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    """List branches. Inactive branches are only listed for admins."""
    include_inactive = include_inactive and bool(current_user and current_user.is_admin)
    branches, total = await catalog.list_branches(db, params, city, state, include_inactive)
    return ApiResponse(data=Page(
        items=[BranchOut.model_validate(b) for b in branches],
        pagination=params.meta(total),
    ))


@router.post("", response_model=ApiResponse[BranchOut], status_code=201)
async def create_branch(
    data: BranchCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    branch = await catalog.create_branch(db, data)
    return ApiResponse(message="Branch created successfully", data=BranchOut.model_validate(branch))


@router.get("/{branch_id}", response_model=ApiResponse[BranchOut])
async def get_branch(branch_id: UUID, db: AsyncSession = Depends(get_db)):
    branch = await catalog.get_branch(db, branch_id)
    return ApiResponse(data=BranchOut.model_validate(branch))


@router.put("/{branch_id}", response_model=ApiResponse[BranchOut])
async def update_branch(
    branch_id: UUID,
    data: BranchUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    branch = await catalog.update_branch(db, branch_id, data)
    return ApiResponse(message="Resource updated successfully", data=BranchOut.model_validate(branch))


@router.delete("/{branch_id}", response_model=ApiResponse[None])
async def delete_branch(
    branch_id: UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await catalog.deactivate_branch(db, branch_id)
    return ApiResponse(message="Branch deactivated successfully")


@router.get("/{branch_id}/services", response_model=ApiResponse[list[ServiceOut]])
async def list_branch_services(branch_id: UUID, db: AsyncSession = Depends(get_db)):
    services = await catalog.list_branch_services(db, branch_id)
    return ApiResponse(data=[ServiceOut.model_validate(s) for s in services])


@router.get("/{branch_id}/slots", response_model=ApiResponse[AvailableSlotsOut])
async def get_branch_slots(
    branch_id: UUID,
    target_date: date = Query(..., alias="date"),
    service_id: Optional[UUID] = Query(None, alias="serviceId"),
    db: AsyncSession = Depends(get_db),
):
    """Free slots for a branch on a date.

    ``serviceId`` is validated but does not change the slot grid: every
    service books a single fixed-length slot.
    """
    branch = await catalog.get_branch(db, branch_id, active_only=True)
    if service_id:
        await catalog.get_service(db, service_id)

    slots = await get_available_slots(db, branch, target_date)
    return ApiResponse(data=AvailableSlotsOut(
        date=target_date,
        available_slots=slots,
        total_slots=len(slots),
    ))
