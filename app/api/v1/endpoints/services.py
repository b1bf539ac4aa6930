"""Service catalogue endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import require_admin
from app.models.user import User
from app.schemas.common import ApiResponse, Page, PageParams
from app.schemas.service import (
    CategoryCreate,
    CategoryOut,
    ServiceBranchesUpdate,
    ServiceCreate,
    ServiceOut,
    ServiceUpdate,
)
from app.services import catalog

router = APIRouter()


@router.get("", response_model=ApiResponse[Page[ServiceOut]])
async def list_services(
    params: PageParams = Depends(),
    category_id: Optional[UUID] = Query(None, alias="categoryId"),
    is_popular: Optional[bool] = Query(None, alias="isPopular"),
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    services, total = await catalog.list_services(db, params, category_id, is_popular, search)
    return ApiResponse(data=Page(
        items=[ServiceOut.model_validate(s) for s in services],
        pagination=params.meta(total),
    ))


@router.post("", response_model=ApiResponse[ServiceOut], status_code=201)
async def create_service(
    data: ServiceCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    service = await catalog.create_service(db, data)
    return ApiResponse(message="Service created successfully", data=ServiceOut.model_validate(service))


@router.get("/categories", response_model=ApiResponse[list[CategoryOut]])
async def list_categories(db: AsyncSession = Depends(get_db)):
    categories = await catalog.list_categories(db)
    return ApiResponse(data=[CategoryOut.model_validate(c) for c in categories])


@router.post("/categories", response_model=ApiResponse[CategoryOut], status_code=201)
async def create_category(
    data: CategoryCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = await catalog.create_category(db, data)
    return ApiResponse(message="Category created successfully", data=CategoryOut.model_validate(category))


@router.get("/slug/{slug}", response_model=ApiResponse[ServiceOut])
async def get_service_by_slug(slug: str, db: AsyncSession = Depends(get_db)):
    service = await catalog.get_service_by_slug(db, slug)
    return ApiResponse(data=ServiceOut.model_validate(service))


@router.get("/{service_id}", response_model=ApiResponse[ServiceOut])
async def get_service(service_id: UUID, db: AsyncSession = Depends(get_db)):
    service = await catalog.get_service(db, service_id)
    return ApiResponse(data=ServiceOut.model_validate(service))


@router.put("/{service_id}", response_model=ApiResponse[ServiceOut])
async def update_service(
    service_id: UUID,
    data: ServiceUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    service = await catalog.update_service(db, service_id, data)
    return ApiResponse(message="Resource updated successfully", data=ServiceOut.model_validate(service))


@router.delete("/{service_id}", response_model=ApiResponse[None])
async def delete_service(
    service_id: UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await catalog.deactivate_service(db, service_id)
    return ApiResponse(message="Service deactivated successfully")


@router.put("/{service_id}/branches", response_model=ApiResponse[ServiceOut])
async def set_service_branches(
    service_id: UUID,
    data: ServiceBranchesUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    service = await catalog.set_service_branches(db, service_id, data.branch_ids)
    return ApiResponse(message="Resource updated successfully", data=ServiceOut.model_validate(service))
