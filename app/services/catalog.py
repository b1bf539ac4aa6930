"""Branches, service categories and services."""

import logging
import re
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.exceptions import BadRequestError, ConflictError, NotFoundError
from app.models.branch import Branch
from app.models.service import BranchService, Service, ServiceCategory
from app.schemas.branch import BranchCreate, BranchUpdate
from app.schemas.common import PageParams
from app.schemas.service import CategoryCreate, ServiceCreate, ServiceUpdate
from app.services.slots import time_to_minutes

logger = logging.getLogger(__name__)


def slugify(text: str) -> str:
    """'Laser Hair Removal' -> 'laser-hair-removal'"""
    slug = re.sub(r"[^\w\s-]", "", text.strip().lower())
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


# ---------------------------------------------------------------------------
# Branches
# ---------------------------------------------------------------------------

async def get_branch(db: AsyncSession, branch_id: UUID, active_only: bool = False) -> Branch:
    branch = await db.get(Branch, branch_id)
    if not branch or (active_only and not branch.is_active):
        raise NotFoundError()
    return branch


async def list_branches(
    db: AsyncSession,
    params: PageParams,
    city: Optional[str] = None,
    state: Optional[str] = None,
    include_inactive: bool = False,
) -> tuple[Sequence[Branch], int]:
    filters = []
    if not include_inactive:
        filters.append(Branch.is_active.is_(True))
    if city:
        filters.append(Branch.city.ilike(f"%{city}%"))
    if state:
        filters.append(Branch.state.ilike(f"%{state}%"))

    total = (await db.execute(select(func.count(Branch.id)).where(*filters))).scalar_one()
    result = await db.execute(
        select(Branch).where(*filters).order_by(Branch.name).offset(params.skip).limit(params.limit)
    )
    return result.scalars().all(), total


async def _ensure_code_free(db: AsyncSession, code: str) -> None:
    existing = (await db.execute(select(Branch.id).where(Branch.code == code))).first()
    if existing:
        raise ConflictError("Branch with this code already exists")


def _check_hours(opening_time: str, closing_time: str) -> None:
    # Equal or inverted hours are accepted; such a branch simply has no slots.
    if time_to_minutes(opening_time) >= time_to_minutes(closing_time):
        logger.warning("Branch hours %s-%s produce no slots", opening_time, closing_time)


async def create_branch(db: AsyncSession, data: BranchCreate) -> Branch:
    await _ensure_code_free(db, data.code)

    values = data.model_dump()
    values["opening_time"] = data.opening_time or settings.DEFAULT_OPENING_TIME
    values["closing_time"] = data.closing_time or settings.DEFAULT_CLOSING_TIME
    _check_hours(values["opening_time"], values["closing_time"])

    branch = Branch(**values)
    db.add(branch)
    await db.commit()
    await db.refresh(branch)

    logger.info("Created branch %s (%s)", branch.id, branch.code)
    return branch


async def update_branch(db: AsyncSession, branch_id: UUID, data: BranchUpdate) -> Branch:
    branch = await get_branch(db, branch_id)

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("code") and update_data["code"] != branch.code:
        await _ensure_code_free(db, update_data["code"])

    for key, value in update_data.items():
        setattr(branch, key, value)
    _check_hours(branch.opening_time, branch.closing_time)

    await db.commit()
    await db.refresh(branch)
    logger.info("Updated branch %s", branch_id)
    return branch


async def deactivate_branch(db: AsyncSession, branch_id: UUID) -> None:
    """Soft delete: existing appointments keep pointing at the branch."""
    branch = await get_branch(db, branch_id)
    branch.is_active = False
    await db.commit()
    logger.info("Deactivated branch %s", branch_id)


async def list_branch_services(db: AsyncSession, branch_id: UUID) -> Sequence[Service]:
    await get_branch(db, branch_id)
    result = await db.execute(
        select(Service)
        .join(BranchService, BranchService.service_id == Service.id)
        .options(selectinload(Service.category))
        .where(
            BranchService.branch_id == branch_id,
            BranchService.is_active.is_(True),
            Service.is_active.is_(True),
        )
        .order_by(Service.name)
    )
    return result.scalars().all()


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

async def list_categories(db: AsyncSession) -> Sequence[ServiceCategory]:
    result = await db.execute(
        select(ServiceCategory)
        .where(ServiceCategory.is_active.is_(True))
        .order_by(ServiceCategory.sort_order, ServiceCategory.name)
    )
    return result.scalars().all()


async def create_category(db: AsyncSession, data: CategoryCreate) -> ServiceCategory:
    slug = data.slug or slugify(data.name)
    existing = (await db.execute(select(ServiceCategory.id).where(ServiceCategory.slug == slug))).first()
    if existing:
        raise ConflictError("Category with this slug already exists")

    category = ServiceCategory(**data.model_dump(exclude={"slug"}), slug=slug)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------

async def get_service(db: AsyncSession, service_id: UUID) -> Service:
    result = await db.execute(
        select(Service)
        .options(selectinload(Service.category))
        .where(Service.id == service_id)
        .execution_options(populate_existing=True)
    )
    service = result.scalar_one_or_none()
    if not service:
        raise NotFoundError()
    return service


async def get_service_by_slug(db: AsyncSession, slug: str) -> Service:
    result = await db.execute(
        select(Service).options(selectinload(Service.category)).where(Service.slug == slug)
    )
    service = result.scalar_one_or_none()
    if not service:
        raise NotFoundError()
    return service


async def list_services(
    db: AsyncSession,
    params: PageParams,
    category_id: Optional[UUID] = None,
    is_popular: Optional[bool] = None,
    search: Optional[str] = None,
) -> tuple[Sequence[Service], int]:
    filters = [Service.is_active.is_(True)]
    if category_id:
        filters.append(Service.category_id == category_id)
    if is_popular is not None:
        filters.append(Service.is_popular.is_(is_popular))
    if search:
        pattern = f"%{search}%"
        filters.append(or_(Service.name.ilike(pattern), Service.description.ilike(pattern)))

    total = (await db.execute(select(func.count(Service.id)).where(*filters))).scalar_one()
    result = await db.execute(
        select(Service)
        .options(selectinload(Service.category))
        .where(*filters)
        .order_by(Service.name)
        .offset(params.skip)
        .limit(params.limit)
    )
    return result.scalars().all(), total


async def _ensure_slug_free(db: AsyncSession, slug: str) -> None:
    existing = (await db.execute(select(Service.id).where(Service.slug == slug))).first()
    if existing:
        raise ConflictError("Service with this slug already exists")


async def _ensure_category(db: AsyncSession, category_id: UUID) -> None:
    if not await db.get(ServiceCategory, category_id):
        raise BadRequestError("Invalid category")


async def _replace_branches(db: AsyncSession, service_id: UUID, branch_ids: list[UUID]) -> None:
    if branch_ids:
        found = (await db.execute(select(Branch.id).where(Branch.id.in_(branch_ids)))).scalars().all()
        if len(set(found)) != len(set(branch_ids)):
            raise BadRequestError("Invalid branch")

    await db.execute(delete(BranchService).where(BranchService.service_id == service_id))
    for branch_id in dict.fromkeys(branch_ids):
        db.add(BranchService(branch_id=branch_id, service_id=service_id))


async def create_service(db: AsyncSession, data: ServiceCreate) -> Service:
    slug = data.slug or slugify(data.name)
    await _ensure_slug_free(db, slug)
    await _ensure_category(db, data.category_id)

    service = Service(**data.model_dump(exclude={"slug", "branch_ids"}), slug=slug)
    db.add(service)
    await db.flush()
    await _replace_branches(db, service.id, data.branch_ids)
    await db.commit()

    logger.info("Created service %s (%s)", service.id, slug)
    return await get_service(db, service.id)


async def update_service(db: AsyncSession, service_id: UUID, data: ServiceUpdate) -> Service:
    service = await get_service(db, service_id)

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("slug") and update_data["slug"] != service.slug:
        await _ensure_slug_free(db, update_data["slug"])
    if update_data.get("category_id"):
        await _ensure_category(db, update_data["category_id"])

    for key, value in update_data.items():
        setattr(service, key, value)
    await db.commit()

    logger.info("Updated service %s", service_id)
    return await get_service(db, service_id)


async def deactivate_service(db: AsyncSession, service_id: UUID) -> None:
    service = await get_service(db, service_id)
    service.is_active = False
    await db.commit()
    logger.info("Deactivated service %s", service_id)


async def set_service_branches(db: AsyncSession, service_id: UUID, branch_ids: list[UUID]) -> Service:
    await get_service(db, service_id)
    await _replace_branches(db, service_id, branch_ids)
    await db.commit()
    return await get_service(db, service_id)
