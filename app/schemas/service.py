"""Pydantic schemas for the service catalogue."""

from datetime import datetime
from uuid import UUID
from typing import Optional
from pydantic import Field
from app.schemas.common import CamelModel


class CategoryCreate(CamelModel):
    name: str
    slug: Optional[str] = None  # derived from name when omitted
    description: Optional[str] = None
    icon: Optional[str] = None
    sort_order: int = 0


class CategoryOut(CamelModel):
    id: UUID
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None
    sort_order: int
    is_active: bool


class ServiceCreate(CamelModel):
    """Schema for creating a service."""
    name: str
    slug: Optional[str] = None
    description: str = ""
    short_desc: Optional[str] = None
    duration: int = Field(gt=0)
    price: float = Field(ge=0)
    discount_price: Optional[float] = Field(default=None, ge=0)
    image: Optional[str] = None
    is_popular: bool = False
    category_id: UUID
    branch_ids: list[UUID] = []


class ServiceUpdate(CamelModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    short_desc: Optional[str] = None
    duration: Optional[int] = Field(default=None, gt=0)
    price: Optional[float] = Field(default=None, ge=0)
    discount_price: Optional[float] = Field(default=None, ge=0)
    image: Optional[str] = None
    is_popular: Optional[bool] = None
    is_active: Optional[bool] = None
    category_id: Optional[UUID] = None


class ServiceBranchesUpdate(CamelModel):
    """Replace the set of branches offering a service."""
    branch_ids: list[UUID]


class ServiceBrief(CamelModel):
    id: UUID
    name: str
    duration: int
    price: float


class ServiceOut(ServiceBrief):
    """Schema for returning service details."""
    slug: str
    description: str
    short_desc: Optional[str] = None
    discount_price: Optional[float] = None
    image: Optional[str] = None
    is_popular: bool
    is_active: bool
    category_id: UUID
    category: Optional[CategoryOut] = None
    created_at: Optional[datetime] = None
