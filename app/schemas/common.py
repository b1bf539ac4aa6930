"""Shared schema building blocks: camelCase base model, envelope, pagination."""

from math import ceil
from typing import Annotated, Generic, Optional, TypeVar

from fastapi import Query
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# "HH:MM", 24h clock
TimeSlotStr = Annotated[str, Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$", examples=["09:30"])]


class CamelModel(BaseModel):
    """Base for request/response bodies: camelCase on the wire, snake_case in Python."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ApiResponse(BaseModel, Generic[T]):
    """Envelope wrapped around every API response."""
    success: bool = True
    message: str = "Success"
    data: Optional[T] = None


class PaginationMeta(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int


class Page(CamelModel, Generic[T]):
    items: list[T]
    pagination: PaginationMeta


class PageParams:
    """Pagination query parameters (``page`` is 1-based)."""

    def __init__(self, page: int = Query(1, ge=1), limit: int = Query(10, ge=1, le=100)):
        self.page = page
        self.limit = limit

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> PaginationMeta:
        return PaginationMeta(
            total=total,
            page=self.page,
            limit=self.limit,
            total_pages=ceil(total / self.limit) if self.limit else 0,
        )
