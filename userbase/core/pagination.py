"""Pagination primitives shared by listing and search endpoints."""

import math
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_PAGE_LIMIT = 100

T = TypeVar("T")


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


class PaginationOptions(BaseModel):
    """Page selection and ordering. Pages are 1-based."""

    page: int = Field(default=DEFAULT_PAGE, ge=1)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_PAGE_LIMIT)
    sort_by: str = "created_at"
    sort_order: SortOrder = SortOrder.desc

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total_items: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


class Page(BaseModel, Generic[T]):
    """A page of items plus its pagination metadata."""

    data: list[T]
    pagination: PaginationMeta


def build_pagination_meta(page: int, limit: int, total_items: int) -> PaginationMeta:
    """Compute page counts and navigation flags for a result set."""
    total_pages = math.ceil(total_items / limit)
    return PaginationMeta(
        page=page,
        limit=limit,
        total_items=total_items,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )
