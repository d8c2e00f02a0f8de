# src/picklerank/schemas/pagination.py

"""Pagination and sorting helpers shared by the list endpoints."""

from collections.abc import Sequence
from enum import Enum
from typing import Any, Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel, Field

T = TypeVar("T")


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class PlayerSortField(str, Enum):
    """Sortable player columns. RATING treats unrated players as 1200."""

    NAME = "name"
    RATING = "rating"
    CREATED_AT = "created_at"


class MatchSortField(str, Enum):
    """Sortable match columns. DATE is when the match was played."""

    DATE = "date"
    CREATED_AT = "created_at"


class PageParams:
    """skip/limit query parameters, injected with `Depends()`."""

    def __init__(
        self,
        skip: int = Query(0, ge=0, description="Records to skip"),
        limit: int = Query(50, ge=1, le=100, description="Max records to return"),
    ) -> None:
        self.skip = skip
        self.limit = limit

    def slice(self, rows: Sequence[Any]) -> list[Any]:
        """Cut one page out of rows that were filtered in Python."""
        return list(rows[self.skip : self.skip + self.limit])


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of results plus the size of the full result set."""

    items: list[T]
    total: int = Field(..., description="Total records matching filters")
    skip: int = Field(..., description="Records skipped")
    limit: int = Field(..., description="Max records returned")
    has_more: bool = Field(..., description="More records exist beyond this page")

    @classmethod
    def build(
        cls, items: Sequence[Any], total: int, page: PageParams
    ) -> "PaginatedResponse[Any]":
        return cls(
            items=list(items),
            total=total,
            skip=page.skip,
            limit=page.limit,
            has_more=(page.skip + len(items)) < total,
        )
