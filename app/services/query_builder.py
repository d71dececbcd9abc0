"""Translate list request parameters into MongoDB queries.

List endpoints receive ``page``, ``sortBy``, ``sortOrder`` and free-text
filters as raw query strings. Bad values never fail the request: they fall
back to the defaults below. Requests always get pages of ``DEFAULT_PAGE_SIZE``;
a ``limit`` sent by the dashboards is ignored.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar

from pydantic import BaseModel, Field, field_validator
from pymongo import ASCENDING, DESCENDING

from app.repositories.base import BaseRepository

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

T = TypeVar("T")


class SortOrder(str, Enum):

    ASC = "asc"
    DESC = "desc"

    @property
    def direction(self) -> int:
        return ASCENDING if self is SortOrder.ASC else DESCENDING


def _parse_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class ListParams(BaseModel):
    """List parameters after coercion of the raw query string values."""

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_by: Optional[str] = None
    sort_order: SortOrder = SortOrder.ASC
    filters: Dict[str, str] = Field(default_factory=dict)

    @field_validator("page", mode="before")
    @classmethod
    def _coerce_page(cls, value: Any) -> int:
        page = _parse_int(value)
        if page is None or page < 1:
            return 1
        return page

    @field_validator("limit", mode="before")
    @classmethod
    def _coerce_limit(cls, value: Any) -> int:
        limit = _parse_int(value)
        if limit is None or limit < 1:
            return DEFAULT_PAGE_SIZE
        return min(limit, MAX_PAGE_SIZE)

    @field_validator("sort_by", mode="before")
    @classmethod
    def _coerce_sort_by(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("sort_order", mode="before")
    @classmethod
    def _coerce_sort_order(cls, value: Any) -> SortOrder:
        if isinstance(value, SortOrder):
            return value
        if isinstance(value, str) and value.strip().lower() == SortOrder.DESC.value:
            return SortOrder.DESC
        return SortOrder.ASC

    @field_validator("filters", mode="before")
    @classmethod
    def _drop_blank_filters(cls, value: Any) -> Dict[str, str]:
        if not value:
            return {}
        return {
            key: str(raw).strip()
            for key, raw in dict(value).items()
            if raw is not None and str(raw).strip()
        }

    @classmethod
    def from_request(
        cls,
        page: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        **filters: Optional[str],
    ) -> "ListParams":
        return cls.model_validate(
            {
                "page": page,
                "sort_by": sort_by,
                "sort_order": sort_order,
                "filters": filters,
            }
        )

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class ListQuery:
    filter: Dict[str, Any]
    sort: List[Tuple[str, int]]
    skip: int
    limit: int
    page: int


@dataclass
class Page(Generic[T]):
    items: List[T]
    total: int
    total_pages: int
    page: int
    limit: int


def total_pages(count: int, limit: int) -> int:
    """Number of pages needed to show ``count`` items, ``limit`` at a time."""
    if count <= 0:
        return 0
    return math.ceil(count / limit)


def substring_match(value: str) -> Dict[str, str]:
    """Case-insensitive "contains" match with regex metacharacters escaped."""
    return {"$regex": re.escape(value), "$options": "i"}


class QueryBuilder:
    """
    Builds list queries for one collection.

    ``sort_fields`` and ``search_fields`` map public parameter names
    (``createdAt``) to document fields (``created_at``). Unknown sort keys
    fall back to ``default_sort``; unknown filters are ignored.
    """

    def __init__(
        self,
        sort_fields: Mapping[str, str],
        default_sort: str,
        search_fields: Optional[Mapping[str, str]] = None,
    ):
        if default_sort not in sort_fields:
            raise ValueError(f"Default sort '{default_sort}' is not a sort field")
        self.sort_fields = dict(sort_fields)
        self.default_sort = default_sort
        self.search_fields = dict(search_fields or {})

    def build(
        self, params: ListParams, scope: Optional[Dict[str, Any]] = None
    ) -> ListQuery:
        query: Dict[str, Any] = dict(scope or {})
        for key, value in params.filters.items():
            field = self.search_fields.get(key)
            if field:
                query[field] = substring_match(value)

        sort_key = params.sort_by if params.sort_by in self.sort_fields else self.default_sort
        direction = params.sort_order.direction
        # _id breaks ties so pages stay stable and desc is the exact reverse of asc
        sort = [(self.sort_fields[sort_key], direction), ("_id", direction)]

        return ListQuery(
            filter=query,
            sort=sort,
            skip=params.skip,
            limit=params.limit,
            page=params.page,
        )

    def run(
        self,
        repo: BaseRepository,
        params: ListParams,
        scope: Optional[Dict[str, Any]] = None,
    ) -> Page:
        """Fetch one page from ``repo``; a page past the end is simply empty."""
        query = self.build(params, scope)
        items, total = repo.paginate(
            query.filter, sort=query.sort, skip=query.skip, limit=query.limit
        )
        return Page(
            items=items,
            total=total,
            total_pages=total_pages(total, query.limit),
            page=query.page,
            limit=query.limit,
        )


def combine(*conditions: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """AND together the non-empty conditions."""
    parts = [c for c in conditions if c]
    if not parts:
        return {}
    if len(parts) == 1:
        return dict(parts[0])
    return {"$and": parts}
