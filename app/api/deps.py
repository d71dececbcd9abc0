"""Common dependencies for API endpoints."""

from typing import Dict, Optional

from fastapi import Depends, Query

from app.database.mongo import get_db
from app.middleware.auth import get_current_user, require_admin, require_user_types
from app.services.query_builder import ListParams


def pagination_query(
    page: Optional[str] = Query(default=None, description="1-based page number"),
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    sort_order: Optional[str] = Query(
        default=None, alias="sortOrder", description="asc or desc"
    ),
) -> Dict[str, Optional[str]]:
    """Raw paging values; ListParams turns bad ones into defaults."""
    return {
        "page": page,
        "sort_by": sort_by,
        "sort_order": sort_order,
    }


def user_list_params(
    paging: Dict[str, Optional[str]] = Depends(pagination_query),
    name: Optional[str] = Query(default=None, description="Name contains"),
    email: Optional[str] = Query(default=None, description="Email contains"),
) -> ListParams:
    return ListParams.from_request(**paging, name=name, email=email)


__all__ = [
    "get_db",
    "get_current_user",
    "pagination_query",
    "require_admin",
    "require_user_types",
    "user_list_params",
]
