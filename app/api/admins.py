from fastapi import APIRouter, Depends
from pymongo.database import Database

from app.api.deps import get_db, require_admin, user_list_params
from app.dtos import AdminListResponse, UserEnvelope
from app.models.user import User, UserType
from app.services.query_builder import ListParams
from app.services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["Admins"])


@router.get("", response_model=AdminListResponse)
def list_admins(
    params: ListParams = Depends(user_list_params),
    db: Database = Depends(get_db),
    _: User = Depends(require_admin),
):
    page = UserService(db).list_users(UserType.ADMIN, params)
    return AdminListResponse(
        admins=page.items,
        total_pages=page.total_pages,
        total=page.total,
        page=page.page,
    )


@router.get("/{user_id}", response_model=UserEnvelope)
def get_admin(
    user_id: str,
    db: Database = Depends(get_db),
    _: User = Depends(require_admin),
):
    return UserEnvelope(user=UserService(db).get_user(user_id, UserType.ADMIN))
