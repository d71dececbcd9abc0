"""Client listing for the admin dashboard."""

from fastapi import APIRouter, Depends
from pymongo.database import Database

from app.api.deps import get_db, require_admin, user_list_params
from app.dtos import ClientListResponse, UserEnvelope
from app.models.user import User, UserType
from app.services.query_builder import ListParams
from app.services.user_service import UserService

router = APIRouter(prefix="/client", tags=["Clients"])


@router.get("", response_model=ClientListResponse)
def list_clients(
    params: ListParams = Depends(user_list_params),
    db: Database = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Paginated, sortable client list filtered by name/email substrings."""
    page = UserService(db).list_users(UserType.CLIENT, params)
    return ClientListResponse(
        clients=page.items,
        total_pages=page.total_pages,
        total=page.total,
        page=page.page,
    )


@router.get("/{user_id}", response_model=UserEnvelope)
def get_client(
    user_id: str,
    db: Database = Depends(get_db),
    _: User = Depends(require_admin),
):
    return UserEnvelope(user=UserService(db).get_user(user_id, UserType.CLIENT))
