from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from app.api.deps import get_current_user, get_db, pagination_query, require_user_types
from app.dtos import (
    ApplicationCreateRequest,
    ApplicationEnvelope,
    ApplicationListResponse,
    ApplicationStatusUpdateRequest,
    SuccessResponse,
)
from app.models.application import ApplicationStatus
from app.models.user import User, UserType
from app.services.application_service import ApplicationService
from app.services.query_builder import ListParams

router = APIRouter(prefix="/application", tags=["Applications"])


def application_list_params(
    paging: Dict[str, Optional[str]] = Depends(pagination_query),
    candidate_name: Optional[str] = Query(default=None, alias="candidateName"),
    candidate_email: Optional[str] = Query(default=None, alias="candidateEmail"),
) -> ListParams:
    return ListParams.from_request(
        **paging, candidateName=candidate_name, candidateEmail=candidate_email
    )


@router.get("", response_model=ApplicationListResponse)
def list_applications(
    params: ListParams = Depends(application_list_params),
    status: Optional[ApplicationStatus] = Query(default=None),
    job_posting_id: Optional[str] = Query(default=None, alias="jobPostingId"),
    db: Database = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    page = ApplicationService(db).list_applications(
        current_user, params, status=status, job_posting_id=job_posting_id
    )
    return ApplicationListResponse(
        applications=page.items,
        total_pages=page.total_pages,
        total=page.total,
        page=page.page,
    )


@router.post("", response_model=ApplicationEnvelope, status_code=201)
def create_application(
    payload: ApplicationCreateRequest,
    db: Database = Depends(get_db),
    current_user: User = Depends(require_user_types(UserType.SUB_VENDOR)),
):
    """Submit a candidate to an open job posting."""
    application = ApplicationService(db).create_application(payload, current_user)
    return ApplicationEnvelope(application=application)


@router.get("/{application_id}", response_model=ApplicationEnvelope)
def get_application(
    application_id: str,
    db: Database = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    application = ApplicationService(db).get_application(application_id, current_user)
    return ApplicationEnvelope(application=application)


@router.patch("/{application_id}/status", response_model=ApplicationEnvelope)
def update_application_status(
    application_id: str,
    payload: ApplicationStatusUpdateRequest,
    db: Database = Depends(get_db),
    current_user: User = Depends(require_user_types(UserType.ADMIN, UserType.CLIENT)),
):
    application = ApplicationService(db).update_status(
        application_id, payload, current_user
    )
    return ApplicationEnvelope(application=application)


@router.delete("/{application_id}", response_model=SuccessResponse)
def delete_application(
    application_id: str,
    db: Database = Depends(get_db),
    current_user: User = Depends(require_user_types(UserType.ADMIN, UserType.SUB_VENDOR)),
):
    ApplicationService(db).delete_application(application_id, current_user)
    return SuccessResponse(message="Application deleted successfully")
