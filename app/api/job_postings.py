from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from app.api.deps import get_current_user, get_db, pagination_query, require_user_types
from app.dtos import (
    JobPostingCreateRequest,
    JobPostingEnvelope,
    JobPostingListResponse,
    JobPostingUpdateRequest,
    SuccessResponse,
)
from app.models.job_posting import JobStatus
from app.models.user import User, UserType
from app.services.job_posting_service import JobPostingService
from app.services.query_builder import ListParams

router = APIRouter(prefix="/jobPosting", tags=["Job Postings"])

require_manager = require_user_types(UserType.ADMIN, UserType.CLIENT)


def job_posting_list_params(
    paging: Dict[str, Optional[str]] = Depends(pagination_query),
    title: Optional[str] = Query(default=None, description="Title contains"),
    location: Optional[str] = Query(default=None, description="Location contains"),
) -> ListParams:
    return ListParams.from_request(**paging, title=title, location=location)


@router.get("", response_model=JobPostingListResponse)
def list_job_postings(
    params: ListParams = Depends(job_posting_list_params),
    status: Optional[JobStatus] = Query(default=None),
    client_id: Optional[str] = Query(default=None, alias="clientId"),
    db: Database = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List the postings visible to the caller."""
    page = JobPostingService(db).list_job_postings(
        current_user, params, status=status, client_id=client_id
    )
    return JobPostingListResponse(
        job_postings=page.items,
        total_pages=page.total_pages,
        total=page.total,
        page=page.page,
    )


@router.post("", response_model=JobPostingEnvelope, status_code=201)
def create_job_posting(
    payload: JobPostingCreateRequest,
    db: Database = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    job = JobPostingService(db).create_job_posting(payload, current_user)
    return JobPostingEnvelope(job_posting=job)


@router.get("/{job_id}", response_model=JobPostingEnvelope)
def get_job_posting(
    job_id: str,
    db: Database = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    job = JobPostingService(db).get_job_posting(job_id, current_user)
    return JobPostingEnvelope(job_posting=job)


@router.patch("/{job_id}", response_model=JobPostingEnvelope)
def update_job_posting(
    job_id: str,
    payload: JobPostingUpdateRequest,
    db: Database = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    job = JobPostingService(db).update_job_posting(job_id, payload, current_user)
    return JobPostingEnvelope(job_posting=job)


@router.delete("/{job_id}", response_model=SuccessResponse)
def delete_job_posting(
    job_id: str,
    db: Database = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    """Delete a posting together with its applications."""
    JobPostingService(db).delete_job_posting(job_id, current_user)
    return SuccessResponse(message="Job posting deleted successfully")
