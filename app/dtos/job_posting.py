"""Job posting DTOs"""

from typing import List, Optional

from pydantic import Field

from app.models.base import PyObjectIdStr
from app.models.job_posting import JobStatus
from .base import ApiModel, BaseResponse, PageMeta


class JobPostingCreateRequest(ApiModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = None
    openings: int = Field(default=1, ge=1)
    status: JobStatus = JobStatus.OPEN
    client_id: Optional[PyObjectIdStr] = Field(
        default=None,
        description="Owning client; ignored for client callers, who always own their postings",
    )


class JobPostingUpdateRequest(ApiModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = None
    openings: Optional[int] = Field(default=None, ge=1)
    status: Optional[JobStatus] = None


class JobPostingResponse(BaseResponse):
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = None
    openings: int = 1
    status: JobStatus
    client_id: PyObjectIdStr
    created_by: Optional[PyObjectIdStr] = None


class JobPostingEnvelope(ApiModel):
    job_posting: JobPostingResponse


class JobPostingListResponse(PageMeta):
    job_postings: List[JobPostingResponse]
