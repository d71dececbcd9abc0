"""Application DTOs"""

from typing import List, Optional

from pydantic import Field, field_validator

from app.models.application import ApplicationStatus
from app.models.base import PyObjectIdStr
from .base import ApiModel, BaseResponse, PageMeta
from .user import clean_email


class ApplicationCreateRequest(ApiModel):
    job_posting_id: PyObjectIdStr
    candidate_name: str = Field(..., min_length=1)
    candidate_email: str
    candidate_phone: Optional[str] = None
    resume_url: Optional[str] = None
    notes: Optional[str] = None

    normalize_email = field_validator("candidate_email")(clean_email)


class ApplicationStatusUpdateRequest(ApiModel):
    status: ApplicationStatus


class ApplicationResponse(BaseResponse):
    job_posting_id: PyObjectIdStr
    sub_vendor_id: PyObjectIdStr
    candidate_name: str
    candidate_email: str
    candidate_phone: Optional[str] = None
    resume_url: Optional[str] = None
    notes: Optional[str] = None
    status: ApplicationStatus


class ApplicationEnvelope(ApiModel):
    application: ApplicationResponse


class ApplicationListResponse(PageMeta):
    applications: List[ApplicationResponse]
