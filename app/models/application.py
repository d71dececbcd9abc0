"""Application entity - a candidate submitted by a sub-vendor to a job posting"""

from enum import Enum
from typing import Optional

from .base import BaseEntity, PyObjectId


class ApplicationStatus(str, Enum):

    SUBMITTED = "submitted"
    SCREENING = "screening"
    INTERVIEW = "interview"
    OFFERED = "offered"
    HIRED = "hired"
    REJECTED = "rejected"


class Application(BaseEntity):
    job_posting_id: PyObjectId
    sub_vendor_id: PyObjectId
    candidate_name: str
    candidate_email: str
    candidate_phone: Optional[str] = None
    resume_url: Optional[str] = None
    notes: Optional[str] = None
    status: ApplicationStatus = ApplicationStatus.SUBMITTED
