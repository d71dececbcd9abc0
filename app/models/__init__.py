"""Database entities."""

from .application import Application, ApplicationStatus
from .base import BaseEntity, PyObjectId, PyObjectIdStr
from .job_posting import JobPosting, JobStatus
from .user import User, UserType

__all__ = [
    "Application",
    "ApplicationStatus",
    "BaseEntity",
    "JobPosting",
    "JobStatus",
    "PyObjectId",
    "PyObjectIdStr",
    "User",
    "UserType",
]
