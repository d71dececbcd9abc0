"""Job posting entity - an opening published for a client"""

from enum import Enum
from typing import Optional

from pydantic import Field

from .base import BaseEntity, PyObjectId


class JobStatus(str, Enum):

    OPEN = "open"
    ON_HOLD = "on-hold"
    CLOSED = "closed"


class JobPosting(BaseEntity):
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = None
    openings: int = Field(default=1, ge=1)
    status: JobStatus = JobStatus.OPEN
    client_id: PyObjectId
    created_by: Optional[PyObjectId] = None
