"""Repository exports."""

from .application import ApplicationRepository
from .base import BaseRepository, CollectionName
from .job_posting import JobPostingRepository
from .user import UserRepository

__all__ = [
    "ApplicationRepository",
    "BaseRepository",
    "CollectionName",
    "JobPostingRepository",
    "UserRepository",
]


def ensure_indexes(db) -> None:
    """Create indexes for every collection the API uses."""
    for repo_class in (UserRepository, JobPostingRepository, ApplicationRepository):
        repo_class(db).ensure_indexes()
