"""Repository for job postings."""

from typing import List, Union

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING

from app.models.job_posting import JobPosting
from .base import BaseRepository, CollectionName


class JobPostingRepository(BaseRepository[JobPosting]):
    def __init__(self, db):
        super().__init__(db, CollectionName.JOB_POSTINGS, JobPosting)

    def ensure_indexes(self) -> None:
        self.collection.create_index(
            [("client_id", ASCENDING), ("created_at", DESCENDING)]
        )
        self.collection.create_index("status")

    def ids_for_client(self, client_id: Union[str, ObjectId]) -> List[ObjectId]:
        """Ids of every posting owned by ``client_id``."""
        identifier = self._to_object_id(client_id)
        if identifier is None:
            return []
        return list(self.collection.distinct("_id", {"client_id": identifier}))


__all__ = ["JobPostingRepository"]
