"""Repository for candidate applications."""

from typing import Union

from bson import ObjectId
from pymongo import ASCENDING

from app.models.application import Application
from .base import BaseRepository, CollectionName


class ApplicationRepository(BaseRepository[Application]):
    def __init__(self, db):
        super().__init__(db, CollectionName.APPLICATIONS, Application)

    def ensure_indexes(self) -> None:
        self.collection.create_index(
            [("job_posting_id", ASCENDING), ("candidate_email", ASCENDING)],
            unique=True,
        )
        self.collection.create_index("sub_vendor_id")

    def delete_for_job_posting(self, job_posting_id: Union[str, ObjectId]) -> int:
        identifier = self._to_object_id(job_posting_id)
        if identifier is None:
            return 0
        return self.delete_many({"job_posting_id": identifier})


__all__ = ["ApplicationRepository"]
