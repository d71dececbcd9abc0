"""Job postings: clients own them, admins manage all, sub-vendors browse open ones."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, Optional

from bson import ObjectId
from pymongo.database import Database

from app.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from app.dtos.job_posting import (
    JobPostingCreateRequest,
    JobPostingResponse,
    JobPostingUpdateRequest,
)
from app.models.base import utc_now
from app.models.job_posting import JobPosting, JobStatus
from app.models.user import User, UserType
from app.repositories.application import ApplicationRepository
from app.repositories.job_posting import JobPostingRepository
from app.repositories.user import UserRepository
from app.services.query_builder import ListParams, Page, QueryBuilder, combine

logger = logging.getLogger(__name__)

job_posting_queries = QueryBuilder(
    sort_fields={
        "title": "title",
        "location": "location",
        "status": "status",
        "createdAt": "created_at",
    },
    default_sort="createdAt",
    search_fields={"title": "title", "location": "location"},
)


def parse_object_id(value: str, field: str) -> ObjectId:
    if not ObjectId.is_valid(value):
        raise ValidationError(f"Invalid {field}", code="invalidId")
    return ObjectId(value)


class JobPostingService:
    def __init__(self, db: Database):
        self.db = db
        self.job_postings = JobPostingRepository(db)
        self.applications = ApplicationRepository(db)
        self.users = UserRepository(db)

    @staticmethod
    def visible_to(actor: User) -> Dict[str, Any]:
        """Filter limiting postings to those ``actor`` may read."""
        if actor.type == UserType.CLIENT:
            return {"client_id": actor.id}
        if actor.type == UserType.SUB_VENDOR:
            return {"status": JobStatus.OPEN.value}
        return {}

    @staticmethod
    def managed_by(actor: User) -> Dict[str, Any]:
        """Filter limiting postings to those ``actor`` may change."""
        if actor.type == UserType.ADMIN:
            return {}
        if actor.type == UserType.CLIENT:
            return {"client_id": actor.id}
        raise PermissionDeniedError("Only admins and clients manage job postings")

    def list_job_postings(
        self,
        actor: User,
        params: ListParams,
        status: Optional[JobStatus] = None,
        client_id: Optional[str] = None,
    ) -> Page:
        exact: Dict[str, Any] = {}
        if status:
            exact["status"] = status.value
        if client_id:
            exact["client_id"] = parse_object_id(client_id, "clientId")

        page = job_posting_queries.run(
            self.job_postings, params, scope=combine(self.visible_to(actor), exact)
        )
        return dataclasses.replace(
            page, items=[JobPostingResponse.from_entity(job) for job in page.items]
        )

    def get_job_posting(self, job_id: str, actor: User) -> JobPostingResponse:
        job = self.job_postings.find_by_id(job_id, query=self.visible_to(actor))
        if job is None:
            raise NotFoundError("Job posting not found")
        return JobPostingResponse.from_entity(job)

    def create_job_posting(
        self, payload: JobPostingCreateRequest, actor: User
    ) -> JobPostingResponse:
        self.managed_by(actor)
        if actor.type == UserType.CLIENT:
            client_id = actor.id
        else:
            if not payload.client_id:
                raise ValidationError("clientId is required", code="unknownClient")
            client = self.users.find_by_id_and_type(payload.client_id, UserType.CLIENT)
            if client is None:
                raise ValidationError("Unknown client", code="unknownClient")
            client_id = client.id

        job = self.job_postings.insert_one(
            JobPosting(
                title=payload.title.strip(),
                description=payload.description,
                location=payload.location,
                employment_type=payload.employment_type,
                openings=payload.openings,
                status=payload.status,
                client_id=client_id,
                created_by=actor.id,
            )
        )
        logger.info(
            "Job posting created",
            extra={"job_posting_id": str(job.id), "client_id": str(client_id)},
        )
        return JobPostingResponse.from_entity(job)

    def update_job_posting(
        self, job_id: str, payload: JobPostingUpdateRequest, actor: User
    ) -> JobPostingResponse:
        scope = self.managed_by(actor)
        updates = payload.model_dump(exclude_unset=True, exclude_none=True)
        if not updates:
            job = self.job_postings.find_by_id(job_id, query=scope)
        else:
            if "title" in updates:
                updates["title"] = updates["title"].strip()
            updates["updated_at"] = utc_now()
            job = self.job_postings.update_one(job_id, updates, query=scope)
        if job is None:
            raise NotFoundError("Job posting not found")
        return JobPostingResponse.from_entity(job)

    def delete_job_posting(self, job_id: str, actor: User) -> int:
        """Delete the posting and its applications; returns applications removed."""
        scope = self.managed_by(actor)
        if not self.job_postings.delete_one(job_id, query=scope):
            raise NotFoundError("Job posting not found")
        removed = self.applications.delete_for_job_posting(job_id)
        logger.info(
            "Job posting deleted",
            extra={"job_posting_id": job_id, "applications_removed": removed},
        )
        return removed
