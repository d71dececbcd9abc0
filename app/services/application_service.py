"""Candidate applications submitted by sub-vendors against job postings."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, Optional

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.dtos.application import (
    ApplicationCreateRequest,
    ApplicationResponse,
    ApplicationStatusUpdateRequest,
)
from app.models.application import Application, ApplicationStatus
from app.models.base import utc_now
from app.models.job_posting import JobStatus
from app.models.user import User, UserType
from app.repositories.application import ApplicationRepository
from app.repositories.job_posting import JobPostingRepository
from app.services.job_posting_service import parse_object_id
from app.services.query_builder import ListParams, Page, QueryBuilder, combine

logger = logging.getLogger(__name__)

application_queries = QueryBuilder(
    sort_fields={
        "candidateName": "candidate_name",
        "candidateEmail": "candidate_email",
        "status": "status",
        "createdAt": "created_at",
    },
    default_sort="createdAt",
    search_fields={
        "candidateName": "candidate_name",
        "candidateEmail": "candidate_email",
    },
)


class ApplicationService:
    def __init__(self, db: Database):
        self.db = db
        self.applications = ApplicationRepository(db)
        self.job_postings = JobPostingRepository(db)

    def visible_to(self, actor: User) -> Dict[str, Any]:
        """Admins see everything, clients their postings' applications, sub-vendors their own."""
        if actor.type == UserType.SUB_VENDOR:
            return {"sub_vendor_id": actor.id}
        if actor.type == UserType.CLIENT:
            return {"job_posting_id": {"$in": self.job_postings.ids_for_client(actor.id)}}
        return {}

    def list_applications(
        self,
        actor: User,
        params: ListParams,
        status: Optional[ApplicationStatus] = None,
        job_posting_id: Optional[str] = None,
    ) -> Page:
        exact: Dict[str, Any] = {}
        if status:
            exact["status"] = status.value
        if job_posting_id:
            exact["job_posting_id"] = parse_object_id(job_posting_id, "jobPostingId")

        page = application_queries.run(
            self.applications, params, scope=combine(self.visible_to(actor), exact)
        )
        return dataclasses.replace(
            page,
            items=[ApplicationResponse.from_entity(item) for item in page.items],
        )

    def get_application(self, application_id: str, actor: User) -> ApplicationResponse:
        application = self.applications.find_by_id(
            application_id, query=self.visible_to(actor)
        )
        if application is None:
            raise NotFoundError("Application not found")
        return ApplicationResponse.from_entity(application)

    def create_application(
        self, payload: ApplicationCreateRequest, actor: User
    ) -> ApplicationResponse:
        if actor.type != UserType.SUB_VENDOR:
            raise PermissionDeniedError("Only sub-vendors submit applications")

        job = self.job_postings.find_by_id(payload.job_posting_id)
        if job is None:
            raise NotFoundError("Job posting not found")
        if job.status != JobStatus.OPEN:
            raise ValidationError("Job posting is not accepting applications", code="jobClosed")

        duplicate = self.applications.find_one(
            {"job_posting_id": job.id, "candidate_email": payload.candidate_email}
        )
        if duplicate is not None:
            raise ConflictError(
                "Candidate already applied to this job posting",
                code="duplicateApplication",
            )

        try:
            application = self.applications.insert_one(
                Application(
                    job_posting_id=job.id,
                    sub_vendor_id=actor.id,
                    candidate_name=payload.candidate_name.strip(),
                    candidate_email=payload.candidate_email,
                    candidate_phone=payload.candidate_phone,
                    resume_url=payload.resume_url,
                    notes=payload.notes,
                )
            )
        except DuplicateKeyError:
            raise ConflictError(
                "Candidate already applied to this job posting",
                code="duplicateApplication",
            )

        logger.info(
            "Application submitted",
            extra={"application_id": str(application.id), "job_posting_id": str(job.id)},
        )
        return ApplicationResponse.from_entity(application)

    def update_status(
        self,
        application_id: str,
        payload: ApplicationStatusUpdateRequest,
        actor: User,
    ) -> ApplicationResponse:
        if actor.type == UserType.SUB_VENDOR:
            raise PermissionDeniedError("Sub-vendors cannot change application status")
        application = self.applications.update_one(
            application_id,
            {"status": payload.status.value, "updated_at": utc_now()},
            query=self.visible_to(actor),
        )
        if application is None:
            raise NotFoundError("Application not found")
        return ApplicationResponse.from_entity(application)

    def delete_application(self, application_id: str, actor: User) -> None:
        if actor.type == UserType.CLIENT:
            raise PermissionDeniedError("Clients cannot delete applications")
        if not self.applications.delete_one(
            application_id, query=self.visible_to(actor)
        ):
            raise NotFoundError("Application not found")
