import unittest
from unittest.mock import MagicMock

from bson import ObjectId

from app.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from app.dtos.job_posting import JobPostingCreateRequest, JobPostingUpdateRequest
from app.models.job_posting import JobStatus
from app.models.user import UserType
from app.services.job_posting_service import JobPostingService
from app.services.query_builder import ListParams
from tests.factories import make_job_posting, make_user


class TestJobPostingService(unittest.TestCase):
    def setUp(self):
        self.service = JobPostingService(db=MagicMock())
        self.service.job_postings = MagicMock()
        self.service.applications = MagicMock()
        self.service.users = MagicMock()
        self.admin = make_user(UserType.ADMIN)
        self.client = make_user(UserType.CLIENT)
        self.vendor = make_user(UserType.SUB_VENDOR)

    def test_visibility_by_user_type(self):
        self.assertEqual(JobPostingService.visible_to(self.admin), {})
        self.assertEqual(
            JobPostingService.visible_to(self.client), {"client_id": self.client.id}
        )
        self.assertEqual(JobPostingService.visible_to(self.vendor), {"status": "open"})

    def test_sub_vendors_cannot_manage(self):
        with self.assertRaises(PermissionDeniedError):
            JobPostingService.managed_by(self.vendor)

    def test_list_combines_visibility_and_filters(self):
        client_id = ObjectId()
        self.service.job_postings.paginate.return_value = ([make_job_posting()], 1)

        page = self.service.list_job_postings(
            self.vendor,
            ListParams.from_request(title="eng"),
            status=JobStatus.CLOSED,
            client_id=str(client_id),
        )

        query = self.service.job_postings.paginate.call_args.args[0]
        self.assertEqual(
            query["$and"],
            [{"status": "open"}, {"status": "closed", "client_id": client_id}],
        )
        self.assertEqual(query["title"], {"$regex": "eng", "$options": "i"})
        self.assertEqual(page.total_pages, 1)

    def test_list_rejects_malformed_client_id(self):
        with self.assertRaises(ValidationError):
            self.service.list_job_postings(
                self.admin, ListParams.from_request(), client_id="not-an-id"
            )

    def test_client_always_owns_created_posting(self):
        self.service.job_postings.insert_one.side_effect = lambda job: job.model_copy(
            update={"id": ObjectId()}
        )
        other_client = ObjectId()

        result = self.service.create_job_posting(
            JobPostingCreateRequest(title="  Data Engineer ", client_id=str(other_client)),
            self.client,
        )

        self.assertEqual(result.client_id, str(self.client.id))
        self.assertEqual(result.title, "Data Engineer")
        self.assertEqual(result.created_by, str(self.client.id))
        self.service.users.find_by_id_and_type.assert_not_called()

    def test_admin_must_name_an_existing_client(self):
        with self.assertRaises(ValidationError) as ctx:
            self.service.create_job_posting(JobPostingCreateRequest(title="x"), self.admin)
        self.assertEqual(ctx.exception.code, "unknownClient")

        self.service.users.find_by_id_and_type.return_value = None
        with self.assertRaises(ValidationError):
            self.service.create_job_posting(
                JobPostingCreateRequest(title="x", client_id=str(ObjectId())), self.admin
            )
        self.service.job_postings.insert_one.assert_not_called()

    def test_update_scoped_to_owner(self):
        job = make_job_posting(client_id=self.client.id, status=JobStatus.CLOSED)
        self.service.job_postings.update_one.return_value = job

        result = self.service.update_job_posting(
            str(job.id), JobPostingUpdateRequest(status=JobStatus.CLOSED), self.client
        )

        args, kwargs = self.service.job_postings.update_one.call_args
        self.assertEqual(args[1]["status"], JobStatus.CLOSED)
        self.assertEqual(kwargs["query"], {"client_id": self.client.id})
        self.assertEqual(result.status, JobStatus.CLOSED)

    def test_update_missing_posting(self):
        self.service.job_postings.update_one.return_value = None
        with self.assertRaises(NotFoundError):
            self.service.update_job_posting(
                str(ObjectId()), JobPostingUpdateRequest(title="x"), self.admin
            )

    def test_delete_removes_applications(self):
        self.service.job_postings.delete_one.return_value = True
        self.service.applications.delete_for_job_posting.return_value = 3
        job_id = str(ObjectId())

        self.assertEqual(self.service.delete_job_posting(job_id, self.admin), 3)
        self.service.applications.delete_for_job_posting.assert_called_once_with(job_id)

    def test_delete_missing_posting(self):
        self.service.job_postings.delete_one.return_value = False
        with self.assertRaises(NotFoundError):
            self.service.delete_job_posting(str(ObjectId()), self.client)
        self.service.applications.delete_for_job_posting.assert_not_called()


if __name__ == "__main__":
    unittest.main()
