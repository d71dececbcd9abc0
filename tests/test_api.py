import unittest
from datetime import timedelta
from unittest.mock import MagicMock, patch

from bson import ObjectId
from fastapi.testclient import TestClient

from app.core.exceptions import NotFoundError, ValidationError
from app.core.security import verify_password
from app.database.mongo import get_db
from app.dtos import LoginResponse, UserResponse
from app.main import app
from app.middleware.auth import get_current_user
from app.models.base import utc_now
from app.models.user import UserType
from app.services.auth_service import create_access_token
from app.services.query_builder import DEFAULT_PAGE_SIZE, Page, SortOrder
from tests.factories import make_user


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.db = MagicMock()
        app.dependency_overrides[get_db] = lambda: self.db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def login_as(self, user):
        app.dependency_overrides[get_current_user] = lambda: user
        return user


class TestClientListEndpoint(ApiTestCase):
    def test_requires_authentication(self):
        response = self.client.get("/api/client")
        self.assertEqual(response.status_code, 401)

    def test_requires_admin(self):
        self.login_as(make_user(UserType.SUB_VENDOR))
        response = self.client.get("/api/client")
        self.assertEqual(response.status_code, 403)

    def test_lists_clients_with_raw_params(self):
        self.login_as(make_user(UserType.ADMIN))
        client = UserResponse.from_entity(make_user(UserType.CLIENT, name="Acme"))
        page = Page(items=[client], total=11, total_pages=2, page=1, limit=10)

        with patch("app.api.clients.UserService") as service_cls:
            service_cls.return_value.list_users.return_value = page
            response = self.client.get(
                "/api/client",
                params={
                    "page": "abc",
                    "limit": "50",
                    "sortBy": "email",
                    "sortOrder": "DESC",
                    "name": "",
                    "email": "acme",
                },
            )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["totalPages"], 2)
        self.assertEqual(body["clients"][0]["name"], "Acme")
        self.assertEqual(body["clients"][0]["_id"], client.id)
        self.assertNotIn("hashedPassword", body["clients"][0])

        user_type, params = service_cls.return_value.list_users.call_args.args
        self.assertEqual(user_type, UserType.CLIENT)
        self.assertEqual(params.page, 1)
        self.assertEqual(params.limit, DEFAULT_PAGE_SIZE)
        self.assertEqual(params.sort_by, "email")
        self.assertEqual(params.sort_order, SortOrder.DESC)
        self.assertEqual(params.filters, {"email": "acme"})


class TestUserEndpoints(ApiTestCase):
    def test_login_sets_session_cookie(self):
        user = make_user(UserType.SUB_VENDOR)
        login_response = LoginResponse(
            user=UserResponse.from_entity(user),
            access_token="token-value",
            token_type="bearer",
            expires_in=3600,
        )
        with patch("app.api.users.AuthService") as service_cls:
            service_cls.return_value.login.return_value = login_response
            response = self.client.post(
                "/api/user/login",
                json={"email": user.email, "password": "long-enough"},
            )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["accessToken"], "token-value")
        self.assertIn("access_token=token-value", response.headers["set-cookie"])

    def test_password_mismatch_is_a_400(self):
        actor = self.login_as(make_user(UserType.ADMIN))
        with patch("app.api.users.UserService") as service_cls:
            service_cls.return_value.change_password.side_effect = ValidationError(
                "Passwords don't match", code="mismatch"
            )
            response = self.client.patch(
                f"/api/user/update-password/{ObjectId()}",
                json={"newPassword": "long-enough", "confirmPassword": "different", "type": "client"},
            )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"detail": "Passwords don't match", "code": "mismatch"})
        payload = service_cls.return_value.change_password.call_args.args[1]
        self.assertEqual(payload.type, UserType.CLIENT)
        self.assertIs(service_cls.return_value.change_password.call_args.args[2], actor)

    def test_own_password_change_reissues_cookie(self):
        actor = self.login_as(make_user(UserType.CLIENT))
        with patch("app.api.users.UserService") as service_cls:
            service_cls.return_value.change_password.return_value = actor
            response = self.client.patch(
                f"/api/user/update-password/{actor.id}",
                json={"newPassword": "long-enough", "confirmPassword": "long-enough"},
            )

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["success"])
        self.assertIn("access_token=", response.headers["set-cookie"])

    def test_password_change_without_confirmation_is_stored(self):
        self.login_as(make_user(UserType.ADMIN))
        target = make_user(UserType.CLIENT)
        users = self.db["users"]
        users.find_one.return_value = target.to_mongo()
        users.find_one_and_update.return_value = target.to_mongo()

        response = self.client.patch(
            f"/api/user/update-password/{target.id}",
            json={"newPassword": "long-enough", "type": "client"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["success"])
        self.assertEqual(users.find_one.call_args.args[0], {"type": "client", "_id": target.id})
        stored = users.find_one_and_update.call_args.args[1]["$set"]
        self.assertTrue(verify_password("long-enough", stored["hashed_password"]))
        self.assertNotIn("set-cookie", response.headers)

    def test_delete_unknown_user_is_a_404(self):
        self.login_as(make_user(UserType.ADMIN))
        with patch("app.api.users.UserService") as service_cls:
            service_cls.return_value.delete_user.side_effect = NotFoundError("User not found")
            response = self.client.request(
                "DELETE", f"/api/user/{ObjectId()}", json={"type": "client"}
            )

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["code"], "notFound")
        self.assertEqual(service_cls.return_value.delete_user.call_args.args[1], UserType.CLIENT)

    def test_signup_requires_admin(self):
        self.login_as(make_user(UserType.CLIENT))
        response = self.client.post(
            "/api/user/signup",
            json={"name": "A", "email": "a@example.com", "password": "long-enough", "type": "client"},
        )
        self.assertEqual(response.status_code, 403)

    def test_signup_response_uses_underscore_id(self):
        self.login_as(make_user(UserType.ADMIN))
        users = self.db["users"]
        users.find_one.return_value = None
        new_id = ObjectId()
        users.insert_one.return_value.inserted_id = new_id

        response = self.client.post(
            "/api/user/signup",
            json={"name": "Acme", "email": "acme@example.com", "password": "long-enough", "type": "client"},
        )

        self.assertEqual(response.status_code, 201)
        user = response.json()["user"]
        self.assertEqual(user["_id"], str(new_id))
        self.assertNotIn("id", user)
        self.assertNotIn("hashedPassword", user)


class TestSessionValidation(ApiTestCase):
    def test_token_issued_before_password_change_is_rejected(self):
        user = make_user(UserType.CLIENT)
        token = create_access_token(subject=str(user.id))
        changed = make_user(
            UserType.CLIENT,
            _id=user.id,
            password_changed_at=utc_now() + timedelta(days=1),
        )
        self.db["users"].find_one.return_value = changed.to_mongo()

        response = self.client.get(
            "/api/user/me", headers={"Authorization": f"Bearer {token}"}
        )
        self.assertEqual(response.status_code, 401)

    def test_valid_bearer_token(self):
        user = make_user(UserType.CLIENT, name="Acme")
        token = create_access_token(subject=str(user.id))
        self.db["users"].find_one.return_value = user.to_mongo()

        response = self.client.get(
            "/api/user/me", headers={"Authorization": f"Bearer {token}"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["name"], "Acme")
        self.assertNotIn("hashedPassword", response.json()["user"])


if __name__ == "__main__":
    unittest.main()
