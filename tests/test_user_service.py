import unittest
from unittest.mock import MagicMock

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.core.security import verify_password
from app.dtos.user import PasswordUpdateRequest, SignupRequest, UserUpdateRequest
from app.models.user import UserType
from app.services.query_builder import ListParams
from app.services.user_service import UserService, ensure_bootstrap_admin
from tests.factories import make_user


class TestUserService(unittest.TestCase):
    def setUp(self):
        self.service = UserService(db=MagicMock())
        self.service.users = MagicMock()
        self.service.credentials.users = self.service.users
        self.admin = make_user(UserType.ADMIN)

    def test_list_users_scopes_by_type(self):
        client = make_user(UserType.CLIENT, name="Acme")
        self.service.users.paginate.return_value = ([client], 11)

        page = self.service.list_users(
            UserType.CLIENT, ListParams.from_request(sort_by="email", sort_order="desc")
        )

        query = self.service.users.paginate.call_args.args[0]
        self.assertEqual(query, {"type": "client"})
        self.assertEqual(page.total_pages, 2)
        self.assertEqual(page.items[0].name, "Acme")
        self.assertEqual(page.items[0].id, str(client.id))
        self.assertNotIn("hashed_password", page.items[0].model_dump())

    def test_signup_hashes_password(self):
        created = make_user(UserType.SUB_VENDOR)
        self.service.users.find_by_email.return_value = None
        self.service.users.create_user.return_value = created

        result = self.service.signup(
            SignupRequest(
                name=" Vendor Co ",
                email="Sales@Vendor.com",
                password="long-enough",
                type=UserType.SUB_VENDOR,
            )
        )

        kwargs = self.service.users.create_user.call_args.kwargs
        self.assertEqual(kwargs["name"], "Vendor Co")
        self.assertEqual(kwargs["email"], "sales@vendor.com")
        self.assertEqual(kwargs["user_type"], UserType.SUB_VENDOR)
        self.assertTrue(verify_password("long-enough", kwargs["hashed_password"]))
        self.assertEqual(result.id, str(created.id))

    def test_signup_rejects_short_password(self):
        with self.assertRaises(ValidationError) as ctx:
            self.service.signup(
                SignupRequest(name="A", email="a@example.com", password="short")
            )
        self.assertEqual(ctx.exception.code, "tooShort")
        self.service.users.create_user.assert_not_called()

    def test_signup_duplicate_email(self):
        self.service.users.find_by_email.return_value = make_user()
        with self.assertRaises(ConflictError):
            self.service.signup(
                SignupRequest(name="A", email="a@example.com", password="long-enough")
            )

    def test_signup_duplicate_key_race(self):
        self.service.users.find_by_email.return_value = None
        self.service.users.create_user.side_effect = DuplicateKeyError("dup")
        with self.assertRaises(ConflictError):
            self.service.signup(
                SignupRequest(name="A", email="a@example.com", password="long-enough")
            )

    def test_update_user_checks_type_and_email(self):
        target = make_user(UserType.CLIENT, email="old@example.com")
        updated = make_user(UserType.CLIENT, _id=target.id, email="new@example.com")
        self.service.users.find_by_id_and_type.return_value = target
        self.service.users.find_by_email.return_value = None
        self.service.users.update_one.return_value = updated

        result = self.service.update_user(
            str(target.id),
            UserUpdateRequest(email="NEW@example.com", type=UserType.CLIENT),
            self.admin,
        )

        self.service.users.find_by_id_and_type.assert_called_once_with(
            str(target.id), UserType.CLIENT
        )
        updates = self.service.users.update_one.call_args.args[1]
        self.assertEqual(updates["email"], "new@example.com")
        self.assertNotIn("type", updates)
        self.assertIn("updated_at", updates)
        self.assertEqual(result.email, "new@example.com")

    def test_update_user_email_taken(self):
        target = make_user(UserType.CLIENT, email="old@example.com")
        self.service.users.find_by_id_and_type.return_value = target
        self.service.users.find_by_email.return_value = make_user()
        with self.assertRaises(ConflictError):
            self.service.update_user(
                str(target.id), UserUpdateRequest(email="taken@example.com"), self.admin
            )
        self.service.users.update_one.assert_not_called()

    def test_update_other_user_requires_admin(self):
        actor = make_user(UserType.CLIENT)
        with self.assertRaises(PermissionDeniedError):
            self.service.update_user(str(ObjectId()), UserUpdateRequest(name="x"), actor)

    def test_update_unknown_user(self):
        self.service.users.find_by_id_and_type.return_value = None
        with self.assertRaises(NotFoundError):
            self.service.update_user(str(ObjectId()), UserUpdateRequest(name="x"), self.admin)

    def test_user_can_change_own_password(self):
        actor = make_user(UserType.SUB_VENDOR)
        self.service.users.find_by_id_and_type.return_value = actor
        self.service.users.set_password.return_value = actor

        result = self.service.change_password(
            str(actor.id),
            PasswordUpdateRequest(new_password="long-enough", confirm_password="long-enough"),
            actor,
        )
        self.assertEqual(result.id, actor.id)
        self.service.users.set_password.assert_called_once()

    def test_change_password_of_other_user_requires_admin(self):
        actor = make_user(UserType.CLIENT)
        with self.assertRaises(PermissionDeniedError):
            self.service.change_password(
                str(ObjectId()),
                PasswordUpdateRequest(new_password="long-enough", confirm_password="long-enough"),
                actor,
            )
        self.service.users.set_password.assert_not_called()

    def test_delete_missing_user_is_not_found(self):
        self.service.users.delete_one.return_value = False
        user_id = str(ObjectId())
        with self.assertRaises(NotFoundError):
            self.service.delete_user(user_id, UserType.CLIENT, self.admin)
        self.service.users.delete_one.assert_called_once_with(
            user_id, query={"type": "client"}
        )

    def test_delete_user(self):
        self.service.users.delete_one.return_value = True
        self.service.delete_user(str(ObjectId()), None, self.admin)
        self.assertIsNone(self.service.users.delete_one.call_args.kwargs["query"])

    def test_admin_cannot_delete_self(self):
        with self.assertRaises(ValidationError):
            self.service.delete_user(str(self.admin.id), UserType.ADMIN, self.admin)
        self.service.users.delete_one.assert_not_called()


class TestBootstrapAdmin(unittest.TestCase):
    def test_skipped_without_configuration(self):
        db = MagicMock()
        self.assertIsNone(ensure_bootstrap_admin(db, None, None, "Admin"))
        db.__getitem__.assert_not_called()

    def test_skipped_when_account_exists(self):
        db = MagicMock()
        db["users"].find_one.return_value = make_user(UserType.ADMIN).to_mongo()
        self.assertIsNone(
            ensure_bootstrap_admin(db, "root@example.com", "long-enough", "Admin")
        )
        db["users"].insert_one.assert_not_called()

    def test_creates_admin(self):
        db = MagicMock()
        db["users"].find_one.return_value = None
        db["users"].insert_one.return_value.inserted_id = ObjectId()

        admin = ensure_bootstrap_admin(db, "Root@Example.com", "long-enough", "Admin")

        self.assertEqual(admin.type, UserType.ADMIN)
        self.assertEqual(admin.email, "root@example.com")
        inserted = db["users"].insert_one.call_args.args[0]
        self.assertEqual(inserted["type"], UserType.ADMIN)
        self.assertNotIn("password", inserted)


if __name__ == "__main__":
    unittest.main()
