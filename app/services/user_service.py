"""User account service: signup, profile edits, password changes, listings."""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.core.security import hash_password
from app.dtos.user import (
    PasswordUpdateRequest,
    SignupRequest,
    UserResponse,
    UserUpdateRequest,
)
from app.models.base import utc_now
from app.models.user import User, UserType
from app.repositories.user import UserRepository
from app.services.credentials import (
    CredentialManager,
    check_password_length,
    normalize_email,
)
from app.services.query_builder import ListParams, Page, QueryBuilder

logger = logging.getLogger(__name__)

user_queries = QueryBuilder(
    sort_fields={"name": "name", "email": "email", "createdAt": "created_at"},
    default_sort="name",
    search_fields={"name": "name", "email": "email"},
)


def _type_scope(user_type: Optional[UserType]) -> Optional[dict]:
    return {"type": user_type.value} if user_type else None


class UserService:
    def __init__(self, db: Database):
        self.db = db
        self.users = UserRepository(db)
        self.credentials = CredentialManager(self.users)

    def list_users(self, user_type: UserType, params: ListParams) -> Page:
        """One page of users of ``user_type``, items as UserResponse."""
        page = user_queries.run(self.users, params, scope=_type_scope(user_type))
        return dataclasses.replace(
            page, items=[UserResponse.from_entity(user) for user in page.items]
        )

    def get_user(
        self, user_id: str, user_type: Optional[UserType] = None
    ) -> UserResponse:
        user = self.users.find_by_id_and_type(user_id, user_type)
        if user is None:
            raise NotFoundError("User not found")
        return UserResponse.from_entity(user)

    def signup(self, payload: SignupRequest) -> UserResponse:
        check_password_length(payload.password)
        email = normalize_email(payload.email)
        if self.users.find_by_email(email) is not None:
            raise ConflictError("Email already in use", code="emailTaken")

        try:
            user = self.users.create_user(
                name=payload.name.strip(),
                email=email,
                hashed_password=hash_password(payload.password),
                user_type=payload.type,
            )
        except DuplicateKeyError:
            raise ConflictError("Email already in use", code="emailTaken")

        logger.info(
            "User created", extra={"user_id": str(user.id), "type": user.type.value}
        )
        return UserResponse.from_entity(user)

    def update_user(
        self, user_id: str, payload: UserUpdateRequest, actor: User
    ) -> UserResponse:
        ensure_can_manage(actor, user_id)
        user = self.users.find_by_id_and_type(user_id, payload.type)
        if user is None:
            raise NotFoundError("User not found")

        updates = payload.model_dump(
            exclude_unset=True, exclude_none=True, exclude={"type"}
        )
        if "name" in updates:
            updates["name"] = updates["name"].strip()
        if "email" in updates and updates["email"] != user.email:
            if self.users.find_by_email(updates["email"]) is not None:
                raise ConflictError("Email already in use", code="emailTaken")
        if not updates:
            return UserResponse.from_entity(user)

        updates["updated_at"] = utc_now()
        try:
            updated = self.users.update_one(user.id, updates)
        except DuplicateKeyError:
            raise ConflictError("Email already in use", code="emailTaken")
        if updated is None:
            raise NotFoundError("User not found")
        return UserResponse.from_entity(updated)

    def change_password(
        self, user_id: str, payload: PasswordUpdateRequest, actor: User
    ) -> User:
        ensure_can_manage(actor, user_id)
        return self.credentials.change_password(
            user_id,
            payload.new_password,
            payload.confirm_password,
            user_type=payload.type,
        )

    def delete_user(
        self, user_id: str, user_type: Optional[UserType], actor: User
    ) -> None:
        if str(actor.id) == user_id:
            raise ValidationError("You cannot delete your own account", code="selfDelete")
        if not self.users.delete_one(user_id, query=_type_scope(user_type)):
            raise NotFoundError("User not found")
        logger.info("User deleted", extra={"user_id": user_id})


def ensure_can_manage(actor: User, user_id: str) -> None:
    """Admins manage every account; everyone else only their own."""
    if actor.is_admin or str(actor.id) == user_id:
        return
    raise PermissionDeniedError("You can only manage your own account")


def ensure_bootstrap_admin(
    db: Database, email: Optional[str], password: Optional[str], name: str
) -> Optional[User]:
    """Create the first admin account when configured and missing."""
    if not email or not password:
        return None
    users = UserRepository(db)
    email = normalize_email(email)
    if users.find_by_email(email) is not None:
        return None

    check_password_length(password)
    try:
        admin = users.create_user(
            name=name,
            email=email,
            hashed_password=hash_password(password),
            user_type=UserType.ADMIN,
        )
    except DuplicateKeyError:
        # Another worker created it first
        return None
    logger.info("Bootstrap admin created", extra={"user_id": str(admin.id)})
    return admin
