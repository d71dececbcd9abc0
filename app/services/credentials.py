"""Password validation, hashing and verification for user accounts."""

from __future__ import annotations

import logging
from typing import Optional, Union

from bson import ObjectId

from app.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from app.core.security import hash_password, verify_password
from app.models.base import utc_now
from app.models.user import User, UserType
from app.repositories.user import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def check_password_length(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
            code="tooShort",
        )


def validate_new_password(
    new_password: str, confirm_password: Optional[str] = None
) -> None:
    """Match check first when a confirmation was sent, then length."""
    if confirm_password is not None and new_password != confirm_password:
        raise ValidationError("Passwords don't match", code="mismatch")
    check_password_length(new_password)


class CredentialManager:
    def __init__(self, users: UserRepository):
        self.users = users

    def change_password(
        self,
        user_id: Union[str, ObjectId],
        new_password: str,
        confirm_password: Optional[str] = None,
        user_type: Optional[UserType] = None,
    ) -> User:
        """
        Validate and store a new password for ``user_id``.

        Nothing is written unless validation passes. The change time is stored
        so access tokens issued before it stop being accepted.
        """
        validate_new_password(new_password, confirm_password)

        user = self.users.find_by_id_and_type(user_id, user_type)
        if user is None:
            raise NotFoundError("User not found")

        updated = self.users.set_password(
            user.id, hash_password(new_password), changed_at=utc_now()
        )
        if updated is None:
            raise NotFoundError("User not found")
        logger.info("Password changed", extra={"user_id": str(user.id)})
        return updated

    def authenticate(
        self, email: str, password: str, user_type: Optional[UserType] = None
    ) -> User:
        """Return the user for a valid email/password pair."""
        user = self.users.find_by_email(normalize_email(email))
        if (
            user is None
            or (user_type is not None and user.type != user_type)
            or not verify_password(password, user.hashed_password)
        ):
            raise AuthenticationError("Invalid email or password")
        return user


def normalize_email(email: str) -> str:
    return email.strip().lower()
