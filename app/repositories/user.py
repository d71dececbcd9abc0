"""Repository for users (clients, sub-vendors and admins)."""

from datetime import datetime
from typing import Optional, Union

from bson import ObjectId
from pymongo import ASCENDING

from app.models.base import utc_now
from app.models.user import User, UserType
from .base import BaseRepository, CollectionName


class UserRepository(BaseRepository[User]):
    def __init__(self, db):
        super().__init__(db, CollectionName.USERS, User)

    def ensure_indexes(self) -> None:
        self.collection.create_index("email", unique=True)
        self.collection.create_index([("type", ASCENDING), ("name", ASCENDING)])

    def find_by_email(self, email: str) -> Optional[User]:
        return self.find_one({"email": email})

    def find_by_id_and_type(
        self, user_id: Union[str, ObjectId], user_type: Optional[UserType] = None
    ) -> Optional[User]:
        query = {"type": user_type.value} if user_type else None
        return self.find_by_id(user_id, query=query)

    def create_user(
        self, name: str, email: str, hashed_password: str, user_type: UserType
    ) -> User:
        return self.insert_one(
            User(
                name=name,
                email=email,
                hashed_password=hashed_password,
                type=user_type,
            )
        )

    def set_password(
        self,
        user_id: Union[str, ObjectId],
        hashed_password: str,
        changed_at: Optional[datetime] = None,
    ) -> Optional[User]:
        changed_at = changed_at or utc_now()
        return self.update_one(
            user_id,
            {
                "hashed_password": hashed_password,
                "password_changed_at": changed_at,
                "updated_at": changed_at,
            },
        )


__all__ = ["UserRepository"]
