"""User entity - clients, sub-vendors and admins share one collection"""

from datetime import datetime
from enum import Enum
from typing import Optional

from .base import BaseEntity


class UserType(str, Enum):

    CLIENT = "client"
    SUB_VENDOR = "sub-vendor"
    ADMIN = "admin"


class User(BaseEntity):
    name: str
    email: str
    hashed_password: str
    type: UserType = UserType.CLIENT
    password_changed_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.type == UserType.ADMIN
