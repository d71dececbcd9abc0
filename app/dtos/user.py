"""User DTOs"""

from typing import List, Optional

from pydantic import Field, field_validator

from app.models.user import UserType
from .base import ApiModel, BaseResponse, PageMeta


def clean_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().lower()
    if "@" not in value or value.startswith("@") or value.endswith("@"):
        raise ValueError("Invalid email address")
    return value


class UserResponse(BaseResponse):
    name: str
    email: str
    type: UserType


class UserEnvelope(ApiModel):
    user: UserResponse


class SignupRequest(ApiModel):
    name: str = Field(..., min_length=1)
    email: str
    password: str
    type: UserType = UserType.CLIENT

    normalize_email = field_validator("email")(clean_email)


class UserUpdateRequest(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    # Identifies which kind of account is being edited; it is not changed.
    type: Optional[UserType] = None

    normalize_email = field_validator("email")(clean_email)


class PasswordUpdateRequest(ApiModel):
    new_password: str
    # The admin dashboard checks the match itself and sends only newPassword.
    confirm_password: Optional[str] = None
    type: Optional[UserType] = None


class UserTypeBody(ApiModel):
    type: Optional[UserType] = None


class ClientListResponse(PageMeta):
    clients: List[UserResponse]


class SubVendorListResponse(PageMeta):
    sub_vendors: List[UserResponse]


class AdminListResponse(PageMeta):
    admins: List[UserResponse]
