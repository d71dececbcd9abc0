from typing import Optional

from app.models.user import UserType
from .base import ApiModel
from .user import UserResponse


class LoginRequest(ApiModel):
    email: str
    password: str
    type: Optional[UserType] = None


class LoginResponse(ApiModel):
    user: UserResponse
    access_token: str
    token_type: str
    expires_in: int
