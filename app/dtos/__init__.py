"""Data Transfer Objects (DTOs) for API requests and responses"""

from .application import (
    ApplicationCreateRequest,
    ApplicationEnvelope,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatusUpdateRequest,
)
from .auth import LoginRequest, LoginResponse
from .base import ApiModel, BaseResponse, PageMeta, SuccessResponse
from .job_posting import (
    JobPostingCreateRequest,
    JobPostingEnvelope,
    JobPostingListResponse,
    JobPostingResponse,
    JobPostingUpdateRequest,
)
from .user import (
    AdminListResponse,
    ClientListResponse,
    PasswordUpdateRequest,
    SignupRequest,
    SubVendorListResponse,
    UserEnvelope,
    UserResponse,
    UserTypeBody,
    UserUpdateRequest,
)

__all__ = [
    # Application
    "ApplicationCreateRequest",
    "ApplicationEnvelope",
    "ApplicationListResponse",
    "ApplicationResponse",
    "ApplicationStatusUpdateRequest",
    # Auth
    "LoginRequest",
    "LoginResponse",
    # Base
    "ApiModel",
    "BaseResponse",
    "PageMeta",
    "SuccessResponse",
    # Job posting
    "JobPostingCreateRequest",
    "JobPostingEnvelope",
    "JobPostingListResponse",
    "JobPostingResponse",
    "JobPostingUpdateRequest",
    # User
    "AdminListResponse",
    "ClientListResponse",
    "PasswordUpdateRequest",
    "SignupRequest",
    "SubVendorListResponse",
    "UserEnvelope",
    "UserResponse",
    "UserTypeBody",
    "UserUpdateRequest",
]
