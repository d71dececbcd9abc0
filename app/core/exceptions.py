"""Domain errors raised by services and translated to HTTP responses in main."""

from typing import Optional


class PortalError(Exception):
    status_code = 500
    default_code = "error"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class ValidationError(PortalError):
    status_code = 400
    default_code = "invalid"


class AuthenticationError(PortalError):
    status_code = 401
    default_code = "invalidCredentials"


class PermissionDeniedError(PortalError):
    status_code = 403
    default_code = "forbidden"


class NotFoundError(PortalError):
    status_code = 404
    default_code = "notFound"


class ConflictError(PortalError):
    status_code = 409
    default_code = "conflict"


class StoreError(PortalError):
    status_code = 503
    default_code = "storeUnavailable"
