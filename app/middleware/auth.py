"""Authentication dependencies for FastAPI."""

from __future__ import annotations

from typing import Callable, Optional

from fastapi import Cookie, Depends, Header, HTTPException, status
from pymongo.database import Database

from app.database.mongo import get_db
from app.models.user import User, UserType
from app.repositories.user import UserRepository
from app.services.auth_service import (
    decode_access_token,
    token_predates_password_change,
)

ACCESS_TOKEN_COOKIE = "access_token"


def _credentials_error(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_token_payload(
    access_token: Optional[str] = Cookie(None),
    authorization: Optional[str] = Header(None),
) -> dict:
    token = None

    # Cookie first (browser dashboards), then Authorization header
    if access_token:
        token = access_token
    elif authorization and authorization.startswith("Bearer "):
        token = authorization.replace("Bearer ", "", 1)

    if not token:
        raise _credentials_error("Not authenticated. Please login.")

    payload = decode_access_token(token)
    if not payload.get("sub"):
        raise _credentials_error("Invalid authentication credentials")
    return payload


def get_current_user(
    payload: dict = Depends(get_token_payload),
    db: Database = Depends(get_db),
) -> User:
    user = UserRepository(db).find_by_id(payload["sub"])
    if user is None:
        raise _credentials_error("User not found")
    if token_predates_password_change(payload, user):
        raise _credentials_error("Session expired after password change. Please login again.")
    return user


def require_user_types(*allowed: UserType) -> Callable[..., User]:
    """Dependency factory restricting a route to the given account types."""

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.type not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have access to this resource",
            )
        return current_user

    return dependency


async def require_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user
