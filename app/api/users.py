"""Account endpoints shared by both dashboards: signup, login, edits, deletes."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, Response, status
from pymongo.database import Database

from app.config import settings
from app.database.mongo import get_db
from app.dtos import (
    LoginRequest,
    LoginResponse,
    PasswordUpdateRequest,
    SignupRequest,
    SuccessResponse,
    UserEnvelope,
    UserResponse,
    UserTypeBody,
    UserUpdateRequest,
)
from app.middleware.auth import ACCESS_TOKEN_COOKIE, get_current_user, require_admin
from app.models.user import User
from app.services.auth_service import AuthService, create_access_token
from app.services.user_service import UserService

router = APIRouter(prefix="/user", tags=["Users"])


def set_access_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=token,
        httponly=True,
        secure=not settings.DEBUG,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )


@router.post("/signup", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupRequest,
    db: Database = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Create a client, sub-vendor or admin account."""
    return UserEnvelope(user=UserService(db).signup(payload))


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, response: Response, db: Database = Depends(get_db)):
    result = AuthService(db).login(payload)
    set_access_cookie(response, result.access_token)
    return result


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(response: Response):
    """Logout user by clearing the session cookie."""
    response.delete_cookie(
        key=ACCESS_TOKEN_COOKIE,
        path="/",
        httponly=True,
        secure=not settings.DEBUG,
        samesite="lax",
    )


@router.get("/me", response_model=UserEnvelope)
def get_me(current_user: User = Depends(get_current_user)):
    return UserEnvelope(user=UserResponse.from_entity(current_user))


@router.patch("/update-password/{user_id}", response_model=SuccessResponse)
def update_password(
    user_id: str,
    payload: PasswordUpdateRequest,
    response: Response,
    db: Database = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Change a password. Sessions issued before the change stop working."""
    user = UserService(db).change_password(user_id, payload, current_user)
    if user.id == current_user.id:
        # Keep the caller signed in on the session making the change
        set_access_cookie(
            response, create_access_token(subject=str(user.id), role=user.type.value)
        )
    return SuccessResponse(message="Password updated successfully")


@router.patch("/{user_id}", response_model=UserEnvelope)
def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    db: Database = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return UserEnvelope(user=UserService(db).update_user(user_id, payload, current_user))


@router.delete("/{user_id}", response_model=SuccessResponse)
def delete_user(
    user_id: str,
    payload: Optional[UserTypeBody] = Body(default=None),
    db: Database = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user_type = payload.type if payload else None
    UserService(db).delete_user(user_id, user_type, current_user)
    return SuccessResponse(message="User deleted successfully")
