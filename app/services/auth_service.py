from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import HTTPException, status
from jose import JWTError, jwt
from pymongo.database import Database

from app.config import settings
from app.dtos.auth import LoginRequest, LoginResponse
from app.dtos.user import UserResponse
from app.models.user import User
from app.repositories.user import UserRepository
from app.services.credentials import CredentialManager


class AuthService:
    def __init__(self, db: Database):
        self.db = db
        self.credentials = CredentialManager(UserRepository(db))

    def login(self, payload: LoginRequest) -> LoginResponse:
        user = self.credentials.authenticate(
            payload.email, payload.password, payload.type
        )
        return issue_login_response(user)


def issue_login_response(user: User) -> LoginResponse:
    return LoginResponse(
        user=UserResponse.from_entity(user),
        access_token=create_access_token(subject=str(user.id), role=user.type.value),
        token_type="bearer",
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def create_access_token(
    subject: str,
    role: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(subject),
        "exp": now + expires_delta,
        # Milliseconds, the precision MongoDB keeps for password_changed_at
        "iat": _to_millis(now) / 1000,
        "type": "access",
    }
    if role:
        payload["role"] = role
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate an access token; expiry is checked by jose."""
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Could not validate credentials: {str(e)}",
        )

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token type"
        )
    return payload


def token_predates_password_change(payload: dict[str, Any], user: User) -> bool:
    """True when the token was issued before the user's last password change."""
    if user.password_changed_at is None:
        return False
    issued_at = payload.get("iat")
    if issued_at is None:
        return True
    changed_at = user.password_changed_at
    if changed_at.tzinfo is None:
        changed_at = changed_at.replace(tzinfo=timezone.utc)
    return round(float(issued_at) * 1000) < _to_millis(changed_at)
