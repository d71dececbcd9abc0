"""Request logging middleware to trace requests, durations and identity.

- Adds a unique X-Request-ID header to responses (and reuses any incoming one)
- Logs method, path, status, duration, client IP and the token subject
- Never logs request/response bodies; they carry passwords
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Optional

from jose import jwt
from jose.exceptions import JWTError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings


logger = logging.getLogger("app.request")


def _token_subject(request: Request) -> Optional[str]:
    token = request.cookies.get("access_token")
    if not token:
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.lower().startswith("bearer "):
            token = auth_header.split(None, 1)[1]
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        # Invalid or expired; the auth dependency reports it
        return None
    return payload.get("sub")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        start = time.monotonic()

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        user_sub = _token_subject(request)

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = int((time.monotonic() - start) * 1000)
            logger.exception(
                "Unhandled exception during request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "client_ip": request.client.host if request.client else None,
                    "request_id": request_id,
                    "duration_ms": duration_ms,
                    "user_sub": user_sub,
                },
            )
            raise

        duration_ms = int((time.monotonic() - start) * 1000)

        logger.info(
            "Request finished",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": duration_ms,
                "client_ip": request.client.host if request.client else None,
                "request_id": request_id,
                "user_sub": user_sub,
            },
        )

        response.headers.setdefault("X-Request-ID", request_id)
        return response
