"""Password hashing helpers (argon2 via pwdlib)."""

from __future__ import annotations

from pwdlib import PasswordHash
from pwdlib.exceptions import UnknownHashError

_password_hash = PasswordHash.recommended()


def hash_password(password: str) -> str:
    """Hash ``password`` with a random salt."""

    if not password:
        msg = "Password must not be empty"
        raise ValueError(msg)

    return _password_hash.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Return ``True`` if ``password`` matches ``hashed``."""

    if not password or not hashed:
        return False
    try:
        return _password_hash.verify(password, hashed)
    except UnknownHashError:
        return False


__all__ = ["hash_password", "verify_password"]
