"""MongoDB connection helpers.

The client is created once in the application lifespan and kept on
``app.state``; request handlers receive the database through ``get_db``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from fastapi import Request
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from app.core.exceptions import StoreError

logger = logging.getLogger(__name__)


def create_client(uri: str, timeout_ms: int = 5000, **kwargs: Any) -> MongoClient:
    """Create a client with timezone-aware datetimes and a bounded server wait."""
    return MongoClient(
        uri,
        tz_aware=True,
        serverSelectionTimeoutMS=timeout_ms,
        **kwargs,
    )


def connect(uri: str, db_name: str, timeout_ms: int = 5000) -> tuple[MongoClient, Database]:
    """
    Open a client and verify the server answers a ping.
    Raises StoreError when the server cannot be reached.
    """
    client = create_client(uri, timeout_ms=timeout_ms)
    try:
        client.admin.command("ping")
    except PyMongoError as exc:
        client.close()
        raise StoreError(f"Could not connect to MongoDB: {exc}") from exc
    logger.info("MongoDB connected", extra={"database": db_name})
    return client, client[db_name]


def get_db(request: Request) -> Iterator[Database]:
    """FastAPI dependency that yields the database opened at startup."""
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise StoreError("Database is not initialised")
    yield db
