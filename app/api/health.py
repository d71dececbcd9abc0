"""
Health check endpoints
"""
from fastapi import APIRouter, Depends
from pymongo.database import Database
from pymongo.errors import PyMongoError

from app.config import settings
from app.database.mongo import get_db
from app.models.base import utc_now

router = APIRouter()


@router.get("/health")
def health_check():
    """Simple API health check."""
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": settings.APP_NAME,
    }


@router.get("/health/db")
def database_health(db: Database = Depends(get_db)):
    """MongoDB health check."""
    try:
        db.command("ping")
    except PyMongoError as exc:
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(exc),
            "timestamp": utc_now().isoformat(),
        }

    return {
        "status": "healthy",
        "database": "connected",
        "timestamp": utc_now().isoformat(),
    }
