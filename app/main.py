"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from app.api import (
    admins,
    applications,
    clients,
    health,
    job_postings,
    sub_vendors,
    users,
)
from app.config import settings
from app.core.exceptions import PortalError, StoreError
from app.core.logging import setup_logging
from app.database.mongo import connect
from app.middleware.request_logging import RequestLoggingMiddleware
from app.repositories import ensure_indexes
from app.services.user_service import ensure_bootstrap_admin

setup_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # A StoreError here aborts startup and the server process exits
    client, db = connect(
        settings.MONGODB_URI,
        settings.MONGODB_DB_NAME,
        timeout_ms=settings.MONGODB_TIMEOUT_MS,
    )
    app.state.mongo_client = client
    app.state.db = db
    try:
        ensure_indexes(db)
        ensure_bootstrap_admin(
            db,
            settings.BOOTSTRAP_ADMIN_EMAIL,
            settings.BOOTSTRAP_ADMIN_PASSWORD,
            settings.BOOTSTRAP_ADMIN_NAME,
        )
        yield
    finally:
        client.close()
        logger.info("MongoDB connection closed")


app = FastAPI(
    title=settings.APP_NAME,
    description="Admin and vendor dashboard API: clients, sub-vendors, job postings and applications",
    version=settings.APP_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    if exc.status_code >= 500:
        logger.error("Request failed: %s", exc.message, extra={"code": exc.code})
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


@app.exception_handler(PyMongoError)
async def store_error_handler(request: Request, exc: PyMongoError):
    logger.exception("Database operation failed")
    error = StoreError("Database operation failed")
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": error.message, "code": error.code},
    )


app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(users.router, prefix="/api")
app.include_router(clients.router, prefix="/api")
app.include_router(sub_vendors.router, prefix="/api")
app.include_router(admins.router, prefix="/api")
app.include_router(job_postings.router, prefix="/api")
app.include_router(applications.router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/api/docs",
    }
