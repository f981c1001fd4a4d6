"""
Main FastAPI application entry point.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.core.config import settings
from app.core.database import init_db, close_db
from app.core.exceptions import register_exception_handlers
from app.core.logging import configure_logging
from app.api import albums, photos, stories
from app.routers import sharing
from app.services.storage_factory import get_storage_service

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: pick the storage backend once, before serving requests
    get_storage_service()
    await init_db()
    logger.info(f"{settings.APP_NAME} started with storage provider '{settings.STORAGE_PROVIDER}'")
    yield
    # Shutdown
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=API_VERSION,
    description="Photo albums and stories with expiring public share links",
    lifespan=lifespan,
)

register_exception_handlers(app)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Security headers middleware
@app.middleware("http")
async def add_security_headers(request, call_next):
    response = await call_next(request)
    response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
    return response

# Include routers
app.include_router(albums.router, prefix="/api/v1/albums", tags=["albums"])
app.include_router(photos.router, prefix="/api/v1/photos", tags=["photos"])
app.include_router(stories.router, prefix="/api/v1/stories", tags=["stories"])
app.include_router(sharing.router, prefix="/api/v1", tags=["sharing"])


@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "name": settings.APP_NAME,
        "version": API_VERSION,
        "storage_provider": settings.STORAGE_PROVIDER,
        "status": "running"
    }


@app.get("/healthz")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}
