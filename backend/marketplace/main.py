"""
Event Marketplace API - Main Application Entry Point

Vendors publish bookable services, customers book them and vendors move
bookings through their lifecycle:
- One capability check per request (core.policy)
- One database transaction per request (db.session)
- Redis caching of the public category list
- Structured logging with request correlation
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from marketplace.core.config import get_settings
from marketplace.core.logging import setup_logging, get_logger
from marketplace.core.metrics import metrics_endpoint
from marketplace.api.router import api_router
from marketplace.api.middleware import RequestLoggingMiddleware
from marketplace.api.errors import register_exception_handlers
from marketplace.services.cache_service import get_redis, close_redis, get_cache_stats
from marketplace.services.storage_service import ensure_upload_dir

settings = get_settings()

UPLOAD_CACHE_CONTROL = "public, max-age=31557600"


class CachedStaticFiles(StaticFiles):
    """Static files with a one-year Cache-Control header."""

    def file_response(self, *args, **kwargs):
        response = super().file_response(*args, **kwargs)
        response.headers["Cache-Control"] = UPLOAD_CACHE_CONTROL
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        strict_booking_transitions=settings.STRICT_BOOKING_TRANSITIONS,
    )

    redis_client = await get_redis()
    if redis_client:
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Running without cache")

    yield

    await close_redis()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Marketplace API for event vendors, their products and customer bookings",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.include_router(api_router)

ensure_upload_dir()
app.mount(
    settings.UPLOAD_URL_PREFIX,
    CachedStaticFiles(directory=os.path.abspath(settings.UPLOAD_DIR)),
    name="uploads",
)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    cache_stats = await get_cache_stats()
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "cache": cache_stats,
    }


@app.get("/metrics", include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
