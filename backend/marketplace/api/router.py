"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter

from marketplace.api.routes import auth, users, vendors, vendor_legacy, products, bookings, categories, admin
from marketplace.core.config import get_settings

settings = get_settings()

api_router = APIRouter(prefix=settings.API_PREFIX)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(vendors.router)
api_router.include_router(vendor_legacy.router)
api_router.include_router(products.router)
api_router.include_router(bookings.router)
api_router.include_router(categories.router)
api_router.include_router(admin.router)
