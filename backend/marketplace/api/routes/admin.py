"""
Admin endpoints. Every route requires an admin caller.
"""

from fastapi import APIRouter, Depends, status

from marketplace.schemas.admin import AdminStats
from marketplace.schemas.booking import BookingResponse, BookingDetailResponse, BookingStatusUpdate
from marketplace.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryWithStats,
    CategoryDeleteResponse,
)
from marketplace.schemas.user import UserResponse
from marketplace.schemas.vendor import (
    VendorResponse,
    VendorStatusUpdate,
    VendorStatusResponse,
    VendorStatusSummary,
    VendorDeleteResponse,
)
from marketplace.services import admin_service, booking_service, category_service, vendor_service
from marketplace.core.policy import AccessPolicy, require_admin

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/users", response_model=list[UserResponse])
async def list_users(policy: AccessPolicy = Depends(require_admin)):
    return await admin_service.list_users(policy.db)


@router.get("/vendors", response_model=list[VendorResponse])
async def list_vendors(policy: AccessPolicy = Depends(require_admin)):
    return await vendor_service.list_vendors(policy.db)


@router.put("/vendors/{vendor_id}/status", response_model=VendorStatusResponse)
async def update_vendor_status(
    vendor_id: int,
    data: VendorStatusUpdate,
    policy: AccessPolicy = Depends(require_admin),
):
    vendor = await vendor_service.set_vendor_status(policy.db, vendor_id, data.status)
    return VendorStatusResponse(
        message=f"Vendor status updated to {vendor.status}",
        vendor=VendorStatusSummary.model_validate(vendor),
    )


@router.delete("/vendors/{vendor_id}", response_model=VendorDeleteResponse)
async def delete_vendor(vendor_id: int, policy: AccessPolicy = Depends(require_admin)):
    """Delete a vendor with its products, related bookings and owning user, atomically."""
    details = await vendor_service.delete_vendor_cascade(policy.db, vendor_id)
    return VendorDeleteResponse(
        message="Vendor and associated data deleted successfully",
        details=details,
    )


@router.get("/bookings", response_model=list[BookingDetailResponse])
async def list_bookings(policy: AccessPolicy = Depends(require_admin)):
    return await booking_service.list_all_bookings(policy.db)


@router.put("/bookings/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: int,
    data: BookingStatusUpdate,
    policy: AccessPolicy = Depends(require_admin),
):
    return await booking_service.update_booking_status(policy, booking_id, data.status, data.reason)


@router.get("/stats", response_model=AdminStats)
async def stats(policy: AccessPolicy = Depends(require_admin)):
    return await admin_service.get_stats(policy.db)


@router.get("/categories", response_model=list[CategoryWithStats])
async def list_categories(policy: AccessPolicy = Depends(require_admin)):
    return await category_service.list_categories_with_stats(policy.db)


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(data: CategoryCreate, policy: AccessPolicy = Depends(require_admin)):
    return await category_service.create_category(policy.db, data)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    policy: AccessPolicy = Depends(require_admin),
):
    return await category_service.update_category(policy.db, category_id, data)


@router.delete("/categories/{category_id}", response_model=CategoryDeleteResponse)
async def delete_category(category_id: int, policy: AccessPolicy = Depends(require_admin)):
    """Vendors still using the category keep it alive as inactive."""
    message, category = await category_service.delete_category(policy.db, category_id)
    return CategoryDeleteResponse(
        message=message,
        category=CategoryResponse.model_validate(category) if category else None,
    )
