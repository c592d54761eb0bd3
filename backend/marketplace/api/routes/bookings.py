"""
Booking endpoints: create, role-scoped listing, status changes and reviews.
"""

from fastapi import APIRouter, Depends, status

from marketplace.schemas.booking import (
    BookingCreate,
    BookingResponse,
    BookingDetailResponse,
    BookingStatusUpdate,
    BookingReviewCreate,
)
from marketplace.services import booking_service
from marketplace.core.policy import AccessPolicy, get_access_policy

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    policy: AccessPolicy = Depends(get_access_policy),
):
    """
    Book a product. The amount is snapshotted from the product price unless
    given explicitly, and later price changes do not affect it.
    """
    return await booking_service.create_booking(policy.db, policy.ctx, booking_data)


@router.get("", response_model=list[BookingDetailResponse])
async def list_bookings(policy: AccessPolicy = Depends(get_access_policy)):
    """Vendors get bookings for their products; other callers get their own."""
    return await booking_service.list_bookings(policy)


@router.put("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: int,
    data: BookingStatusUpdate,
    policy: AccessPolicy = Depends(get_access_policy),
):
    return await booking_service.update_booking_status(policy, booking_id, data.status, data.reason)


@router.post("/{booking_id}/review", response_model=BookingResponse)
async def review_booking(
    booking_id: int,
    data: BookingReviewCreate,
    policy: AccessPolicy = Depends(get_access_policy),
):
    return await booking_service.add_review(policy, booking_id, data)
