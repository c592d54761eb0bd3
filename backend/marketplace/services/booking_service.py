"""
Booking ledger service: creation, role-scoped listing, status changes, reviews.

STATUS TRANSITIONS
==================

Lenient mode (default):
  Any caller who passes the access policy may set any status from any
  status, and repeating a change is a no-op success. This keeps manual
  overrides possible (e.g. re-opening a booking cancelled by mistake).

Strict mode (STRICT_BOOKING_TRANSITIONS=true):

    pending ──► confirmed ──► completed
       │            │
       └──► cancelled ◄┘

  completed and cancelled are terminal. Anything else is a 409.

In both modes `amount` is never touched after creation: it is the price
snapshot taken when the booking was made.
"""

from typing import Optional

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from marketplace.models.booking import Booking, BOOKING_STATUSES
from marketplace.models.product import Product
from marketplace.models.user import User
from marketplace.models.vendor import Vendor
from marketplace.schemas.booking import (
    BookingCreate,
    BookingReviewCreate,
    BookingResponse,
    BookingDetailResponse,
    BookingProductSummary,
    BookingCustomerSummary,
    BookingVendorSummary,
)
from marketplace.core.config import get_settings
from marketplace.core.context import RequestContext
from marketplace.core.logging import get_logger
from marketplace.core.metrics import record_booking_attempt, record_booking_transition
from marketplace.core.policy import AccessPolicy, Action

logger = get_logger(__name__)
settings = get_settings()

ALLOWED_TRANSITIONS = {
    "pending": frozenset({"confirmed", "cancelled"}),
    "confirmed": frozenset({"completed", "cancelled"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
}


def check_transition(current: str, target: str, strict: bool) -> None:
    if target not in BOOKING_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid status value: {target}",
        )
    if strict and target not in ALLOWED_TRANSITIONS.get(current, frozenset()):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot change booking status from '{current}' to '{target}'",
        )


async def create_booking(db: AsyncSession, ctx: RequestContext, data: BookingCreate) -> Booking:
    """
    Create a pending booking for the caller.
    Vendor and amount are derived from the product unless supplied.
    """
    product = await db.get(Product, data.product_id)
    if not product:
        record_booking_attempt("not_found")
        logger.warning("booking_failed_product_not_found", product_id=data.product_id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    vendor_id = data.vendor_id or product.vendor_id
    if data.vendor_id and not await db.get(Vendor, data.vendor_id):
        record_booking_attempt("not_found")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vendor not found",
        )

    amount = data.amount if data.amount is not None else (product.price or 0)

    booking = Booking(
        user_id=ctx.user_id,
        vendor_id=vendor_id,
        product_id=product.id,
        date=data.date,
        time=data.time or data.date.strftime("%H:%M"),
        event_type=data.event_type or "Other",
        guest_count=data.guest_count,
        special_requests=data.special_requests or "",
        amount=amount,
        status="pending",
    )
    db.add(booking)
    await db.flush()
    await db.refresh(booking)

    record_booking_attempt("created")
    logger.info(
        "booking_created",
        booking_id=booking.id,
        user_id=ctx.user_id,
        product_id=product.id,
        vendor_id=vendor_id,
        amount=amount,
    )
    return booking


def _detail_query():
    return (
        select(Booking, Product, User, Vendor)
        .outerjoin(Product, Product.id == Booking.product_id)
        .outerjoin(User, User.id == Booking.user_id)
        .outerjoin(Vendor, Vendor.id == Booking.vendor_id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )


def _to_detail(booking: Booking, product: Optional[Product], user: Optional[User], vendor: Optional[Vendor]) -> BookingDetailResponse:
    base = BookingResponse.model_validate(booking).model_dump()
    return BookingDetailResponse(
        **base,
        product=BookingProductSummary.model_validate(product) if product else None,
        customer=BookingCustomerSummary.model_validate(user) if user else None,
        vendor=BookingVendorSummary.model_validate(vendor) if vendor else None,
    )


async def _fetch_details(db: AsyncSession, query) -> list[BookingDetailResponse]:
    result = await db.execute(query)
    return [_to_detail(*row) for row in result.all()]


async def list_bookings(policy: AccessPolicy) -> list[BookingDetailResponse]:
    """
    Vendors see bookings on their products or addressed to them.
    Everyone else sees the bookings they made.
    """
    ctx = policy.ctx
    query = _detail_query()

    if await policy.authorize(Action.VIEW_VENDOR_BOOKINGS):
        vendor = await policy.require_own_vendor()
        vendor_products = select(Product.id).where(Product.vendor_id == vendor.id)
        query = query.where(
            or_(Booking.vendor_id == vendor.id, Booking.product_id.in_(vendor_products))
        )
    else:
        query = query.where(Booking.user_id == ctx.user_id)

    bookings = await _fetch_details(policy.db, query)
    logger.info("bookings_listed", user_id=ctx.user_id, role=ctx.role, count=len(bookings))
    return bookings


async def list_all_bookings(db: AsyncSession) -> list[BookingDetailResponse]:
    return await _fetch_details(db, _detail_query())


async def get_booking(db: AsyncSession, booking_id: int) -> Booking:
    booking = await db.get(Booking, booking_id)
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )
    return booking


async def update_booking_status(
    policy: AccessPolicy,
    booking_id: int,
    new_status: str,
    reason: Optional[str] = None,
) -> Booking:
    """
    Overwrite a booking's status after the access check.
    Only status (and the reason, when cancelling) is written.
    """
    db = policy.db
    booking = await get_booking(db, booking_id)
    await policy.require(Action.CHANGE_BOOKING_STATUS, booking, target_status=new_status)

    previous = booking.status
    check_transition(previous, new_status, settings.STRICT_BOOKING_TRANSITIONS)

    booking.status = new_status
    if new_status == "cancelled":
        booking.cancellation_reason = reason

    await db.flush()
    await db.refresh(booking)

    record_booking_transition(new_status, policy.ctx.role)
    logger.info(
        "booking_status_changed",
        booking_id=booking.id,
        previous=previous,
        status=new_status,
        changed_by=policy.ctx.user_id,
        role=policy.ctx.role,
    )
    return booking


async def add_review(policy: AccessPolicy, booking_id: int, data: BookingReviewCreate) -> Booking:
    """
    Attach the customer's rating and review. Not gated on status, and the
    vendor's own rating/review list is left untouched.
    """
    db = policy.db
    booking = await get_booking(db, booking_id)
    await policy.require(Action.REVIEW_BOOKING, booking)

    booking.rating = data.rating
    booking.review = data.review
    await db.flush()
    await db.refresh(booking)

    logger.info("booking_reviewed", booking_id=booking.id, rating=data.rating)
    return booking


async def count_by_status(db: AsyncSession) -> dict[str, int]:
    result = await db.execute(select(Booking.status, func.count()).group_by(Booking.status))
    counts = {s: 0 for s in BOOKING_STATUSES}
    counts.update({row[0]: row[1] for row in result.all()})
    return counts
