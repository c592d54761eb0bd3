"""
Admin aggregate views: user and vendor listings and platform counts.
"""

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.booking import Booking
from marketplace.models.user import User
from marketplace.models.vendor import Vendor
from marketplace.schemas.admin import AdminStats, BookingStatusCounts
from marketplace.services.booking_service import count_by_status


async def list_users(db: AsyncSession) -> list[User]:
    result = await db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
    return list(result.scalars().all())


async def get_stats(db: AsyncSession) -> AdminStats:
    user_count = (await db.execute(select(func.count(User.id)))).scalar() or 0
    vendor_count = (await db.execute(select(func.count(Vendor.id)))).scalar() or 0
    booking_count = (await db.execute(select(func.count(Booking.id)))).scalar() or 0

    return AdminStats(
        user_count=user_count,
        vendor_count=vendor_count,
        booking_count=booking_count,
        booking_status=BookingStatusCounts(**await count_by_status(db)),
    )
