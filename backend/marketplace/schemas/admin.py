"""
Pydantic schemas for admin aggregate views.
"""

from pydantic import BaseModel


class BookingStatusCounts(BaseModel):
    pending: int = 0
    confirmed: int = 0
    completed: int = 0
    cancelled: int = 0


class AdminStats(BaseModel):
    user_count: int
    vendor_count: int
    booking_count: int
    booking_status: BookingStatusCounts
