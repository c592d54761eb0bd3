"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime, timezone
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

BookingStatus = Literal["pending", "confirmed", "completed", "cancelled"]


class BookingCreate(BaseModel):
    product_id: int
    vendor_id: Optional[int] = None
    date: datetime
    time: Optional[str] = Field(None, max_length=50)
    event_type: Optional[str] = Field(None, max_length=100)
    guest_count: int = Field(default=1, gt=0)
    special_requests: str = ""
    amount: Optional[float] = Field(None, ge=0)

    @field_validator("date")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class BookingStatusUpdate(BaseModel):
    status: BookingStatus
    reason: Optional[str] = None


class BookingReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    review: Optional[str] = None


class BookingResponse(BaseModel):
    id: int
    user_id: int
    vendor_id: int
    product_id: Optional[int] = None
    date: datetime
    time: str
    event_type: str
    guest_count: int
    special_requests: str
    amount: float
    status: str
    cancellation_reason: Optional[str] = None
    rating: Optional[int] = None
    review: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class BookingProductSummary(BaseModel):
    id: int
    name: str
    price: float
    category: str

    model_config = {"from_attributes": True}


class BookingCustomerSummary(BaseModel):
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}


class BookingVendorSummary(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class BookingDetailResponse(BookingResponse):
    product: Optional[BookingProductSummary] = None
    customer: Optional[BookingCustomerSummary] = None
    vendor: Optional[BookingVendorSummary] = None
