"""
Pydantic schemas for vendor profiles and admin vendor operations.
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, computed_field

from marketplace.models.vendor import DEFAULT_PROFILE_IMAGE
from marketplace.schemas.product import ProductResponse
from marketplace.services.storage_service import media_url


class VendorReview(BaseModel):
    user_id: Optional[int] = None
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    date: Optional[datetime] = None


class VendorCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    images: list[str] = Field(default_factory=list)


class VendorUpdate(BaseModel):
    """Legacy full-record update. Lifecycle status and ratings are not writable here."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    images: Optional[list[str]] = None
    owner_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    website: Optional[str] = None


class VendorProfileUpdate(BaseModel):
    name: Optional[str] = None
    owner_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    category: Optional[str] = None


class VendorResponse(BaseModel):
    id: int
    user_id: int
    name: str
    category: str
    description: str
    price: float
    profile_image: Optional[str] = None
    images: list[str] = Field(default_factory=list)
    status: str
    owner_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    website: Optional[str] = None
    rating: float = 0
    reviews: list[VendorReview] = Field(default_factory=list)
    created_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def profile_image_url(self) -> str:
        return media_url(self.profile_image or DEFAULT_PROFILE_IMAGE)

    @computed_field
    @property
    def image_urls(self) -> list[str]:
        return [media_url(image) for image in self.images]


class VendorWithProducts(VendorResponse):
    products: list[ProductResponse] = Field(default_factory=list)


class VendorStatusUpdate(BaseModel):
    status: Literal["pending", "active", "suspended"]


class VendorStatusSummary(BaseModel):
    id: int
    name: str
    status: str

    model_config = {"from_attributes": True}


class VendorStatusResponse(BaseModel):
    message: str
    vendor: VendorStatusSummary


class VendorDeleteDetails(BaseModel):
    products_deleted: int
    bookings_deleted: int
    user_deleted: bool
    vendor_deleted: bool


class VendorDeleteResponse(BaseModel):
    message: str
    details: VendorDeleteDetails


class ProfileImageResponse(BaseModel):
    message: str
    profile_image: str
    image_url: str
