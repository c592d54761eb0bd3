"""
Pydantic schemas for product catalog responses.

Product writes arrive as multipart forms and are validated in the route
signature, so there is no create schema here.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ProductImage(BaseModel):
    url: str
    name: Optional[str] = None
    size: Optional[int] = None


class ProductResponse(BaseModel):
    id: int
    vendor_id: int
    name: str
    description: str
    price: float
    category: str
    images: list[ProductImage] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    is_available: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProductListItem(ProductResponse):
    vendor_name: Optional[str] = None


class ProductListResponse(BaseModel):
    products: list[ProductListItem]
    total: int
    total_pages: int
    current_page: int
    has_more: bool
