"""
Pydantic schemas for the category taxonomy.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class CategoryCreate(BaseModel):
    name: str = Field(..., max_length=100)
    description: str
    icon: Optional[str] = Field(None, max_length=16)

    @field_validator("name", "description")
    @classmethod
    def not_blank(cls, v: str, info) -> str:
        v = v.strip()
        if not v:
            raise ValueError(f"Category {info.field_name} is required")
        return v


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=16)
    is_active: Optional[bool] = None


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: str
    icon: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class CategoryWithStats(CategoryResponse):
    vendor_count: int = 0


class CategoryDeleteResponse(BaseModel):
    message: str
    category: Optional[CategoryResponse] = None
