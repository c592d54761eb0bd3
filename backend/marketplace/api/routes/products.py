"""
Product catalog endpoints. Writes are multipart forms carrying image files.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.db.session import get_db
from marketplace.schemas.product import ProductResponse, ProductListResponse
from marketplace.schemas.user import MessageResponse
from marketplace.services import product_service
from marketplace.core.policy import AccessPolicy, get_access_policy

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    vendor_id: Optional[int] = Query(None, description="Vendor id"),
    owner_id: Optional[int] = Query(None, description="User id of the vendor's owner"),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    sort: Literal["price_asc", "price_desc", "newest", "rating"] = Query("rating"),
    page: int = Query(1, ge=1),
    limit: int = Query(9, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """
    Filtered, paginated product listing. Not cached.
    An unknown vendor yields an empty page.
    """
    return await product_service.list_products(
        db,
        vendor_id=vendor_id,
        owner_id=owner_id,
        category=category,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        page=page,
        limit=limit,
    )


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    name: str = Form(..., min_length=1),
    description: str = Form(..., min_length=1),
    price: float = Form(..., ge=0),
    category: int = Form(..., description="Category id"),
    features: Optional[str] = Form(None, description="JSON list of strings"),
    is_available: bool = Form(True),
    images: list[UploadFile] = File(default=[]),
    policy: AccessPolicy = Depends(get_access_policy),
):
    return await product_service.create_product(
        policy,
        name=name,
        description=description,
        price=price,
        category_id=category,
        features=features,
        is_available=is_available,
        images=images,
    )


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[float] = Form(None, ge=0),
    category: Optional[int] = Form(None),
    features: Optional[str] = Form(None),
    is_available: Optional[bool] = Form(None),
    existing_images: Optional[str] = Form(None, description="JSON list of images to keep"),
    images: list[UploadFile] = File(default=[]),
    policy: AccessPolicy = Depends(get_access_policy),
):
    return await product_service.update_product(
        policy,
        product_id,
        name=name,
        description=description,
        price=price,
        category_id=category,
        features=features,
        is_available=is_available,
        existing_images=existing_images,
        images=images,
    )


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: int,
    policy: AccessPolicy = Depends(get_access_policy),
):
    await product_service.delete_product(policy, product_id)
    return MessageResponse(message="Product deleted successfully")
