"""
Product catalog service: vendor-owned CRUD and the public filtered listing.

LISTING QUERY
=============

Filters are conjunctive:
  - vendor:   vendor id (`vendor_id`) or the owning user id (`owner_id`).
              User and vendor ids overlap, so one is never tried as the other.
              An unknown id yields an empty page, not an error.
  - category: exact category name ("all" disables the filter)
  - search:   case-insensitive substring of name OR description
  - price:    inclusive min/max

Sort keys: price_asc, price_desc, newest, rating (default). Products carry no
rating of their own, so "rating" orders by the owning vendor's aggregate
rating. Ties break on id so pages are stable. Pagination is offset based.
"""

import json
import math
from typing import Optional

from sqlalchemy import select, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, UploadFile, status

from marketplace.models.booking import Booking
from marketplace.models.category import Category
from marketplace.models.product import Product
from marketplace.models.vendor import Vendor
from marketplace.schemas.product import ProductListItem
from marketplace.core.config import get_settings
from marketplace.core.logging import get_logger
from marketplace.core.policy import AccessPolicy, Action
from marketplace.db.session import after_commit
from marketplace.services import storage_service

logger = get_logger(__name__)
settings = get_settings()

SORT_KEYS = ("price_asc", "price_desc", "newest", "rating")


def parse_json_list(raw: Optional[str], field: str) -> Optional[list]:
    if raw is None or raw == "":
        return None
    try:
        value = json.loads(raw)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {field} format",
        )
    if not isinstance(value, list):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {field} format",
        )
    return value


async def resolve_category_name(db: AsyncSession, category_id: int) -> str:
    category = await db.get(Category, category_id)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid category",
        )
    return category.name


def _check_upload_count(images: list[UploadFile]) -> None:
    if len(images) > settings.MAX_PRODUCT_IMAGES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {settings.MAX_PRODUCT_IMAGES} images per request",
        )


async def get_product(db: AsyncSession, product_id: int) -> Product:
    product = await db.get(Product, product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )
    return product


async def create_product(
    policy: AccessPolicy,
    *,
    name: str,
    description: str,
    price: float,
    category_id: int,
    features: Optional[str],
    is_available: bool,
    images: list[UploadFile],
) -> Product:
    db = policy.db
    vendor = await policy.require_own_vendor("Vendor not found")
    category_name = await resolve_category_name(db, category_id)
    feature_list = parse_json_list(features, "features") or []
    _check_upload_count(images)

    stored = storage_service.save_uploads(images)

    product = Product(
        vendor_id=vendor.id,
        name=name,
        description=description,
        price=price,
        category=category_name,
        features=[str(f) for f in feature_list],
        images=[item.as_image() for item in stored],
        is_available=is_available,
    )
    db.add(product)
    await db.flush()
    await db.refresh(product)

    logger.info("product_created", product_id=product.id, vendor_id=vendor.id, images=len(stored))
    return product


async def update_product(
    policy: AccessPolicy,
    product_id: int,
    *,
    name: Optional[str] = None,
    description: Optional[str] = None,
    price: Optional[float] = None,
    category_id: Optional[int] = None,
    features: Optional[str] = None,
    is_available: Optional[bool] = None,
    existing_images: Optional[str] = None,
    images: Optional[list[UploadFile]] = None,
) -> Product:
    """
    Partial update by the owning vendor.

    `existing_images` is the JSON list of images to keep; omitted means keep
    all current images. New uploads are appended. Dropped images are
    removed from disk best-effort.
    """
    db = policy.db
    product = await get_product(db, product_id)
    await policy.require_own_vendor()
    await policy.require(Action.MANAGE_PRODUCT, product)

    images = images or []
    _check_upload_count(images)

    if name:
        product.name = name
    if description:
        product.description = description
    if price is not None:
        product.price = price
    if category_id is not None:
        product.category = await resolve_category_name(db, category_id)
    feature_list = parse_json_list(features, "features")
    if feature_list is not None:
        product.features = [str(f) for f in feature_list]
    if is_available is not None:
        product.is_available = is_available

    kept = parse_json_list(existing_images, "existing_images")
    current = list(product.images or [])
    if kept is None:
        kept = current
    kept_urls = {image.get("url") for image in kept if isinstance(image, dict)}
    dropped = [image for image in current if image.get("url") not in kept_urls]

    stored = storage_service.save_uploads(images)
    product.images = [image for image in kept if isinstance(image, dict)] + [item.as_image() for item in stored]

    await db.flush()
    await db.refresh(product)

    for image in dropped:
        _remove_after_commit(db, image.get("url", ""))

    logger.info("product_updated", product_id=product.id, added_images=len(stored), dropped_images=len(dropped))
    return product


def _remove_after_commit(db: AsyncSession, url: str) -> None:
    after_commit(db, lambda: storage_service.remove_upload(url))


async def delete_product(policy: AccessPolicy, product_id: int) -> None:
    """
    Delete a product. Its bookings stay in the ledger with product_id
    cleared; only the vendor cascade removes bookings.
    """
    db = policy.db
    product = await get_product(db, product_id)
    await policy.require_own_vendor()
    await policy.require(Action.MANAGE_PRODUCT, product)

    image_urls = [image.get("url", "") for image in (product.images or [])]
    detached = await db.execute(
        update(Booking).where(Booking.product_id == product_id).values(product_id=None)
    )
    await db.delete(product)
    await db.flush()

    for url in image_urls:
        _remove_after_commit(db, url)
    logger.info("product_deleted", product_id=product_id, bookings_detached=detached.rowcount)


async def resolve_vendor_filter(
    db: AsyncSession,
    vendor_id: Optional[int] = None,
    owner_id: Optional[int] = None,
) -> Optional[int]:
    """Resolve the vendor filter; None when nothing matches both given ids."""
    if vendor_id is not None:
        vendor = await db.get(Vendor, vendor_id)
        if vendor is None:
            return None
        if owner_id is not None and vendor.user_id != owner_id:
            return None
        return vendor.id
    result = await db.execute(select(Vendor.id).where(Vendor.user_id == owner_id))
    return result.scalar_one_or_none()


async def list_products(
    db: AsyncSession,
    vendor_id: Optional[int] = None,
    owner_id: Optional[int] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    sort: str = "rating",
    page: int = 1,
    limit: int = 9,
) -> dict:
    query = select(Product, Vendor.name).join(Vendor, Vendor.id == Product.vendor_id)

    if vendor_id is not None or owner_id is not None:
        resolved = await resolve_vendor_filter(db, vendor_id, owner_id)
        if resolved is None:
            logger.info("products_vendor_not_found", vendor_id=vendor_id, owner_id=owner_id)
            return {
                "products": [],
                "total": 0,
                "total_pages": 0,
                "current_page": page,
                "has_more": False,
            }
        query = query.where(Product.vendor_id == resolved)

    if category and category != "all":
        query = query.where(Product.category == category)

    if search:
        query = query.where(
            or_(
                Product.name.icontains(search, autoescape=True),
                Product.description.icontains(search, autoescape=True),
            )
        )

    if min_price is not None:
        query = query.where(Product.price >= min_price)
    if max_price is not None:
        query = query.where(Product.price <= max_price)

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar() or 0

    if sort == "price_asc":
        query = query.order_by(Product.price.asc(), Product.id.asc())
    elif sort == "price_desc":
        query = query.order_by(Product.price.desc(), Product.id.asc())
    elif sort == "newest":
        query = query.order_by(Product.created_at.desc(), Product.id.desc())
    else:
        query = query.order_by(Vendor.rating.desc(), Product.id.desc())

    result = await db.execute(query.offset((page - 1) * limit).limit(limit))
    products = [
        ProductListItem.model_validate(product).model_copy(update={"vendor_name": vendor_name})
        for product, vendor_name in result.all()
    ]

    total_pages = math.ceil(total / limit)
    return {
        "products": products,
        "total": total,
        "total_pages": total_pages,
        "current_page": page,
        "has_more": page < total_pages,
    }
