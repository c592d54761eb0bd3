"""
Vendor directory service: profiles, legacy vendor CRUD and admin lifecycle.

CASCADING DELETE
================

Deleting a vendor removes, in order:
  1. bookings that reference the vendor, any of its products, or that were
     made by the vendor's own user account
  2. the vendor's products
  3. the vendor record
  4. the owning user (admin delete only)

All four steps run in the request's single DB transaction (see
db.session.get_db), so a failure part-way leaves nothing half-deleted.
Image files are removed best-effort once the transaction has committed.
"""

from typing import Optional

from sqlalchemy import select, delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, UploadFile, status

from marketplace.models.booking import Booking
from marketplace.models.category import Category
from marketplace.models.product import Product
from marketplace.models.user import User
from marketplace.models.vendor import Vendor, DEFAULT_VENDOR_CATEGORIES, DEFAULT_PROFILE_IMAGE
from marketplace.schemas.vendor import VendorCreate, VendorUpdate, VendorProfileUpdate
from marketplace.core.metrics import vendor_deletions
from marketplace.core.logging import get_logger
from marketplace.db.session import after_commit
from marketplace.services import storage_service

logger = get_logger(__name__)


async def resolve_vendor_category(db: AsyncSession, name: str) -> str:
    """Vendor categories are the built-in set plus any admin-defined category."""
    name = name.strip()
    for builtin in DEFAULT_VENDOR_CATEGORIES:
        if builtin.lower() == name.lower():
            return builtin

    result = await db.execute(select(Category).where(func.lower(Category.name) == name.lower()))
    category = result.scalar_one_or_none()
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid category: {name}",
        )
    return category.name


async def create_default_vendor(db: AsyncSession, user: User) -> Vendor:
    """Placeholder profile created alongside a vendor-role registration."""
    vendor = Vendor(
        user_id=user.id,
        name=user.name,
        category="Decoration",
        description="New vendor offering services",
        price=0,
        owner_name=user.name,
        email=user.email,
        phone=user.phone,
        address="",
        website="",
        profile_image=DEFAULT_PROFILE_IMAGE,
        images=[],
        reviews=[],
        status="pending",
    )
    db.add(vendor)
    await db.flush()
    await db.refresh(vendor)
    logger.info("vendor_profile_created", vendor_id=vendor.id, user_id=user.id)
    return vendor


async def get_vendor(db: AsyncSession, vendor_id: int) -> Vendor:
    vendor = await db.get(Vendor, vendor_id)
    if not vendor:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vendor not found",
        )
    return vendor


async def get_vendor_for_user(db: AsyncSession, user_id: int) -> Optional[Vendor]:
    result = await db.execute(select(Vendor).where(Vendor.user_id == user_id))
    return result.scalar_one_or_none()


async def list_vendors(db: AsyncSession) -> list[Vendor]:
    result = await db.execute(select(Vendor).order_by(Vendor.created_at.desc(), Vendor.id.desc()))
    return list(result.scalars().all())


async def get_vendor_with_products(db: AsyncSession, vendor_id: int) -> tuple[Vendor, list[Product]]:
    """Vendor plus its products, joined at read time."""
    vendor = await get_vendor(db, vendor_id)
    result = await db.execute(
        select(Product).where(Product.vendor_id == vendor.id).order_by(Product.created_at.desc(), Product.id.desc())
    )
    return vendor, list(result.scalars().all())


async def add_vendor(db: AsyncSession, user_id: int, data: VendorCreate) -> Vendor:
    """Legacy explicit vendor creation. One vendor per user."""
    if await get_vendor_for_user(db, user_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Vendor profile already exists",
        )

    vendor = Vendor(
        user_id=user_id,
        name=data.name,
        category=await resolve_vendor_category(db, data.category),
        description=data.description,
        price=data.price,
        images=list(data.images),
        reviews=[],
        status="pending",
    )
    db.add(vendor)
    await db.flush()
    await db.refresh(vendor)
    logger.info("vendor_added", vendor_id=vendor.id, user_id=user_id)
    return vendor


async def update_vendor(db: AsyncSession, vendor: Vendor, data: VendorUpdate) -> Vendor:
    changes = data.model_dump(exclude_unset=True)
    if changes.get("category"):
        changes["category"] = await resolve_vendor_category(db, changes["category"])
    for field, value in changes.items():
        if value is not None:
            setattr(vendor, field, value)

    await db.flush()
    await db.refresh(vendor)
    logger.info("vendor_updated", vendor_id=vendor.id, fields=sorted(changes))
    return vendor


async def update_own_profile(db: AsyncSession, vendor: Vendor, data: VendorProfileUpdate) -> Vendor:
    """Empty values leave the stored field untouched."""
    changes = {field: value for field, value in data.model_dump().items() if value}
    if "category" in changes:
        changes["category"] = await resolve_vendor_category(db, changes["category"])
    for field, value in changes.items():
        setattr(vendor, field, value)

    await db.flush()
    await db.refresh(vendor)
    logger.info("vendor_profile_updated", vendor_id=vendor.id, fields=sorted(changes))
    return vendor


async def replace_profile_image(db: AsyncSession, vendor: Vendor, upload: UploadFile) -> Vendor:
    stored = storage_service.save_upload(upload)

    previous = vendor.profile_image
    vendor.profile_image = stored.filename
    await db.flush()
    await db.refresh(vendor)

    if previous and previous != DEFAULT_PROFILE_IMAGE:
        after_commit(db, lambda: storage_service.remove_upload(previous))
    logger.info("vendor_profile_image_updated", vendor_id=vendor.id, filename=stored.filename)
    return vendor


async def set_vendor_status(db: AsyncSession, vendor_id: int, new_status: str) -> Vendor:
    vendor = await get_vendor(db, vendor_id)
    previous = vendor.status
    vendor.status = new_status
    await db.flush()
    await db.refresh(vendor)
    logger.info("vendor_status_changed", vendor_id=vendor.id, previous=previous, status=new_status)
    return vendor


async def purge_vendor(db: AsyncSession, vendor: Vendor, delete_user: bool) -> dict:
    """Cascade-delete a vendor. Returns per-entity deletion counts."""
    vendor_id = vendor.id
    user_id = vendor.user_id
    product_ids = select(Product.id).where(Product.vendor_id == vendor_id)

    booking_filter = [Booking.vendor_id == vendor_id, Booking.product_id.in_(product_ids)]
    if delete_user:
        booking_filter.append(Booking.user_id == user_id)

    booking_ids = list((await db.execute(select(Booking.id).where(or_(*booking_filter)))).scalars().all())
    if booking_ids:
        await db.execute(delete(Booking).where(Booking.id.in_(booking_ids)))

    product_rows = (await db.execute(select(Product.id, Product.images).where(Product.vendor_id == vendor_id))).all()
    image_urls = [image.get("url") for _, images in product_rows for image in (images or [])]
    if product_rows:
        await db.execute(delete(Product).where(Product.id.in_([row.id for row in product_rows])))

    profile_image = vendor.profile_image
    await db.delete(vendor)
    await db.flush()

    user_deleted = False
    if delete_user:
        user = await db.get(User, user_id)
        if user:
            await db.delete(user)
            await db.flush()
            user_deleted = True

    def remove_files() -> None:
        for url in image_urls:
            storage_service.remove_upload(url)
        if profile_image and profile_image != DEFAULT_PROFILE_IMAGE:
            storage_service.remove_upload(profile_image)

    after_commit(db, remove_files)

    vendor_deletions.inc()
    logger.info(
        "vendor_deleted",
        vendor_id=vendor_id,
        products_deleted=len(product_rows),
        bookings_deleted=len(booking_ids),
        user_deleted=user_deleted,
    )
    return {
        "products_deleted": len(product_rows),
        "bookings_deleted": len(booking_ids),
        "user_deleted": user_deleted,
        "vendor_deleted": True,
    }


async def delete_vendor_cascade(db: AsyncSession, vendor_id: int) -> dict:
    """Admin delete: vendor, its products and bookings, and the owning user."""
    vendor = await get_vendor(db, vendor_id)
    return await purge_vendor(db, vendor, delete_user=True)
