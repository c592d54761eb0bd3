"""
Category taxonomy service. Every write invalidates the cached public list
once the request transaction has committed.
"""

from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from marketplace.models.category import Category, DEFAULT_CATEGORY_ICON
from marketplace.models.vendor import Vendor
from marketplace.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse, CategoryWithStats
from marketplace.core.logging import get_logger
from marketplace.db.session import after_commit
from marketplace.services.cache_service import (
    get_cached_categories,
    set_cached_categories,
    invalidate_category_cache,
)

logger = get_logger(__name__)


async def list_active_categories(db: AsyncSession) -> list[dict]:
    """Active categories by name. Served from Redis when available."""
    cached = await get_cached_categories()
    if cached is not None:
        return cached

    result = await db.execute(
        select(Category).where(Category.is_active.is_(True)).order_by(Category.name.asc())
    )
    categories = [
        CategoryResponse.model_validate(c).model_dump(mode="json")
        for c in result.scalars().all()
    ]
    await set_cached_categories(categories)
    return categories


async def list_categories_with_stats(db: AsyncSession) -> list[CategoryWithStats]:
    """All categories, including inactive ones, with their active-vendor count."""
    counts = (
        select(Vendor.category, func.count(Vendor.id).label("vendor_count"))
        .where(Vendor.status == "active")
        .group_by(Vendor.category)
        .subquery()
    )
    result = await db.execute(
        select(Category, counts.c.vendor_count)
        .outerjoin(counts, counts.c.category == Category.name)
        .order_by(Category.name.asc())
    )
    return [
        CategoryWithStats.model_validate(category).model_copy(update={"vendor_count": vendor_count or 0})
        for category, vendor_count in result.all()
    ]


async def get_category(db: AsyncSession, category_id: int) -> Category:
    category = await db.get(Category, category_id)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )
    return category


async def _ensure_name_free(db: AsyncSession, name: str, exclude_id: Optional[int] = None) -> None:
    query = select(Category.id).where(func.lower(Category.name) == name.lower())
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    if (await db.execute(query)).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Category name already exists",
        )


async def create_category(db: AsyncSession, data: CategoryCreate) -> Category:
    await _ensure_name_free(db, data.name)

    category = Category(
        name=data.name,
        description=data.description,
        icon=data.icon or DEFAULT_CATEGORY_ICON,
        is_active=True,
    )
    db.add(category)
    await db.flush()
    await db.refresh(category)

    after_commit(db, invalidate_category_cache)
    logger.info("category_created", category_id=category.id, name=category.name)
    return category


async def update_category(db: AsyncSession, category_id: int, data: CategoryUpdate) -> Category:
    category = await get_category(db, category_id)

    if data.name is not None:
        name = data.name.strip()
        if not name:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Category name is required",
            )
        await _ensure_name_free(db, name, exclude_id=category.id)
        category.name = name
    if data.description is not None:
        category.description = data.description.strip()
    if data.icon:
        category.icon = data.icon
    if data.is_active is not None:
        category.is_active = data.is_active

    await db.flush()
    await db.refresh(category)

    after_commit(db, invalidate_category_cache)
    logger.info("category_updated", category_id=category.id)
    return category


async def delete_category(db: AsyncSession, category_id: int) -> tuple[str, Optional[Category]]:
    """
    Hard-delete a category, or deactivate it when vendors still use it.
    Returns the response message and the deactivated category, if any.
    """
    category = await get_category(db, category_id)

    in_use = (
        await db.execute(select(func.count(Vendor.id)).where(Vendor.category == category.name))
    ).scalar() or 0

    if in_use:
        category.is_active = False
        await db.flush()
        await db.refresh(category)
        after_commit(db, invalidate_category_cache)
        logger.info("category_deactivated", category_id=category.id, vendors_using=in_use)
        return "Category is in use by vendors and has been deactivated instead of deleted", category

    await db.delete(category)
    await db.flush()
    after_commit(db, invalidate_category_cache)
    logger.info("category_deleted", category_id=category_id)
    return "Category deleted successfully", None
