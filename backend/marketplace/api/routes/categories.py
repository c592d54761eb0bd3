"""
Public category taxonomy. Cached in Redis, see services.cache_service.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.db.session import get_db
from marketplace.schemas.category import CategoryResponse
from marketplace.services.category_service import list_active_categories

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await list_active_categories(db)
