"""
Own-account endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.db.session import get_db
from marketplace.schemas.user import UserUpdate, UserResponse, UserEnvelope
from marketplace.services.auth_service import update_profile
from marketplace.core.context import RequestContext
from marketplace.core.security import get_request_context

router = APIRouter(prefix="/users", tags=["Users"])


@router.put("/profile", response_model=UserEnvelope)
async def update_user_profile(
    data: UserUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    user = await update_profile(db, ctx, data)
    return UserEnvelope(user=UserResponse.model_validate(user))
